"""Shared fixtures and factories for metadeps tests."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import pytest

from metadeps.models.records import (
    DependencyRecord,
    FieldDefinitionRecord,
    FieldRecord,
    ObjectRecord,
    QuickActionRecord,
    ValidationRuleRecord,
    component_type,
)
from metadeps.source.base import RecordSource, RecordSourceError

# ---------------------------------------------------------------------------
# Record factories
# ---------------------------------------------------------------------------


def make_dependency(
    source_id: str,
    target_id: str,
    source_type: str = "ApexClass",
    target_type: str = "ApexClass",
    source_name: str | None = None,
    target_name: str | None = None,
) -> DependencyRecord:
    """Create a DependencyRecord; names default to the ids' suffix."""
    return DependencyRecord(
        source_id=source_id,
        source_name=source_name if source_name is not None else f"C_{source_id}",
        source_type=component_type(source_type),
        target_id=target_id,
        target_name=target_name if target_name is not None else f"C_{target_id}",
        target_type=component_type(target_type),
    )


class FakeRecordSource(RecordSource):
    """In-memory RecordSource that records the order of calls."""

    def __init__(
        self,
        dependencies: Sequence[DependencyRecord] = (),
        fields: Sequence[FieldRecord] = (),
        validation_rules: Sequence[ValidationRuleRecord] = (),
        quick_actions: Sequence[QuickActionRecord] = (),
        objects: Sequence[ObjectRecord] = (),
        field_definitions: Sequence[FieldDefinitionRecord] = (),
        fail_on: str = "",
    ) -> None:
        self.dependencies = list(dependencies)
        self.fields = list(fields)
        self.validation_rules = list(validation_rules)
        self.quick_actions = list(quick_actions)
        self.objects = list(objects)
        self.field_definitions = list(field_definitions)
        self.fail_on = fail_on
        self.calls: list[tuple[str, tuple[str, ...]]] = []
        self.closed = False

    def _record(self, name: str, ids: Iterable[str]) -> None:
        self.calls.append((name, tuple(ids)))
        if name == self.fail_on:
            raise RecordSourceError(f"{name} unavailable", query=name)

    async def fetch_dependencies(self, types: Iterable[str] | None = None) -> list[DependencyRecord]:
        wanted = set(types or ())
        self._record("dependencies", sorted(wanted))
        if not wanted:
            return list(self.dependencies)
        return [d for d in self.dependencies if d.source_type in wanted or d.target_type in wanted]

    async def fetch_fields(self, ids: Sequence[str]) -> list[FieldRecord]:
        self._record("fields", ids)
        return [f for f in self.fields if f.id in ids]

    async def fetch_validation_rules(self, ids: Sequence[str]) -> list[ValidationRuleRecord]:
        self._record("validation_rules", ids)
        return [v for v in self.validation_rules if v.id in ids]

    async def fetch_quick_actions(self, ids: Sequence[str]) -> list[QuickActionRecord]:
        self._record("quick_actions", ids)
        return [q for q in self.quick_actions if q.id in ids]

    async def fetch_objects(self, ids: Sequence[str]) -> list[ObjectRecord]:
        self._record("objects", ids)
        return [o for o in self.objects if any(o.id.startswith(i) for i in ids)]

    async def fetch_field_definitions(self, entity_ids: Sequence[str]) -> list[FieldDefinitionRecord]:
        self._record("field_definitions", entity_ids)
        return [d for d in self.field_definitions if d.owning_entity_id in entity_ids]

    async def aclose(self) -> None:
        self.closed = True


# ---------------------------------------------------------------------------
# Org fixture: a small but realistic metadata slice
# ---------------------------------------------------------------------------

# Custom object Invoice__c has id 01I000000000001; Account is standard.
INVOICE_OBJECT_ID = "01I000000000001"
INVOICE_OBJECT_ID_18 = "01I000000000001AAA"


@pytest.fixture
def org_source() -> FakeRecordSource:
    """A source describing:

    - ApexClass InvoiceService uses field Invoice__c.Amount__c
    - Field Invoice__c.Account__c (lookup to Account)
    - ValidationRule Account.Require_Region uses field Account.Region__c
    - QuickAction Account.New_Invoice uses ApexClass InvoiceService
    - Aura component InvoiceCmp.cmp belongs to bundle InvoiceCmp
    - A dependency on an unresolved placeholder (target name starts with 0)
    """
    dependencies = [
        make_dependency("01p0001", "00N0001", "ApexClass", "CustomField", "InvoiceService", "Amount__c"),
        make_dependency("01p0001", "00N0002", "ApexClass", "CustomField", "InvoiceService", "Account__c"),
        make_dependency("03d0001", "00N0003", "ValidationRule", "CustomField", "Require_Region", "Region__c"),
        make_dependency("09D0001", "01p0001", "QuickAction", "ApexClass", "New_Invoice", "InvoiceService"),
        make_dependency("0Ad0001", "0Ab0001", "AuraDefinition", "AuraDefinitionBundle", "InvoiceCmp.cmp", "InvoiceCmp"),
        make_dependency("01p0001", INVOICE_OBJECT_ID_18, "ApexClass", "CustomObject", "InvoiceService", "Invoice"),
        make_dependency("01p0002", "0000000000XYZ", "ApexClass", "ApexClass", "Orphan", "000000000000XYZ"),
        make_dependency("01p0002", "Account", "ApexClass", "CustomObject", "Orphan", "Account"),
    ]
    return FakeRecordSource(
        dependencies=dependencies,
        fields=[
            FieldRecord(id="00N0001", owning_entity_id=INVOICE_OBJECT_ID),
            FieldRecord(id="00N0002", owning_entity_id=INVOICE_OBJECT_ID),
            FieldRecord(id="00N0003", owning_entity_id="Account"),
        ],
        validation_rules=[ValidationRuleRecord(id="03d0001", owning_entity_id="Account")],
        quick_actions=[QuickActionRecord(id="09D0001", owning_object_type="Account")],
        objects=[ObjectRecord(id=INVOICE_OBJECT_ID_18, developer_name="Invoice")],
        field_definitions=[
            FieldDefinitionRecord(
                owning_entity_id=INVOICE_OBJECT_ID,
                data_type="Lookup(Account)",
                durable_id=f"{INVOICE_OBJECT_ID}.00N0002",
            ),
            FieldDefinitionRecord(
                owning_entity_id=INVOICE_OBJECT_ID,
                data_type="Currency(16, 2)",
                durable_id=f"{INVOICE_OBJECT_ID}.00N0001",
            ),
            FieldDefinitionRecord(
                owning_entity_id="Account",
                data_type="Picklist",
                durable_id="Account.00N0003",
            ),
        ],
    )
