"""Typed rows returned by a record source.

Each record type mirrors one query object of the platform's Tooling API.
``from_row`` maps the platform column names onto the snake_case fields
used everywhere else in metadeps.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NewType

ComponentType = NewType("ComponentType", str)


def component_type(value: str) -> ComponentType:
    """Validate *value* as a component category.

    Categories are an open set (the platform adds new ones over time),
    so the only requirement is a non-blank string.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid component type: {value!r}")
    return ComponentType(value)


def _str(row: dict[str, Any], key: str) -> str:
    value = row.get(key)
    return "" if value is None else str(value)


@dataclass(frozen=True)
class DependencyRecord:
    """One MetadataComponentDependency row: *source* depends on *target*."""

    source_id: str
    source_name: str
    source_type: ComponentType
    target_id: str
    target_name: str
    target_type: ComponentType

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> DependencyRecord:
        return cls(
            source_id=_str(row, "MetadataComponentId"),
            source_name=_str(row, "MetadataComponentName"),
            source_type=component_type(_str(row, "MetadataComponentType")),
            target_id=_str(row, "RefMetadataComponentId"),
            target_name=_str(row, "RefMetadataComponentName"),
            target_type=component_type(_str(row, "RefMetadataComponentType")),
        )


@dataclass(frozen=True)
class FieldRecord:
    """CustomField row. ``owning_entity_id`` is an object API name or object id."""

    id: str
    owning_entity_id: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> FieldRecord:
        return cls(id=_str(row, "Id"), owning_entity_id=_str(row, "TableEnumOrId"))


@dataclass(frozen=True)
class ValidationRuleRecord:
    id: str
    owning_entity_id: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> ValidationRuleRecord:
        return cls(id=_str(row, "Id"), owning_entity_id=_str(row, "EntityDefinitionId"))


@dataclass(frozen=True)
class QuickActionRecord:
    id: str
    owning_object_type: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> QuickActionRecord:
        return cls(id=_str(row, "Id"), owning_object_type=_str(row, "SobjectType"))


@dataclass(frozen=True)
class ObjectRecord:
    """CustomObject row (id -> developer name, without the ``__c`` suffix)."""

    id: str
    developer_name: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> ObjectRecord:
        return cls(id=_str(row, "Id"), developer_name=_str(row, "DeveloperName"))


@dataclass(frozen=True)
class FieldDefinitionRecord:
    """FieldDefinition row.

    ``data_type`` holds the raw platform type (``Lookup(Account)``) until
    the lookups are loaded, after which lookup entries carry only the
    target object name.
    """

    owning_entity_id: str
    data_type: str
    durable_id: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> FieldDefinitionRecord:
        return cls(
            owning_entity_id=_str(row, "EntityDefinitionId"),
            data_type=_str(row, "DataType"),
            durable_id=_str(row, "DurableId"),
        )
