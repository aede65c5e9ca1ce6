"""Graph construction from the component dependency feed.

Construction runs in two phases:

1. ``load_lookups`` discovers every component id touched by a
   parent-qualified dependency and hydrates the auxiliary tables (fields,
   validation rules, quick actions, custom objects, field definitions).
   The fetches run sequentially because each one depends on ids found by
   the previous one.
2. ``GraphBuilder.build_graph`` turns a batch of dependency records into a
   fresh DependencyGraph, qualifying ambiguous names with their owning
   object and inferring object-to-object edges from lookup fields.

Lookups that find nothing never raise: the affected qualifier or edge is
skipped, since org metadata is routinely incomplete or stale.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace

from metadeps.graph.closure import transitive_closure
from metadeps.graph.dependency_graph import DependencyGraph
from metadeps.graph.models import GraphNode
from metadeps.models.records import (
    DependencyRecord,
    FieldDefinitionRecord,
    FieldRecord,
    ObjectRecord,
    QuickActionRecord,
    ValidationRuleRecord,
)
from metadeps.observability.logging import get_logger
from metadeps.observability.metrics import graph_build_duration_seconds, graph_builds_total
from metadeps.source.base import RecordSource

_logger = get_logger("graph.builder")

# Ids starting with this character are raw object ids, not API names.
OBJECT_ID_PREFIX = "0"
CUSTOM_OBJECT_SUFFIX = "__c"

# Component types whose name is ambiguous without the owning object.
QUALIFIED_TYPES: frozenset[str] = frozenset({"CustomField", "ValidationRule", "QuickAction"})

# Aura bundle membership: the feed only records member -> bundle.
BUNDLE_MEMBER_TYPE = "AuraDefinition"
BUNDLE_TYPE = "AuraDefinitionBundle"

_LOOKUP_PREFIX = "Lookup"


def is_lookup(data_type: str) -> bool:
    return data_type.startswith(_LOOKUP_PREFIX)


def lookup_target(data_type: str) -> str:
    """Strip the wrapper from a lookup data type: ``Lookup(Account)`` -> ``Account``."""
    return data_type[data_type.find("(") + 1 : data_type.rfind(")")]


@dataclass(frozen=True)
class MetadataLookups:
    """Auxiliary tables produced by ``load_lookups``.

    ``lookup_relationships`` holds the lookup-typed field definitions with
    ``data_type`` already reduced to the target object name.
    """

    component_ids: tuple[str, ...] = ()
    fields: tuple[FieldRecord, ...] = ()
    validation_rules: tuple[ValidationRuleRecord, ...] = ()
    quick_actions: tuple[QuickActionRecord, ...] = ()
    objects: tuple[ObjectRecord, ...] = ()
    field_definitions: tuple[FieldDefinitionRecord, ...] = ()
    lookup_relationships: tuple[FieldDefinitionRecord, ...] = ()

    def object_ids(self) -> list[str]:
        """Owner references on fields and validation rules that are raw object ids."""
        owners = [f.owning_entity_id for f in self.fields]
        owners += [v.owning_entity_id for v in self.validation_rules]
        return [o for o in owners if o.startswith(OBJECT_ID_PREFIX)]

    def resolve_owner(self, owner: str) -> str | None:
        """Turn an owner reference into an object API name.

        Plain API names pass through.  Object ids resolve through the
        custom object table; None if the object was not fetched.
        """
        if not owner.startswith(OBJECT_ID_PREFIX):
            return owner
        for obj in self.objects:
            if obj.id.startswith(owner):
                return obj.developer_name + CUSTOM_OBJECT_SUFFIX
        return None

    def parent_map(self) -> dict[str, str]:
        """Map component id -> owning object API name."""
        pairs: list[tuple[str, str]] = [(v.id, v.owning_entity_id) for v in self.validation_rules]
        pairs += [(f.id, f.owning_entity_id) for f in self.fields]
        pairs += [(q.id, q.owning_object_type) for q in self.quick_actions]

        parents: dict[str, str] = {}
        for component_id, owner in pairs:
            resolved = self.resolve_owner(owner)
            if resolved is None:
                _logger.debug("owner_unresolved", component_id=component_id, owner=owner)
                continue
            parents[component_id] = resolved
        return parents


async def discover_component_ids(source: RecordSource) -> list[str]:
    """Distinct ids on either side of every dependency touching a qualified type."""
    records = await source.fetch_dependencies(types=sorted(QUALIFIED_TYPES))
    ids = [r.source_id for r in records] + [r.target_id for r in records]
    return list(dict.fromkeys(ids))


async def load_lookups(source: RecordSource) -> MetadataLookups:
    """Hydrate every auxiliary table the builder needs.

    Any RecordSourceError propagates; there is no partial result.
    """
    component_ids = await discover_component_ids(source)
    fields = await source.fetch_fields(component_ids)
    validation_rules = await source.fetch_validation_rules(component_ids)
    quick_actions = await source.fetch_quick_actions(component_ids)

    partial = MetadataLookups(
        component_ids=tuple(component_ids),
        fields=tuple(fields),
        validation_rules=tuple(validation_rules),
        quick_actions=tuple(quick_actions),
    )
    objects = await source.fetch_objects(list(dict.fromkeys(partial.object_ids())))

    entity_ids = list(dict.fromkeys(f.owning_entity_id for f in fields))
    definitions: list[FieldDefinitionRecord] = []
    relationships: list[FieldDefinitionRecord] = []
    for definition in await source.fetch_field_definitions(entity_ids):
        if is_lookup(definition.data_type):
            definition = replace(definition, data_type=lookup_target(definition.data_type))
            relationships.append(definition)
        definitions.append(definition)

    lookups = replace(
        partial,
        objects=tuple(objects),
        field_definitions=tuple(definitions),
        lookup_relationships=tuple(relationships),
    )
    _logger.info(
        "lookups_loaded",
        component_ids=len(component_ids),
        fields=len(fields),
        validation_rules=len(validation_rules),
        quick_actions=len(quick_actions),
        objects=len(objects),
        field_definitions=len(definitions),
        lookup_relationships=len(lookups.lookup_relationships),
    )
    return lookups


def _qualifier(component_id: str, component_type: str, parents: Mapping[str, str]) -> str:
    if component_type not in QUALIFIED_TYPES:
        return ""
    parent = parents.get(component_id)
    if parent is None:
        _logger.debug("qualifier_unresolved", component_id=component_id, type=component_type)
        return ""
    return parent + "."


class GraphBuilder:
    """Builds dependency graphs from record batches.

    A builder is bound to the lookups of one ``load_lookups`` run, so a
    graph can never be built before its lookup tables exist.  Every
    ``build_graph`` call discards the previous graph.
    """

    def __init__(self, lookups: MetadataLookups) -> None:
        self._lookups = lookups
        self.graph = DependencyGraph()

    @property
    def lookups(self) -> MetadataLookups:
        return self._lookups

    def build_graph(self, records: Iterable[DependencyRecord]) -> DependencyGraph:
        """Build a fresh graph from *records* and return it."""
        t_start = time.monotonic()
        graph = DependencyGraph()
        parents = self._lookups.parent_map()
        processed = 0
        skipped = 0

        for record in records:
            processed += 1
            if not self._link_record(graph, record, parents):
                skipped += 1

        inferred = self.add_field_relationships(graph)
        self.graph = graph

        duration = time.monotonic() - t_start
        graph_build_duration_seconds.observe(duration)
        graph_builds_total.inc()
        _logger.info(
            "graph_built",
            records=processed,
            skipped_placeholders=skipped,
            nodes=graph.node_count,
            edges=graph.edge_count,
            inferred_edges=inferred,
            duration_ms=round(duration * 1000.0, 2),
        )
        return graph

    @staticmethod
    def _link_record(
        graph: DependencyGraph,
        record: DependencyRecord,
        parents: Mapping[str, str],
    ) -> bool:
        """Add the nodes and edge(s) for one record.  False if the record was skipped."""
        if record.target_name.startswith(OBJECT_ID_PREFIX):
            _logger.debug(
                "placeholder_target_skipped",
                source_id=record.source_id,
                target=record.target_name,
            )
            return False

        src = graph.get_or_create_node(
            record.source_id,
            record.source_name,
            record.source_type,
            _qualifier(record.source_id, record.source_type, parents),
        )
        dst = graph.get_or_create_node(
            record.target_id,
            record.target_name,
            record.target_type,
            _qualifier(record.target_id, record.target_type, parents),
        )
        graph.add_edge(src, dst)

        if record.source_type == BUNDLE_MEMBER_TYPE and record.target_type == BUNDLE_TYPE:
            graph.add_edge(dst, src)
        return True

    def add_field_relationships(self, graph: DependencyGraph | None = None) -> int:
        """Link objects to the objects their lookup fields point at.

        Returns the number of new edges.
        """
        graph = graph if graph is not None else self.graph
        added = 0
        for definition in self._lookups.lookup_relationships:
            if not definition.owning_entity_id or not definition.data_type:
                continue
            owner = graph.find_by_short_id(definition.owning_entity_id)
            target = graph.find_object_by_name(definition.data_type)
            if owner is None or target is None:
                continue
            if graph.add_edge(owner, target):
                added += 1
        return added

    def run_dfs(self, seeds: Iterable[GraphNode]) -> DependencyGraph:
        """Narrow the current graph to the closure of *seeds*."""
        return transitive_closure(self.graph, seeds)
