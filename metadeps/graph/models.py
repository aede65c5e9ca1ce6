"""Data structures for the component dependency graph."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from metadeps.models.records import ComponentType


@dataclass(eq=False)
class GraphNode:
    """A node in the dependency graph representing one metadata component.

    ``parent`` is the qualifier prefix (``"Account."``) for components whose
    name is ambiguous without their owning object, and empty otherwise.
    Adjacency holds destination ids only; the graph owns every node.
    """

    id: str
    name: str
    type: ComponentType
    parent: str = ""
    _adjacency: dict[str, None] = field(default_factory=dict, repr=False)

    @property
    def label(self) -> str:
        """Qualified display name, e.g. ``Account.Region__c``."""
        return f"{self.parent}{self.name}"

    def add_edge(self, dest_id: str) -> None:
        """Record a dependency on *dest_id*. Re-adding a destination is a no-op."""
        self._adjacency[dest_id] = None

    def edge_ids(self) -> Iterator[str]:
        return iter(self._adjacency)


@dataclass(frozen=True)
class GraphEdge:
    """A directed dependency ``source -> target`` between two node ids."""

    source: str
    target: str
