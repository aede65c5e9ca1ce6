"""In-memory component dependency graph.

The graph is a single arena: ``_nodes`` owns every GraphNode and nodes
reference each other by id only.  Edges are kept twice, as adjacency on
the source node for traversal and as an insertion-ordered set for export.
``add_edge`` is the only writer of either, so the two never drift.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from metadeps.graph.models import GraphEdge, GraphNode
from metadeps.models.records import ComponentType

OBJECT_TYPE = ComponentType("CustomObject")


class DependencyGraph:
    """Node/edge container with id-keyed lookup.

    Not thread-safe; callers serialize access to one instance.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, GraphNode] = {}
        # dict used as an ordered set
        self._edges: dict[GraphEdge, None] = {}

    @property
    def nodes(self) -> list[GraphNode]:
        return list(self._nodes.values())

    @property
    def edges(self) -> list[GraphEdge]:
        return list(self._edges)

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def node(self, node_id: str) -> GraphNode | None:
        return self._nodes.get(node_id)

    def get_or_create_node(
        self,
        node_id: str,
        name: str,
        type: ComponentType,
        parent: str = "",
    ) -> GraphNode:
        """Return the node for *node_id*, creating it on first sight.

        First writer wins: attributes passed for an id that already exists
        are ignored.
        """
        node = self._nodes.get(node_id)
        if node is not None:
            return node
        node = GraphNode(id=node_id, name=name, type=type, parent=parent)
        self._nodes[node_id] = node
        return node

    def add_edge(self, source: GraphNode, dest: GraphNode) -> bool:
        """Link *source* -> *dest*.  Returns False if the edge already existed."""
        source.add_edge(dest.id)
        edge = GraphEdge(source=source.id, target=dest.id)
        if edge in self._edges:
            return False
        self._edges[edge] = None
        return True

    def successors(self, node: GraphNode) -> Iterator[GraphNode]:
        """Yield the nodes *node* depends on, in adjacency order."""
        for dest_id in node.edge_ids():
            dest = self._nodes.get(dest_id)
            if dest is not None:
                yield dest

    def find_object_by_name(self, prefix: str) -> GraphNode | None:
        """Find a CustomObject node whose name starts with *prefix*.

        Scans every node and keeps the last match, so when several objects
        share the prefix the most recently inserted one wins.
        """
        found: GraphNode | None = None
        for node in self._nodes.values():
            if node.name.startswith(prefix) and node.type == OBJECT_TYPE:
                found = node
        return found

    def find_by_short_id(self, prefix: str) -> GraphNode | None:
        """Find a node whose id starts with *prefix* (15-char ids vs 18-char ids).

        Last match wins, as in ``find_object_by_name``.
        """
        found: GraphNode | None = None
        for node in self._nodes.values():
            if node.id.startswith(prefix):
                found = node
        return found

    def replace(self, nodes: Mapping[str, GraphNode], edges: Iterable[GraphEdge]) -> None:
        """Swap in a new node mapping and edge set wholesale."""
        self._nodes = dict(nodes)
        self._edges = dict.fromkeys(edges)
