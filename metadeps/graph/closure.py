"""Transitive closure of a dependency graph from a set of seed components."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from metadeps.graph.dependency_graph import DependencyGraph
from metadeps.graph.models import GraphEdge, GraphNode
from metadeps.observability.logging import get_logger
from metadeps.observability.metrics import closure_runs_total

_logger = get_logger("graph.closure")


class _DepthFirstSearch:
    """Depth-first walk sharing visited state across every seed.

    The walk uses an explicit stack of adjacency iterators.  It visits nodes
    and records edges in the same order as the recursive formulation, but
    it does not consume interpreter stack on long dependency chains.
    """

    def __init__(self, graph: DependencyGraph) -> None:
        self._graph = graph
        self.visited: dict[str, GraphNode] = {}
        self.visited_edges: dict[GraphEdge, None] = {}

    def run_node(self, start: GraphNode) -> None:
        if start.id in self.visited:
            return
        self.visited[start.id] = start
        stack: list[tuple[GraphNode, Iterator[GraphNode]]] = [
            (start, self._graph.successors(start)),
        ]
        while stack:
            node, pending = stack[-1]
            for dest in pending:
                self.visited_edges[GraphEdge(source=node.id, target=dest.id)] = None
                if dest.id not in self.visited:
                    self.visited[dest.id] = dest
                    stack.append((dest, self._graph.successors(dest)))
                    break
            else:
                stack.pop()


def transitive_closure(graph: DependencyGraph, seeds: Iterable[GraphNode]) -> DependencyGraph:
    """Narrow *graph* in place to everything reachable from *seeds*.

    Seeds are resolved against the graph by id; a seed the graph has never
    seen is inserted with its own attributes and contributes only itself.
    The result is the union of every seed's closure.  Returns *graph*.
    """
    dfs = _DepthFirstSearch(graph)
    seed_count = 0
    for seed in seeds:
        node = graph.get_or_create_node(seed.id, seed.name, seed.type, seed.parent)
        dfs.run_node(node)
        seed_count += 1

    before = (graph.node_count, graph.edge_count)
    graph.replace(dfs.visited, dfs.visited_edges)
    closure_runs_total.inc()
    _logger.info(
        "closure_complete",
        seeds=seed_count,
        nodes_before=before[0],
        edges_before=before[1],
        nodes=graph.node_count,
        edges=graph.edge_count,
    )
    return graph
