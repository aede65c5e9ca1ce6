"""Renderers for a finished dependency graph: Graphviz DOT and plain dicts."""

from __future__ import annotations

from html import escape

from metadeps.graph.dependency_graph import DependencyGraph


def _html(text: str) -> str:
    return escape(text, quote=False)


def to_dot(graph: DependencyGraph) -> str:
    """Render *graph* as a DOT digraph.

    Node identifiers are the component id prefixed with ``X`` (ids may start
    with a digit).  Labels are HTML-like: qualified name, then the type in a
    smaller font.
    """
    lines = [
        "digraph graphname {",
        "  rankdir=RL;",
        "  node[shape=Mrecord, bgcolor=black, fillcolor=lightblue, style=filled];",
        "  // Nodes",
    ]
    for node in graph.nodes:
        lines.append(
            f"  X{node.id} [label=<{_html(node.label)}"
            f'<BR/><FONT POINT-SIZE="8">{_html(node.type)}</FONT>>]'
        )
    lines.append("  // Paths")
    for edge in graph.edges:
        lines.append(f"  X{edge.source}->X{edge.target}")
    lines.append("}")
    return "\n".join(lines)


def to_json(graph: DependencyGraph) -> dict[str, list[dict[str, str]]]:
    """Render *graph* as ``{"nodes": [...], "edges": [...]}`` ready for json.dumps."""
    return {
        "nodes": [
            {"id": node.id, "name": node.name, "type": str(node.type), "parent": node.parent}
            for node in graph.nodes
        ],
        "edges": [{"from": edge.source, "to": edge.target} for edge in graph.edges],
    }
