"""Tests for DOT and JSON rendering."""

from __future__ import annotations

import json
import re

from metadeps.graph.dependency_graph import DependencyGraph
from metadeps.graph.export import to_dot, to_json
from metadeps.models.records import component_type


def _sample_graph() -> DependencyGraph:
    graph = DependencyGraph()
    cls = graph.get_or_create_node("01p1", "InvoiceService", component_type("ApexClass"))
    fld = graph.get_or_create_node("00N1", "Amount__c", component_type("CustomField"), "Invoice__c.")
    obj = graph.get_or_create_node("01I1", "Invoice", component_type("CustomObject"))
    graph.add_edge(cls, fld)
    graph.add_edge(cls, obj)
    graph.add_edge(fld, fld)
    return graph


class TestDot:
    def test_header_and_footer(self) -> None:
        lines = to_dot(_sample_graph()).splitlines()
        assert lines[0] == "digraph graphname {"
        assert lines[1] == "  rankdir=RL;"
        assert lines[2].startswith("  node[shape=Mrecord")
        assert lines[-1] == "}"

    def test_node_line_format(self) -> None:
        dot = to_dot(_sample_graph())
        assert '  X00N1 [label=<Invoice__c.Amount__c<BR/><FONT POINT-SIZE="8">CustomField</FONT>>]' in dot

    def test_edge_lines_prefix_both_ends(self) -> None:
        dot = to_dot(_sample_graph())
        assert "  X01p1->X00N1" in dot.splitlines()
        assert "  X00N1->X00N1" in dot.splitlines()

    def test_counts_match_graph(self) -> None:
        graph = _sample_graph()
        dot = to_dot(graph)
        node_ids = re.findall(r"^  X(\S+) \[label=", dot, flags=re.MULTILINE)
        edge_lines = re.findall(r"^  X\S+->X\S+$", dot, flags=re.MULTILINE)
        assert sorted(node_ids) == sorted(n.id for n in graph.nodes)
        assert len(edge_lines) == graph.edge_count

    def test_label_text_escaped(self) -> None:
        graph = DependencyGraph()
        graph.get_or_create_node("0Ad1", "a<b>&c", component_type("AuraDefinition"))
        assert "a&lt;b&gt;&amp;c<BR/>" in to_dot(graph)

    def test_empty_graph(self) -> None:
        assert to_dot(DependencyGraph()).splitlines() == [
            "digraph graphname {",
            "  rankdir=RL;",
            "  node[shape=Mrecord, bgcolor=black, fillcolor=lightblue, style=filled];",
            "  // Nodes",
            "  // Paths",
            "}",
        ]


class TestJson:
    def test_shape_and_order(self) -> None:
        data = to_json(_sample_graph())
        assert data["nodes"] == [
            {"id": "01p1", "name": "InvoiceService", "type": "ApexClass", "parent": ""},
            {"id": "00N1", "name": "Amount__c", "type": "CustomField", "parent": "Invoice__c."},
            {"id": "01I1", "name": "Invoice", "type": "CustomObject", "parent": ""},
        ]
        assert data["edges"] == [
            {"from": "01p1", "to": "00N1"},
            {"from": "01p1", "to": "01I1"},
            {"from": "00N1", "to": "00N1"},
        ]

    def test_serializable(self) -> None:
        text = json.dumps(to_json(_sample_graph()))
        assert json.loads(text)["edges"][0] == {"from": "01p1", "to": "00N1"}
