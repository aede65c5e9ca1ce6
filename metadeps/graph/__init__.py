"""Metadata component dependency graph.

Builds an in-memory directed graph from the platform's component
dependency feed, enriched with owning-object qualifiers and lookup-field
relationships, and narrows it to the transitive closure of seed components.
"""

from metadeps.graph.builder import GraphBuilder, MetadataLookups, load_lookups
from metadeps.graph.closure import transitive_closure
from metadeps.graph.dependency_graph import DependencyGraph
from metadeps.graph.export import to_dot, to_json
from metadeps.graph.models import GraphEdge, GraphNode

__all__ = [
    "DependencyGraph",
    "GraphBuilder",
    "GraphEdge",
    "GraphNode",
    "MetadataLookups",
    "load_lookups",
    "to_dot",
    "to_json",
    "transitive_closure",
]
