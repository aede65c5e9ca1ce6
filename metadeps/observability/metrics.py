"""Prometheus metrics for record fetching and graph construction."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

records_fetched_total = Counter(
    "metadeps_records_fetched_total",
    "Rows returned by the record source, by query object",
    ["sobject"],
)

source_queries_total = Counter(
    "metadeps_source_queries_total",
    "Tooling API query requests, by outcome",
    ["outcome"],
)

graph_builds_total = Counter(
    "metadeps_graph_builds_total",
    "Completed dependency graph builds",
)

graph_build_duration_seconds = Histogram(
    "metadeps_graph_build_duration_seconds",
    "Wall time of build_graph including field relationship inference",
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0),
)

closure_runs_total = Counter(
    "metadeps_closure_runs_total",
    "Transitive closure traversals",
)
