"""Click commands for building and exporting dependency graphs."""

from __future__ import annotations

import asyncio
import json
import uuid
from collections.abc import Sequence
from pathlib import Path

import click

from metadeps import __version__
from metadeps.config import load_config
from metadeps.graph.builder import GraphBuilder, load_lookups
from metadeps.graph.dependency_graph import DependencyGraph
from metadeps.graph.export import to_dot, to_json
from metadeps.graph.models import GraphNode
from metadeps.models.config import MetadepsConfig
from metadeps.models.records import component_type
from metadeps.observability.logging import bind_run_context, get_logger, setup_logging
from metadeps.source.base import RecordSource, RecordSourceError
from metadeps.source.tooling import ToolingRecordSource

UNKNOWN_TYPE = component_type("Unknown")


def make_source(config: MetadepsConfig) -> RecordSource:
    """Build the record source for *config*.  Tests patch this."""
    return ToolingRecordSource(config.source)


def seed_nodes(graph: DependencyGraph, seed_ids: Sequence[str]) -> list[GraphNode]:
    """Resolve seed ids to nodes; ids the graph lacks become bare Unknown nodes."""
    seeds: list[GraphNode] = []
    for seed_id in seed_ids:
        node = graph.node(seed_id)
        seeds.append(node if node is not None else GraphNode(id=seed_id, name=seed_id, type=UNKNOWN_TYPE))
    return seeds


async def build(
    source: RecordSource,
    seed_ids: Sequence[str] = (),
    types: Sequence[str] = (),
) -> DependencyGraph:
    """Load lookups, fetch the dependency feed and build (then optionally narrow) the graph."""
    try:
        lookups = await load_lookups(source)
        records = await source.fetch_dependencies(types=types or None)
    finally:
        await source.aclose()

    builder = GraphBuilder(lookups)
    builder.build_graph(records)
    if seed_ids:
        builder.run_dfs(seed_nodes(builder.graph, seed_ids))
    return builder.graph


@click.group()
@click.version_option(__version__, prog_name="metadeps")
def cli() -> None:
    """Metadata component dependency graphs."""


@cli.command()
@click.option("--seed", "seeds", multiple=True, help="Component id to start the closure from (repeatable).")
@click.option(
    "--type",
    "types",
    multiple=True,
    help="Only fetch dependencies whose source or target has this type (repeatable).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["dot", "json"]),
    default="dot",
    show_default=True,
)
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write to a file.")
def graph(seeds: tuple[str, ...], types: tuple[str, ...], output_format: str, output: Path | None) -> None:
    """Build the dependency graph and print it as DOT or JSON."""
    try:
        config = load_config()
    except ValueError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc

    setup_logging(config.log)
    bind_run_context(config.source.instance_url, uuid.uuid4().hex[:12])
    log = get_logger("cli")

    try:
        source = make_source(config)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    try:
        result = asyncio.run(build(source, seeds, types))
    except RecordSourceError as exc:
        log.error("graph_build_failed", error=str(exc), query=exc.query[:200])
        raise click.ClickException(f"Record source failed: {exc}") from exc

    if output_format == "json":
        rendered = json.dumps(to_json(result), indent=2)
    else:
        rendered = to_dot(result)

    if output is None:
        click.echo(rendered)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(rendered + "\n", encoding="utf-8")
        log.info("graph_written", path=str(output), nodes=result.node_count, edges=result.edge_count)
