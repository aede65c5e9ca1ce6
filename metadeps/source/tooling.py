"""Tooling API record source backed by httpx.

Queries go to ``/services/data/v<api>/tooling/query``.  Large id batches
are split across several ``IN (...)`` clauses and every response is paged
through ``nextRecordsUrl`` until the API reports ``done``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from types import TracebackType
from typing import Any, TypeVar

import httpx

from metadeps.models.config import SourceConfig
from metadeps.models.records import (
    DependencyRecord,
    FieldDefinitionRecord,
    FieldRecord,
    ObjectRecord,
    QuickActionRecord,
    ValidationRuleRecord,
)
from metadeps.observability.logging import get_logger
from metadeps.observability.metrics import records_fetched_total, source_queries_total
from metadeps.source.base import RecordSource, RecordSourceError

_log = get_logger("source.tooling")

_R = TypeVar("_R")

_DEPENDENCY_COLUMNS = (
    "MetadataComponentId, MetadataComponentName, MetadataComponentType, "
    "RefMetadataComponentId, RefMetadataComponentName, RefMetadataComponentType"
)


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def in_clause(ids: Iterable[str]) -> str:
    """Render ids as a SOQL ``('a','b')`` list."""
    return "(" + ",".join(_quote(i) for i in ids) + ")"


def _chunks(ids: Sequence[str], size: int) -> Iterable[Sequence[str]]:
    for start in range(0, len(ids), size):
        yield ids[start : start + size]


def dependency_query(types: Iterable[str] | None = None) -> str:
    query = f"SELECT {_DEPENDENCY_COLUMNS} FROM MetadataComponentDependency"
    wanted = list(dict.fromkeys(types or ()))
    if wanted:
        listed = in_clause(wanted)
        query += f" WHERE MetadataComponentType IN {listed} OR RefMetadataComponentType IN {listed}"
    return query


class ToolingRecordSource(RecordSource):
    """Fetch records through the Tooling query REST endpoint.

    Args:
        config: Instance URL, bearer token, API version, timeout and batch size.
        client: Optional pre-built AsyncClient (tests pass one backed by
                ``httpx.MockTransport``).  A client passed in is not closed
                by ``aclose``.
    """

    def __init__(self, config: SourceConfig, client: httpx.AsyncClient | None = None) -> None:
        if not config.instance_url:
            raise ValueError("Record source instance_url must not be empty")
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.timeout_seconds)
        self._query_path = f"/services/data/v{config.api_version}/tooling/query"

    async def __aenter__(self) -> ToolingRecordSource:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._config.access_token}",
            "Accept": "application/json",
        }

    async def _get(self, url: str, params: dict[str, str] | None, query: str) -> dict[str, Any]:
        try:
            response = await self._client.get(url, params=params, headers=self._headers())
        except httpx.HTTPError as exc:
            source_queries_total.labels(outcome="transport_error").inc()
            raise RecordSourceError(f"Tooling query failed: {exc}", query=query) from exc

        if not response.is_success:
            source_queries_total.labels(outcome="http_error").inc()
            _log.warning(
                "tooling_query_non_2xx",
                status_code=response.status_code,
                body=response.text[:200],
            )
            raise RecordSourceError(
                f"Tooling query returned HTTP {response.status_code}",
                query=query,
            )
        source_queries_total.labels(outcome="ok").inc()
        try:
            payload = response.json()
        except ValueError as exc:
            raise RecordSourceError("Tooling query returned invalid JSON", query=query) from exc
        if not isinstance(payload, dict):
            raise RecordSourceError(
                f"Tooling query returned {type(payload).__name__}, expected an object",
                query=query,
            )
        return payload

    async def query(self, soql: str) -> list[dict[str, Any]]:
        """Run *soql* and return every row across all result pages."""
        base = self._config.instance_url.rstrip("/")
        payload = await self._get(base + self._query_path, {"q": soql}, soql)
        rows: list[dict[str, Any]] = list(payload.get("records", []))
        while not payload.get("done", True) and payload.get("nextRecordsUrl"):
            payload = await self._get(base + str(payload["nextRecordsUrl"]), None, soql)
            rows.extend(payload.get("records", []))
        _log.debug("tooling_query_complete", rows=len(rows), query=soql[:120])
        return rows

    async def _query_by_ids(
        self,
        template: str,
        ids: Sequence[str],
        sobject: str,
        factory: Callable[[dict[str, Any]], _R],
    ) -> list[_R]:
        unique = list(dict.fromkeys(ids))
        if not unique:
            return []
        results: list[_R] = []
        for chunk in _chunks(unique, self._config.batch_size):
            rows = await self.query(template.format(ids=in_clause(chunk)))
            results.extend(factory(row) for row in rows)
        records_fetched_total.labels(sobject=sobject).inc(len(results))
        return results

    # ------------------------------------------------------------------
    # RecordSource
    # ------------------------------------------------------------------

    async def fetch_dependencies(self, types: Iterable[str] | None = None) -> list[DependencyRecord]:
        rows = await self.query(dependency_query(types))
        records: list[DependencyRecord] = []
        for row in rows:
            try:
                records.append(DependencyRecord.from_row(row))
            except ValueError as exc:
                _log.debug(
                    "malformed_dependency_skipped",
                    source_id=row.get("MetadataComponentId"),
                    target_id=row.get("RefMetadataComponentId"),
                    error=str(exc),
                )
        records_fetched_total.labels(sobject="MetadataComponentDependency").inc(len(records))
        return records

    async def fetch_fields(self, ids: Sequence[str]) -> list[FieldRecord]:
        return await self._query_by_ids(
            "SELECT Id, TableEnumOrId FROM CustomField WHERE Id IN {ids}",
            ids,
            "CustomField",
            FieldRecord.from_row,
        )

    async def fetch_validation_rules(self, ids: Sequence[str]) -> list[ValidationRuleRecord]:
        return await self._query_by_ids(
            "SELECT Id, EntityDefinitionId FROM ValidationRule WHERE Id IN {ids}",
            ids,
            "ValidationRule",
            ValidationRuleRecord.from_row,
        )

    async def fetch_quick_actions(self, ids: Sequence[str]) -> list[QuickActionRecord]:
        return await self._query_by_ids(
            "SELECT Id, SobjectType FROM QuickActionDefinition WHERE Id IN {ids}",
            ids,
            "QuickActionDefinition",
            QuickActionRecord.from_row,
        )

    async def fetch_objects(self, ids: Sequence[str]) -> list[ObjectRecord]:
        return await self._query_by_ids(
            "SELECT Id, DeveloperName FROM CustomObject WHERE Id IN {ids}",
            ids,
            "CustomObject",
            ObjectRecord.from_row,
        )

    async def fetch_field_definitions(self, entity_ids: Sequence[str]) -> list[FieldDefinitionRecord]:
        return await self._query_by_ids(
            "SELECT EntityDefinitionId, DataType, DurableId FROM FieldDefinition "
            "WHERE EntityDefinitionId IN {ids}",
            entity_ids,
            "FieldDefinition",
            FieldDefinitionRecord.from_row,
        )
