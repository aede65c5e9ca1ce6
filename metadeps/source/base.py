"""Record source contract.

A RecordSource supplies the raw dependency feed plus the auxiliary tables
the graph builder consults.  Implementations own batching and paging;
callers pass id lists of any size.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from metadeps.models.records import (
    DependencyRecord,
    FieldDefinitionRecord,
    FieldRecord,
    ObjectRecord,
    QuickActionRecord,
    ValidationRuleRecord,
)


class RecordSourceError(Exception):
    """Raised when a record source cannot deliver a complete result."""

    def __init__(self, message: str, query: str = "") -> None:
        super().__init__(message)
        self.query = query


class RecordSource(ABC):
    """Abstract base class for every record source."""

    async def aclose(self) -> None:
        """Release transport resources.  The default holds none."""

    @abstractmethod
    async def fetch_dependencies(self, types: Iterable[str] | None = None) -> list[DependencyRecord]:
        """Return dependency records.

        With *types*, only records whose source or target type is in *types*.
        """

    @abstractmethod
    async def fetch_fields(self, ids: Sequence[str]) -> list[FieldRecord]: ...

    @abstractmethod
    async def fetch_validation_rules(self, ids: Sequence[str]) -> list[ValidationRuleRecord]: ...

    @abstractmethod
    async def fetch_quick_actions(self, ids: Sequence[str]) -> list[QuickActionRecord]: ...

    @abstractmethod
    async def fetch_objects(self, ids: Sequence[str]) -> list[ObjectRecord]: ...

    @abstractmethod
    async def fetch_field_definitions(self, entity_ids: Sequence[str]) -> list[FieldDefinitionRecord]:
        """Return field definitions for every object in *entity_ids*."""
