"""Core data structures for metadeps."""

from metadeps.models.config import LogConfig, MetadepsConfig, SourceConfig
from metadeps.models.records import (
    ComponentType,
    DependencyRecord,
    FieldDefinitionRecord,
    FieldRecord,
    ObjectRecord,
    QuickActionRecord,
    ValidationRuleRecord,
    component_type,
)

__all__ = [
    "ComponentType",
    "DependencyRecord",
    "FieldDefinitionRecord",
    "FieldRecord",
    "LogConfig",
    "MetadepsConfig",
    "ObjectRecord",
    "QuickActionRecord",
    "SourceConfig",
    "ValidationRuleRecord",
    "component_type",
]
