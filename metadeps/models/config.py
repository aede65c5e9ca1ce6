"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class SourceConfig:
    """Tooling API record source configuration."""

    instance_url: str = ""
    access_token: str = ""
    api_version: str = "58.0"
    timeout_seconds: int = 30
    batch_size: int = 200


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"
    format: str = "json"


@dataclass
class MetadepsConfig:
    """Top-level metadeps configuration."""

    source: SourceConfig = field(default_factory=SourceConfig)
    log: LogConfig = field(default_factory=LogConfig)
