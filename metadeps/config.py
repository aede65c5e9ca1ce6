"""Configuration loading from environment variables."""

from __future__ import annotations

import os
import re

from metadeps.models.config import LogConfig, MetadepsConfig, SourceConfig


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"METADEPS_{key}", default)


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _validate_api_version(value: str) -> str:
    if not re.match(r"^[0-9]+\.0$", value):
        raise ValueError(f"Invalid API version: {value}")
    return value


def _validate_instance_url(value: str) -> str:
    if value and not re.match(r"^https?://", value):
        raise ValueError(f"Invalid instance URL: {value}")
    return value.rstrip("/")


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def _validate_log_format(value: str) -> str:
    valid = {"json", "console"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log format: {value}. Must be one of {valid}")
    return value.lower()


def load_config() -> MetadepsConfig:
    """Load configuration from METADEPS_* environment variables."""
    return MetadepsConfig(
        source=SourceConfig(
            instance_url=_validate_instance_url(_env("INSTANCE_URL", "")),
            access_token=_env("ACCESS_TOKEN", ""),
            api_version=_validate_api_version(_env("API_VERSION", "58.0")),
            timeout_seconds=_env_int("TIMEOUT", 30, min_val=5, max_val=300),
            batch_size=_env_int("BATCH_SIZE", 200, min_val=1, max_val=1000),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
            format=_validate_log_format(_env("LOG_FORMAT", "json")),
        ),
    )
