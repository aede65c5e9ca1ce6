"""Structured logging configuration using structlog.

Logs go to stderr; stdout carries exported graphs only.
"""

from __future__ import annotations

import logging
import sys

import structlog

from metadeps.models.config import LogConfig


def _renderer(log_format: str) -> structlog.typing.Processor:
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.JSONRenderer()


def setup_logging(config: LogConfig) -> None:
    """Configure structlog from *config*: level filter and JSON or console lines."""
    log_level = getattr(logging, config.level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            _renderer(config.format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def bind_run_context(instance_url: str, run_id: str) -> None:
    """Attach the org and run to every log line emitted by this build."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(instance=instance_url, run_id=run_id)


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound with a component name."""
    return structlog.get_logger(component=component)  # type: ignore[return-value]
