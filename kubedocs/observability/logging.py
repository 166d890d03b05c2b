"""structlog setup shared by the service and the CLI.

The service logs one JSON object per line to stderr; the CLI asks for the
console renderer so that stdout stays clean for tree output.
"""

from __future__ import annotations

import logging
import sys

import structlog


def _processors(json_output: bool) -> list[structlog.typing.Processor]:
    renderer: structlog.typing.Processor = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
        renderer,
    ]


def setup_logging(level: str = "info", json_output: bool = True) -> None:
    """Route every kubedocs logger to stderr at *level* and above."""
    structlog.configure(
        processors=_processors(json_output),
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Logger carrying ``component=<component>`` on every event."""
    return structlog.get_logger(component=component)  # type: ignore[return-value]
