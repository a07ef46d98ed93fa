"""
Structured JSON logging: timestamp, level, event_type, ledger/operation context.

structlog with ISO timestamps, log level, and consistent keys for aggregation.
All modules should use get_logger() and pass event_type (and ledger_sequence /
operation_index where relevant).

Uses only Python stdlib logging and structlog; no trade_etl imports to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

# Default log level from env
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# JSON output for production (LOG_FORMAT=json); human-readable for local
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()


def _rename_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def configure_structlog(level: str = LOG_LEVEL, log_format: str = LOG_FORMAT) -> None:
    """Configure structlog: level, UTC ISO timestamp, JSON (event_type) or console rendering.

    Logs go to stderr so that tools writing records to stdout stay parseable.
    """
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
    ]
    if log_format == "json":
        shared_processors += [_rename_event, structlog.processors.JSONRenderer()]
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        )
    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level, logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# One-time configuration on first import
if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

    Log with event_type (first arg) and optional context fields:
        logger = get_logger(__name__)
        logger.info("trades_extracted", ledger_sequence=seq, operation_index=0, trade_count=2)
    Output (JSON): {"event_type": "trades_extracted", "ledger_sequence": ..., "operation_index": 0,
    "trade_count": 2, "timestamp": "...", "level": "info", "logger": "module.name"}
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_ledger(ledger_sequence: int) -> structlog.BoundLogger:
    """Return a logger with ledger_sequence bound to all subsequent log calls."""
    return get_logger("trade_etl").bind(ledger_sequence=ledger_sequence)
