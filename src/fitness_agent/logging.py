"""Structured logging configuration.

Uses standard library logging. Engine and workflow code attach conversation
context through ``extra`` (``thread_id``, ``node``, ``step``, ...). The JSON
formatter lifts those keys to the top level of each line so a thread can be
followed with a plain filter; anything else passed in ``extra`` is kept under
``"extra"``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# Conversation context, in display order.
CONTEXT_FIELDS: tuple[str, ...] = ("thread_id", "node", "step", "interrupt_id")

# Attributes every LogRecord carries, whatever the Python version.
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def record_context(record: logging.LogRecord) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split a record's custom attributes into conversation context and the rest."""

    context: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for key, value in record.__dict__.items():
        if key in _RECORD_ATTRS or key.startswith("_"):
            continue
        if key in CONTEXT_FIELDS:
            context[key] = value
        else:
            extra[key] = value
    ordered = {key: context[key] for key in CONTEXT_FIELDS if key in context}
    return ordered, extra


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with conversation context at the top level."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        context, extra = record_context(record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **context,
        }
        if extra:
            payload["extra"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines; conversation context is appended as ``key=value``."""

    def __init__(self) -> None:
        super().__init__(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        line = super().format(record)
        context, _ = record_context(record)
        if not context:
            return line
        suffix = " ".join(f"{key}={value}" for key, value in context.items())
        head, sep, tail = line.partition("\n")
        return f"{head} [{suffix}]{sep}{tail}"


def configure_logging(level: str, fmt: str = "json") -> None:
    """Configure root logging on stderr, as JSON or plain text."""

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    # stdout belongs to the conversation in the CLI.
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(JsonFormatter() if fmt == "json" else TextFormatter())
    root.addHandler(handler)
    root.setLevel(level.upper())

    # The HTTP client logs every completion request at INFO.
    for noisy in ("httpx", "openai"):
        logging.getLogger(noisy).setLevel(max(root.level, logging.WARNING))
