"""
Structured logging helpers for scraping workflows.
"""

from __future__ import annotations

import json
import logging
from typing import Any


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one structured log line as compact JSON.
    """

    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, default=str, ensure_ascii=False, sort_keys=True))


class StructuredLogSink:
    """
    Injectable observability sink that stamps bound context onto every event.

    Kept separate from the progress emitter: this is for operators, the
    emitter is for the client.
    """

    def __init__(self, logger: logging.Logger, **context: Any) -> None:
        self._logger = logger
        self._context = context

    def bind(self, **context: Any) -> "StructuredLogSink":
        return StructuredLogSink(self._logger, **{**self._context, **context})

    def info(self, event: str, **fields: Any) -> None:
        log_event(self._logger, logging.INFO, event, **{**self._context, **fields})

    def debug(self, event: str, **fields: Any) -> None:
        log_event(self._logger, logging.DEBUG, event, **{**self._context, **fields})

    def warning(self, event: str, **fields: Any) -> None:
        log_event(self._logger, logging.WARNING, event, **{**self._context, **fields})

    def error(self, event: str, **fields: Any) -> None:
        log_event(self._logger, logging.ERROR, event, **{**self._context, **fields})
