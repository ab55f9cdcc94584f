"""
Progress events and the ordered emitter that produces them.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar, Union

from app.domain.closed_auctions import SearchResult


@dataclass(frozen=True)
class StatusEvent:
    message: str

    type: ClassVar[str] = "status"
    is_terminal: ClassVar[bool] = False

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.type, "message": self.message}


@dataclass(frozen=True)
class TotalEvent:
    total: int
    message: str

    type: ClassVar[str] = "total"
    is_terminal: ClassVar[bool] = False

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.type, "total": self.total, "message": self.message}


@dataclass(frozen=True)
class ProgressUpdateEvent:
    current: int
    total: int

    type: ClassVar[str] = "progress"
    is_terminal: ClassVar[bool] = False

    @property
    def percentage(self) -> int:
        if self.total <= 0:
            return 100
        return math.floor(self.current * 100 / self.total + 0.5)

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "current": self.current,
            "total": self.total,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class CompleteEvent:
    result: SearchResult

    type: ClassVar[str] = "complete"
    is_terminal: ClassVar[bool] = True

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.type, "data": self.result.to_payload()}


@dataclass(frozen=True)
class ErrorEvent:
    message: str
    detail: str

    type: ClassVar[str] = "error"
    is_terminal: ClassVar[bool] = True

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.type, "error": self.message, "details": self.detail}


ProgressEvent = Union[StatusEvent, TotalEvent, ProgressUpdateEvent, CompleteEvent, ErrorEvent]


class EmitterClosedError(RuntimeError):
    """Raised when an event is emitted after the terminal event."""


class ProgressEmitter:
    """
    Single-producer event sink.

    Accepts any number of status/total/progress events followed by exactly one
    terminal event. Progress must never move backwards or exceed its total.
    """

    def __init__(self, sink: Callable[[ProgressEvent], None]) -> None:
        self._sink = sink
        self._terminal: ProgressEvent | None = None
        self._last_progress = 0

    @property
    def terminal(self) -> ProgressEvent | None:
        return self._terminal

    @property
    def closed(self) -> bool:
        return self._terminal is not None

    def emit(self, event: ProgressEvent) -> None:
        if self._terminal is not None:
            raise EmitterClosedError(
                f"Cannot emit '{event.type}' after terminal '{self._terminal.type}' event."
            )
        if isinstance(event, ProgressUpdateEvent):
            if event.current < self._last_progress or event.current > event.total:
                raise ValueError(
                    f"Invalid progress {event.current}/{event.total} "
                    f"after {self._last_progress}."
                )
            self._last_progress = event.current
        if event.is_terminal:
            self._terminal = event
        self._sink(event)

    def status(self, message: str) -> None:
        self.emit(StatusEvent(message=message))

    def total(self, total: int, message: str) -> None:
        self.emit(TotalEvent(total=total, message=message))

    def progress(self, current: int, total: int) -> None:
        self.emit(ProgressUpdateEvent(current=current, total=total))

    def complete(self, result: SearchResult) -> None:
        self.emit(CompleteEvent(result=result))

    def error(self, message: str, detail: str) -> None:
        self.emit(ErrorEvent(message=message, detail=detail))
