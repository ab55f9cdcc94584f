"""
Cooperative request pacing.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable


class RequestPacer:
    """
    Inserts a fixed delay before each paced request step (listing page or batch).
    """

    def __init__(
        self,
        *,
        delay_seconds: float,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._delay_seconds = max(0.0, delay_seconds)
        self._sleep = sleep

    @property
    def delay_seconds(self) -> float:
        return self._delay_seconds

    def pause(self, cancel_event: threading.Event | None = None) -> bool:
        """
        Sleep the pacing delay. Returns False when cancellation was signalled.
        """

        if _is_cancelled(cancel_event):
            return False
        if self._delay_seconds > 0:
            self._sleep(self._delay_seconds)
        return not _is_cancelled(cancel_event)


def _is_cancelled(cancel_event: threading.Event | None) -> bool:
    return cancel_event is not None and cancel_event.is_set()
