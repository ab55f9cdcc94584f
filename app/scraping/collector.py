"""
Batched, bounded-parallel detail collection.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed

from app.domain.closed_auctions import AuctionRecord
from app.scraping.detail import DetailExtractor
from app.scraping.errors import FetchError, SearchCancelledError
from app.scraping.logging_utils import StructuredLogSink
from app.scraping.rate_limiter import RequestPacer

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def partition(urls: Sequence[str], size: int) -> Iterator[list[str]]:
    """
    Split `urls` into consecutive batches of at most `size`, preserving order.
    """

    step = max(1, size)
    for start in range(0, len(urls), step):
        yield list(urls[start : start + step])


class DetailCollector:
    """
    Runs detail extraction batch by batch on a worker pool as wide as one batch.

    Batches run in order with a pacing delay before each; every batch is joined
    before the next starts. Progress is reported per finished URL from the
    coordinating thread, so the counter needs no lock.
    """

    def __init__(
        self,
        *,
        extractor: DetailExtractor,
        pacer: RequestPacer,
        batch_size: int = 5,
        log_sink: StructuredLogSink | None = None,
    ) -> None:
        self._extractor = extractor
        self._pacer = pacer
        self._batch_size = max(1, batch_size)
        self._log = log_sink or StructuredLogSink(logger)

    def collect(
        self,
        urls: Sequence[str],
        *,
        on_progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> list[AuctionRecord]:
        """
        Records in completion order; skipped and failed URLs are left out.
        """

        total = len(urls)
        if total == 0:
            return []

        records: list[AuctionRecord] = []
        completed = 0
        with ThreadPoolExecutor(
            max_workers=self._batch_size,
            thread_name_prefix="detail-fetch",
        ) as pool:
            for batch_number, batch in enumerate(partition(urls, self._batch_size), start=1):
                if not self._pacer.pause(cancel_event):
                    raise SearchCancelledError(
                        f"Search cancelled before batch {batch_number} ({completed}/{total} done)."
                    )

                futures = {pool.submit(self._extractor.extract, url): url for url in batch}
                for future in as_completed(futures):
                    record = self._resolve(future, futures[future])
                    completed += 1
                    if record is not None:
                        records.append(record)
                    if on_progress is not None:
                        on_progress(completed, total)

                self._log.debug(
                    "detail_progress",
                    batch=batch_number,
                    completed=completed,
                    total=total,
                    collected=len(records),
                )
        return records

    def _resolve(self, future: Future[AuctionRecord | None], url: str) -> AuctionRecord | None:
        try:
            return future.result()
        except FetchError as exc:
            self._log.warning(
                "detail_fetch_failed",
                url=url,
                status_code=exc.status_code,
                error=str(exc),
            )
            return None
