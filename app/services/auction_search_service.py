"""
app/services/auction_search_service.py

Service orchestration for streaming closed-auction searches.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Callable, Iterator
from functools import lru_cache

import requests

from app.domain.closed_auctions import SearchQuery
from app.scraping.config import AuctionScrapingSettings, get_auction_scraping_settings
from app.scraping.engine import ClosedAuctionSearchEngine
from app.scraping.events import ProgressEmitter, ProgressEvent
from app.scraping.logging_utils import log_event
from app.scraping.seller import extract_seller_id

logger = logging.getLogger(__name__)


class AuctionSearchService:
    """
    Runs the search engine on a worker thread and relays its events in order.
    """

    def __init__(
        self,
        settings: AuctionScrapingSettings | None = None,
        *,
        session_factory: Callable[[], requests.Session] = requests.Session,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings or get_auction_scraping_settings()
        self._session_factory = session_factory
        self._sleep = sleep

    def validate(self, query: SearchQuery) -> str:
        """
        Return the seller id or raise SellerUrlValidationError.
        """

        return extract_seller_id(query.seller_url, seller_host=self._settings.seller_host)

    def stream_events(self, query: SearchQuery) -> Iterator[ProgressEvent]:
        """
        Yield progress events until the terminal one.

        Validation happens eagerly, before the generator is returned. Closing
        the generator early signals cancellation to the running search.
        """

        self.validate(query)
        return self._stream(query)

    def _stream(self, query: SearchQuery) -> Iterator[ProgressEvent]:
        events: queue.Queue[ProgressEvent] = queue.Queue()
        cancel_event = threading.Event()
        emitter = ProgressEmitter(events.put)
        worker = threading.Thread(
            target=self._run,
            args=(query, emitter, cancel_event),
            name="auction-search",
            daemon=True,
        )
        worker.start()
        try:
            while True:
                event = events.get()
                yield event
                if event.is_terminal:
                    break
            worker.join()
        finally:
            if worker.is_alive():
                cancel_event.set()
                log_event(logger, logging.INFO, "search_stream_closed", seller_url=query.seller_url)

    def _run(
        self,
        query: SearchQuery,
        emitter: ProgressEmitter,
        cancel_event: threading.Event,
    ) -> None:
        try:
            with self._session_factory() as session:
                engine = ClosedAuctionSearchEngine(
                    settings=self._settings,
                    session=session,
                    sleep=self._sleep,
                )
                engine.run(query, emitter, cancel_event=cancel_event)
        finally:
            if not emitter.closed:
                emitter.error("Search failed", "Search ended without a result.")


@lru_cache(maxsize=1)
def get_auction_search_service() -> AuctionSearchService:
    """
    Build and cache the auction search service.
    """

    return AuctionSearchService()
