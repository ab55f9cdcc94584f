"""
Closed-auction search engine.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

import requests

from app.domain.closed_auctions import AuctionRecord, SearchQuery, SearchResult
from app.scraping.collector import DetailCollector
from app.scraping.config.models import AuctionScrapingSettings
from app.scraping.detail import DetailExtractor
from app.scraping.errors import FetchError, SearchCancelledError
from app.scraping.events import ProgressEmitter
from app.scraping.fetcher import PageFetcher
from app.scraping.listing import ListingHarvester
from app.scraping.logging_utils import StructuredLogSink
from app.scraping.parsing import PayloadExtractor
from app.scraping.rate_limiter import RequestPacer
from app.scraping.seller import extract_seller_id
from app.scraping.statistics import compute_price_statistics

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _end_time_key(record: AuctionRecord) -> datetime:
    value = record.end_time.strip()
    if not value:
        return _OLDEST
    normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return _OLDEST
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def build_search_result(records: Sequence[AuctionRecord]) -> SearchResult:
    """
    Sort records by end time, newest first, and attach price statistics.
    """

    items = sorted(records, key=_end_time_key, reverse=True)
    return SearchResult(
        items=items,
        statistics=compute_price_statistics([item.price for item in items]),
    )


class ClosedAuctionSearchEngine:
    """
    Orchestrates listing harvest, keyword filtering and detail collection
    for one seller, reporting through a progress emitter.
    """

    def __init__(
        self,
        *,
        settings: AuctionScrapingSettings,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
        log_sink: StructuredLogSink | None = None,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()
        self._sleep = sleep
        self._log = log_sink or StructuredLogSink(logger)

    def run(
        self,
        query: SearchQuery,
        emitter: ProgressEmitter,
        *,
        cancel_event: threading.Event | None = None,
    ) -> SearchResult | None:
        """
        Execute one search, ending the event stream with exactly one terminal event.

        Raises SellerUrlValidationError before any network activity when the
        seller URL is invalid. Returns None when the run ended with an error.
        """

        seller_id = extract_seller_id(query.seller_url, seller_host=self._settings.seller_host)
        log = self._log.bind(seller_id=seller_id)
        harvester, collector = self._build_components(log)
        log.info("search_started", keyword=query.keyword, limit=query.effective_limit)

        try:
            emitter.status("Collecting item URLs from seller listing pages...")
            try:
                urls = harvester.harvest(seller_id, query.keyword, cancel_event=cancel_event)
            except FetchError as exc:
                log.error("search_failed", phase="listing", url=exc.url, error=str(exc))
                emitter.error("Failed to fetch seller listing pages", str(exc))
                return None

            if not urls:
                result = SearchResult()
                log.info("search_completed", total_count=0)
                emitter.complete(result)
                return result

            limit = query.effective_limit
            if limit is not None:
                urls = urls[:limit]
            emitter.total(len(urls), f"Fetching details for {len(urls)} items...")

            records = collector.collect(
                urls,
                on_progress=emitter.progress,
                cancel_event=cancel_event,
            )
            result = build_search_result(records)
            log.info(
                "search_completed",
                requested=len(urls),
                total_count=result.total_count,
            )
            emitter.complete(result)
            return result
        except SearchCancelledError as exc:
            log.info("search_cancelled", reason=str(exc))
            emitter.error("Search cancelled", str(exc))
            return None
        except Exception as exc:
            log.error("search_failed", phase="unexpected", error=repr(exc))
            emitter.error("Search failed", str(exc) or exc.__class__.__name__)
            return None

    def _build_components(
        self,
        log: StructuredLogSink,
    ) -> tuple[ListingHarvester, DetailCollector]:
        settings = self._settings
        fetcher = PageFetcher(
            session=self._session,
            settings=settings,
            sleep=self._sleep,
            log_sink=log,
        )
        harvester = ListingHarvester(
            fetcher=fetcher,
            settings=settings,
            pacer=RequestPacer(delay_seconds=settings.listing_delay_seconds, sleep=self._sleep),
            log_sink=log,
        )
        extractor = DetailExtractor(
            fetcher=fetcher,
            payload_extractor=PayloadExtractor.default(
                payload_variable=settings.payload_variable,
                hydration_variable=settings.hydration_variable,
            ),
            log_sink=log,
        )
        collector = DetailCollector(
            extractor=extractor,
            pacer=RequestPacer(delay_seconds=settings.batch_delay_seconds, sleep=self._sleep),
            batch_size=settings.batch_size,
            log_sink=log,
        )
        return harvester, collector
