"""
Seller listing page harvester.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator

from bs4 import BeautifulSoup

from app.domain.closed_auctions import CandidateItem
from app.scraping.config.models import AuctionScrapingSettings
from app.scraping.errors import SearchCancelledError
from app.scraping.fetcher import PageFetcher
from app.scraping.keyword_filter import filter_candidates
from app.scraping.logging_utils import StructuredLogSink
from app.scraping.parsing import ListingPageParser
from app.scraping.rate_limiter import RequestPacer

logger = logging.getLogger(__name__)


class ListingHarvester:
    """
    Walks a seller's numbered listing pages and collects candidate item URLs.

    Pages are fetched strictly in order, one at a time, with a pacing delay
    before every page after the first. Fetch errors propagate.
    """

    def __init__(
        self,
        *,
        fetcher: PageFetcher,
        settings: AuctionScrapingSettings,
        pacer: RequestPacer,
        parser: ListingPageParser | None = None,
        log_sink: StructuredLogSink | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._settings = settings
        self._pacer = pacer
        self._parser = parser or ListingPageParser(
            base_url=settings.base_url,
            item_path_marker=settings.item_path_marker,
            page_size=settings.listing_page_size,
        )
        self._log = log_sink or StructuredLogSink(logger)

    def harvest(
        self,
        seller_id: str,
        keyword: str | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> list[str]:
        """
        Deduplicated candidate URLs whose listing title matches `keyword`.
        """

        candidates = [
            item
            for page_items in self.iter_pages(seller_id, cancel_event=cancel_event)
            for item in page_items
        ]
        filtered = filter_candidates(candidates, keyword)
        urls = list(dict.fromkeys(item.url for item in filtered))
        self._log.info(
            "listing_filtered",
            seller_id=seller_id,
            keyword=keyword or "",
            candidates=len(candidates),
            matched=len(filtered),
            unique_urls=len(urls),
        )
        return urls

    def iter_pages(
        self,
        seller_id: str,
        *,
        cancel_event: threading.Event | None = None,
    ) -> Iterator[list[CandidateItem]]:
        """
        Yield the candidates of each listing page, page 1 first.
        """

        if cancel_event is not None and cancel_event.is_set():
            raise SearchCancelledError("Search cancelled before listing harvest.")

        first_page = self._fetch_page(seller_id, 1)
        total_pages = self._parser.total_pages(first_page)
        self._log.info("listing_total_pages", seller_id=seller_id, total_pages=total_pages)

        items = self._parser.candidates(first_page)
        self._log_page(seller_id, 1, total_pages, items)
        yield items

        for page in range(2, total_pages + 1):
            if not self._pacer.pause(cancel_event):
                raise SearchCancelledError(f"Search cancelled at listing page {page}.")
            items = self._parser.candidates(self._fetch_page(seller_id, page))
            self._log_page(seller_id, page, total_pages, items)
            yield items

    def _fetch_page(self, seller_id: str, page: int) -> BeautifulSoup:
        html = self._fetcher.fetch(self._settings.listing_url(seller_id, page))
        return BeautifulSoup(html, "html.parser")

    def _log_page(
        self,
        seller_id: str,
        page: int,
        total_pages: int,
        items: list[CandidateItem],
    ) -> None:
        self._log.info(
            "listing_page_fetched",
            seller_id=seller_id,
            page=page,
            total_pages=total_pages,
            items=len(items),
        )
