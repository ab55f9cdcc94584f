"""
Detail page extraction into auction records.
"""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from app.domain.closed_auctions import AuctionRecord
from app.scraping.fetcher import PageFetcher
from app.scraping.logging_utils import StructuredLogSink
from app.scraping.parsing import PayloadExtractor

logger = logging.getLogger(__name__)


def auction_id_from_url(url: str) -> str:
    path = urlsplit(url).path.rstrip("/")
    return path.rsplit("/", 1)[-1]


class DetailExtractor:
    """
    Fetch one detail page and build a record when it describes a closed auction.

    Returns None when no payload is found or the auction is not closed.
    Fetch errors propagate to the caller.
    """

    def __init__(
        self,
        *,
        fetcher: PageFetcher,
        payload_extractor: PayloadExtractor | None = None,
        log_sink: StructuredLogSink | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._payload_extractor = payload_extractor or PayloadExtractor.default()
        self._log = log_sink or StructuredLogSink(logger)

    def extract(self, url: str) -> AuctionRecord | None:
        html = self._fetcher.fetch(url)
        soup = BeautifulSoup(html, "html.parser")

        extracted = self._payload_extractor.extract(soup)
        if extracted is None:
            self._log.warning(
                "detail_payload_missing",
                url=url,
                inline_scripts=len(soup.find_all("script", src=False)),
            )
            return None

        payload = extracted.payload
        if not payload.is_closed:
            self._log.info("detail_status_not_closed", url=url, status=payload.status)
            return None

        self._log.debug("detail_extracted", url=url, strategy=extracted.strategy)
        return AuctionRecord(
            id=auction_id_from_url(url),
            title=payload.title,
            price=payload.price,
            end_time=payload.end_time,
            url=url,
        )
