"""
Exception taxonomy for closed-auction scraping.
"""

from __future__ import annotations


class AuctionScrapingError(Exception):
    """Base exception for scraping failures."""


class SellerUrlValidationError(AuctionScrapingError):
    """Raised when a seller URL is missing, unparseable or on the wrong host."""


class FetchError(AuctionScrapingError):
    """
    Raised when a page could not be fetched.
    """

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class PageNotFoundError(FetchError):
    """Raised on HTTP 404. Never retried."""


class TransientFetchError(FetchError):
    """Raised on any other non-success status or network failure."""


class SearchCancelledError(AuctionScrapingError):
    """Raised when the consumer cancelled the search."""
