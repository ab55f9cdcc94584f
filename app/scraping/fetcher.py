"""
Single-page HTTP fetcher with retry and backoff.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

import requests

from app.scraping.config.models import AuctionScrapingSettings
from app.scraping.errors import FetchError, PageNotFoundError, TransientFetchError
from app.scraping.logging_utils import StructuredLogSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Attempt(n) -> Success | Backoff(n + 1) | Fail, with n capped at max_attempts.

    A 404 always fails on the attempt that produced it.
    """

    max_attempts: int = 3
    backoff_base_seconds: float = 1.0

    def should_retry(self, *, attempt: int, error: FetchError) -> bool:
        if isinstance(error, PageNotFoundError):
            return False
        return attempt < self.max_attempts

    def backoff_seconds(self, attempt: int) -> float:
        return self.backoff_base_seconds * attempt

    @classmethod
    def from_settings(cls, settings: AuctionScrapingSettings) -> "RetryPolicy":
        return cls(
            max_attempts=max(1, settings.max_attempts),
            backoff_base_seconds=settings.backoff_base_seconds,
        )


class PageFetcher:
    """
    Issues GET requests with a fixed user agent and classifies failures.
    """

    def __init__(
        self,
        *,
        session: requests.Session,
        settings: AuctionScrapingSettings,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
        log_sink: StructuredLogSink | None = None,
    ) -> None:
        self._session = session
        self._timeout_seconds = settings.timeout_seconds
        self._retry_policy = retry_policy or RetryPolicy.from_settings(settings)
        self._sleep = sleep
        self._log = log_sink or StructuredLogSink(logger)
        self.request_headers = {"User-Agent": settings.user_agent}

    def fetch(self, url: str) -> str:
        """
        Return the response body of `url`.

        Raises PageNotFoundError immediately on 404 and TransientFetchError
        once the attempt budget is spent.
        """

        attempt = 1
        while True:
            try:
                return self._attempt(url)
            except FetchError as exc:
                if not self._retry_policy.should_retry(attempt=attempt, error=exc):
                    self._log.warning(
                        "fetch_failed",
                        url=url,
                        attempts=attempt,
                        status_code=exc.status_code,
                        error=str(exc),
                    )
                    raise

                delay = self._retry_policy.backoff_seconds(attempt)
                self._log.info(
                    "fetch_retry",
                    url=url,
                    attempt=attempt,
                    backoff_seconds=delay,
                    status_code=exc.status_code,
                    error=str(exc),
                )
                self._sleep(delay)
                attempt += 1

    def _attempt(self, url: str) -> str:
        try:
            response = self._session.get(
                url,
                headers=self.request_headers,
                timeout=self._timeout_seconds,
                allow_redirects=True,
            )
        except requests.RequestException as exc:
            raise TransientFetchError(f"Request failed: {exc}", url=url) from exc

        if response.status_code == 404:
            raise PageNotFoundError(
                "HTTP error status=404 (not found)",
                url=url,
                status_code=404,
            )
        if not response.ok:
            raise TransientFetchError(
                f"HTTP error status={response.status_code}",
                url=url,
                status_code=response.status_code,
            )
        return response.text
