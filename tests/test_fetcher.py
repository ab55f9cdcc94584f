"""
tests/test_fetcher.py

Retry and classification behaviour of PageFetcher. No real network or sleeping.
"""

from __future__ import annotations

import pytest
import requests

from app.scraping.config import AuctionScrapingSettings
from app.scraping.errors import PageNotFoundError, TransientFetchError
from app.scraping.fetcher import PageFetcher, RetryPolicy
from tests.fakes import FakeSession, SleepRecorder

URL = "https://auctions.yahoo.co.jp/jp/auction/x100"


def _fetcher(session: FakeSession, sleep: SleepRecorder, **overrides: object) -> PageFetcher:
    settings = AuctionScrapingSettings(**overrides)  # type: ignore[arg-type]
    return PageFetcher(session=session, settings=settings, sleep=sleep)


class TestRetryPolicy:
    def test_backoff_grows_with_attempt(self) -> None:
        policy = RetryPolicy(max_attempts=4, backoff_base_seconds=1.0)
        delays = [policy.backoff_seconds(attempt) for attempt in (1, 2, 3)]
        assert delays == [1.0, 2.0, 3.0]

    def test_not_found_is_never_retried(self) -> None:
        policy = RetryPolicy(max_attempts=3)
        error = PageNotFoundError("gone", url=URL, status_code=404)
        assert policy.should_retry(attempt=1, error=error) is False

    def test_transient_retried_until_budget(self) -> None:
        policy = RetryPolicy(max_attempts=3)
        error = TransientFetchError("boom", url=URL, status_code=500)
        assert policy.should_retry(attempt=1, error=error) is True
        assert policy.should_retry(attempt=2, error=error) is True
        assert policy.should_retry(attempt=3, error=error) is False


class TestPageFetcher:
    def test_returns_body_and_sends_user_agent(self) -> None:
        session = FakeSession({URL: "<html>ok</html>"})
        sleep = SleepRecorder()

        body = _fetcher(session, sleep).fetch(URL)

        assert body == "<html>ok</html>"
        assert session.calls_to(URL) == 1
        assert session.headers_seen[0]["User-Agent"].startswith("Mozilla/5.0")
        assert sleep.delays == []

    def test_404_is_attempted_exactly_once(self) -> None:
        session = FakeSession({URL: 404})
        sleep = SleepRecorder()

        with pytest.raises(PageNotFoundError) as ctx:
            _fetcher(session, sleep).fetch(URL)

        assert ctx.value.status_code == 404
        assert session.calls_to(URL) == 1
        assert sleep.delays == []

    def test_500_retries_with_increasing_backoff_then_propagates(self) -> None:
        session = FakeSession({URL: 500})
        sleep = SleepRecorder()

        with pytest.raises(TransientFetchError) as ctx:
            _fetcher(session, sleep).fetch(URL)

        assert ctx.value.status_code == 500
        assert session.calls_to(URL) == 3
        assert sleep.delays == [1.0, 2.0]
        assert all(later > earlier for earlier, later in zip(sleep.delays, sleep.delays[1:]))

    def test_attempt_budget_is_configurable(self) -> None:
        session = FakeSession({URL: 503})
        sleep = SleepRecorder()

        with pytest.raises(TransientFetchError):
            _fetcher(session, sleep, max_attempts=5, backoff_base_seconds=0.5).fetch(URL)

        assert session.calls_to(URL) == 5
        assert sleep.delays == [0.5, 1.0, 1.5, 2.0]

    def test_network_error_is_transient_and_recovers(self) -> None:
        session = FakeSession({URL: [requests.ConnectionError("reset"), 502, "<html>late</html>"]})
        sleep = SleepRecorder()

        assert _fetcher(session, sleep).fetch(URL) == "<html>late</html>"
        assert session.calls_to(URL) == 3
        assert sleep.delays == [1.0, 2.0]

    def test_timeout_is_transient(self) -> None:
        session = FakeSession({URL: requests.Timeout("slow")})
        sleep = SleepRecorder()

        with pytest.raises(TransientFetchError) as ctx:
            _fetcher(session, sleep, max_attempts=2).fetch(URL)

        assert ctx.value.status_code is None
        assert isinstance(ctx.value.__cause__, requests.Timeout)

    def test_404_after_transient_failure_stops_immediately(self) -> None:
        session = FakeSession({URL: [500, 404, "<html>never</html>"]})
        sleep = SleepRecorder()

        with pytest.raises(PageNotFoundError):
            _fetcher(session, sleep).fetch(URL)

        assert session.calls_to(URL) == 2
        assert sleep.delays == [1.0]
