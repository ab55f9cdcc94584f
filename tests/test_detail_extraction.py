"""
tests/test_detail_extraction.py

Payload extraction strategies and DetailExtractor record building.
"""

from __future__ import annotations

import json

import pytest
from bs4 import BeautifulSoup

from app.domain.closed_auctions import AuctionRecord
from app.scraping.config import AuctionScrapingSettings
from app.scraping.detail import DetailExtractor, auction_id_from_url
from app.scraping.errors import PageNotFoundError
from app.scraping.fetcher import PageFetcher
from app.scraping.parsing import (
    AssignedObjectStrategy,
    HydrationPayloadStrategy,
    ItemPayload,
    JsonElementStrategy,
    PayloadExtractor,
    normalize_item,
    parse_price,
)
from tests.fakes import (
    FakeSession,
    SleepRecorder,
    deeply_nested_detail_html,
    detail_html,
    item_url,
)

ITEM = {"productName": "Nikon F3", "price": "45000", "endTime": "2024-05-01T21:00:00+09:00"}


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


# ---------------------------------------------------------------------------
# Field normalization
# ---------------------------------------------------------------------------


class TestNormalization:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("45000", 45000),
            (" 1,200 ", 1200),
            ("12000円", 12000),
            (3500, 3500),
            (99.9, 99),
            ("abc", 0),
            ("", 0),
            (None, 0),
            (True, 0),
            (-5, 0),
            ("-20", 0),
        ],
    )
    def test_parse_price(self, raw: object, expected: int) -> None:
        assert parse_price(raw) == expected

    def test_title_prefers_product_name(self) -> None:
        payload = normalize_item({"productName": "Name", "title": "Title"})
        assert payload.title == "Name"

    def test_title_falls_back_to_title_then_empty(self) -> None:
        assert normalize_item({"productName": "", "title": "Title"}).title == "Title"
        assert normalize_item({}).title == ""

    def test_end_time_falls_back_to_lowercase_key(self) -> None:
        assert normalize_item({"endtime": "2024-01-01T00:00:00"}).end_time == "2024-01-01T00:00:00"
        assert normalize_item({"endTime": "", "endtime": "x"}).end_time == "x"
        assert normalize_item({}).end_time == ""

    def test_status_signal(self) -> None:
        assert normalize_item({}).is_closed is True
        assert normalize_item({"status": "closed"}).is_closed is True
        assert normalize_item({"status": "CLOSED"}).is_closed is True
        assert normalize_item({"status": "open"}).is_closed is False


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


class TestStrategies:
    def test_assigned_object_stops_at_first_statement_boundary(self) -> None:
        html = (
            "<script>var pageData = "
            + json.dumps({"items": ITEM, "nested": {"a": {"b": "};"}}})
            + ';\nvar trailing = {"items": {"productName": "wrong"}};</script>'
        )
        payload = AssignedObjectStrategy().extract(_soup(html))

        assert payload == ItemPayload(
            title="Nikon F3",
            price=45000,
            end_time="2024-05-01T21:00:00+09:00",
        )

    def test_assigned_object_ignores_external_scripts(self) -> None:
        html = (
            '<script src="/x.js">var pageData = {"items": {"title": "external"}};</script>'
        )
        assert AssignedObjectStrategy().extract(_soup(html)) is None

    def test_assigned_object_without_items_is_not_a_match(self) -> None:
        html = '<script>var pageData = {"seller": "abc"};</script>'
        assert AssignedObjectStrategy().extract(_soup(html)) is None

    def test_hydration_payload(self) -> None:
        payload = HydrationPayloadStrategy().extract(_soup(detail_html(ITEM, shape="hydration")))
        assert payload is not None
        assert payload.title == "Nikon F3"

    def test_json_element(self) -> None:
        payload = JsonElementStrategy().extract(_soup(detail_html(ITEM, shape="element")))
        assert payload is not None
        assert payload.price == 45000

    def test_hydration_payload_requires_full_path(self) -> None:
        html = '<script>window.__NEXT_DATA__ = {"props": {"pageProps": {}}};</script>'
        assert HydrationPayloadStrategy().extract(_soup(html)) is None


class TestPayloadExtractor:
    @pytest.mark.parametrize(
        ("shape", "strategy"),
        [
            ("assigned", "assigned_object"),
            ("hydration", "hydration_payload"),
            ("element", "json_element"),
        ],
    )
    def test_each_shape_is_recognized(self, shape: str, strategy: str) -> None:
        extracted = PayloadExtractor.default().extract(_soup(detail_html(ITEM, shape=shape)))
        assert extracted is not None
        assert extracted.strategy == strategy
        assert extracted.payload.title == "Nikon F3"

    def test_broken_first_shape_falls_through(self) -> None:
        html = (
            "<script>var pageData = {items: not json};</script>"
            '<script id="__NEXT_DATA__" type="application/json">'
            + json.dumps(
                {"props": {"pageProps": {"initialState": {"item": {"detail": {"item": ITEM}}}}}}
            )
            + "</script>"
        )
        extracted = PayloadExtractor.default().extract(_soup(html))

        assert extracted is not None
        assert extracted.strategy == "json_element"

    def test_earlier_strategy_wins(self) -> None:
        html = detail_html({"productName": "from hydration"}, shape="hydration") + detail_html(
            {"productName": "from page data"},
            shape="assigned",
        )
        extracted = PayloadExtractor.default().extract(_soup(html))
        assert extracted.payload.title == "from page data"

    def test_nothing_found(self) -> None:
        html = "<html><script>console.log('hi');</script><script id='__NEXT_DATA__'>{</script></html>"
        assert PayloadExtractor.default().extract(_soup(html)) is None

    def test_over_deep_payload_falls_through(self) -> None:
        html = deeply_nested_detail_html() + detail_html(ITEM, shape="element")
        extracted = PayloadExtractor.default().extract(_soup(html))

        assert extracted is not None
        assert extracted.strategy == "json_element"

    def test_over_deep_json_element_is_not_a_match(self) -> None:
        html = deeply_nested_detail_html(shape="element")
        assert PayloadExtractor.default().extract(_soup(html)) is None


# ---------------------------------------------------------------------------
# DetailExtractor
# ---------------------------------------------------------------------------


def _extractor(session: FakeSession) -> DetailExtractor:
    fetcher = PageFetcher(
        session=session,
        settings=AuctionScrapingSettings(),
        sleep=SleepRecorder(),
    )
    return DetailExtractor(fetcher=fetcher)


class TestDetailExtractor:
    def test_builds_record_for_closed_auction(self) -> None:
        url = item_url("x123")
        session = FakeSession({url: detail_html({**ITEM, "status": "closed"})})

        record = _extractor(session).extract(url)

        assert record == AuctionRecord(
            id="x123",
            title="Nikon F3",
            price=45000,
            end_time="2024-05-01T21:00:00+09:00",
            url=url,
        )

    def test_open_auction_is_skipped(self) -> None:
        url = item_url("x124")
        session = FakeSession({url: detail_html({**ITEM, "status": "open"}, shape="element")})
        assert _extractor(session).extract(url) is None

    def test_missing_payload_is_skipped(self) -> None:
        url = item_url("x125")
        session = FakeSession({url: "<html><body>maintenance</body></html>"})
        assert _extractor(session).extract(url) is None

    def test_not_found_propagates(self) -> None:
        url = item_url("x126")
        session = FakeSession({url: 404})
        with pytest.raises(PageNotFoundError):
            _extractor(session).extract(url)

    def test_auction_id_from_url(self) -> None:
        assert auction_id_from_url("https://auctions.yahoo.co.jp/jp/auction/k1234") == "k1234"
        assert auction_id_from_url("https://auctions.yahoo.co.jp/jp/auction/k1234/") == "k1234"
