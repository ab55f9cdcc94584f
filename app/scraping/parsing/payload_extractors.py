"""
Extraction strategies for item payloads embedded in detail-page scripts.

Detail pages carry the item data in one of several inline script shapes.
Each strategy looks for exactly one shape and returns a normalized payload,
or None when its shape is absent or does not parse.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

HYDRATION_ITEM_PATH = ("props", "pageProps", "initialState", "item", "detail", "item")
CLOSED_STATUS = "closed"

_LEADING_INT_REGEX = re.compile(r"^[+-]?\d+")
_DECODER = json.JSONDecoder()


@dataclass(frozen=True)
class ItemPayload:
    """
    Normalized view of an embedded item payload.
    """

    title: str
    price: int
    end_time: str
    status: str | None = None

    @property
    def is_closed(self) -> bool:
        # No status signal means the page only renders ended auctions.
        if self.status is None:
            return True
        return self.status.strip().lower() == CLOSED_STATUS


@dataclass(frozen=True)
class ExtractedPayload:
    strategy: str
    payload: ItemPayload


class PayloadStrategy(Protocol):
    name: str

    def extract(self, soup: BeautifulSoup) -> ItemPayload | None:
        ...


def parse_price(value: Any) -> int:
    """
    Integer price from a loosely typed field; 0 when it does not parse.
    """

    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        return max(0, int(value)) if math.isfinite(value) else 0
    match = _LEADING_INT_REGEX.match(str(value).strip().replace(",", ""))
    if match is None:
        return 0
    return max(0, int(match.group(0)))


def _first_text(item: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = item.get(key)
        if value is None or isinstance(value, (dict, list)):
            continue
        text = str(value).strip()
        if text:
            return text
    return ""


def normalize_item(item: dict[str, Any]) -> ItemPayload:
    status = item.get("status")
    return ItemPayload(
        title=_first_text(item, "productName", "title"),
        price=parse_price(item.get("price")),
        end_time=_first_text(item, "endTime", "endtime"),
        status=str(status) if status is not None else None,
    )


def _dig(data: Any, path: Sequence[str]) -> Any:
    current = data
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _inline_scripts(soup: BeautifulSoup) -> Iterator[str]:
    for script in soup.find_all("script", src=False):
        content = script.string if script.string is not None else script.get_text()
        if content:
            yield content


def _decode_assigned_object(content: str, pattern: re.Pattern[str]) -> Any:
    """
    Decode the object literal assigned at `pattern`, stopping at its closing brace.
    """

    match = pattern.search(content)
    if match is None:
        return None
    value, _ = _DECODER.raw_decode(content, match.end())
    return value


def _assignment_pattern(variable: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![\w$]){re.escape(variable)}\s*=\s*(?=\{{)")


class AssignedObjectStrategy:
    """
    `var pageData = {...};` with the item under `items`.
    """

    name = "assigned_object"

    def __init__(self, variable: str = "pageData") -> None:
        self._variable = variable
        self._pattern = _assignment_pattern(variable)

    def extract(self, soup: BeautifulSoup) -> ItemPayload | None:
        for content in _inline_scripts(soup):
            if self._variable not in content:
                continue
            try:
                data = _decode_assigned_object(content, self._pattern)
            except (ValueError, RecursionError) as exc:
                logger.debug("Failed to parse %s: %s", self._variable, exc)
                continue
            item = data.get("items") if isinstance(data, dict) else None
            if isinstance(item, list):
                item = next((entry for entry in item if isinstance(entry, dict)), None)
            if isinstance(item, dict) and item:
                return normalize_item(item)
        return None


class HydrationPayloadStrategy:
    """
    `__NEXT_DATA__ = {...}` assigned inside an inline script.
    """

    name = "hydration_payload"

    def __init__(self, variable: str = "__NEXT_DATA__") -> None:
        self._variable = variable
        self._pattern = _assignment_pattern(variable)

    def extract(self, soup: BeautifulSoup) -> ItemPayload | None:
        for content in _inline_scripts(soup):
            if self._variable not in content:
                continue
            try:
                data = _decode_assigned_object(content, self._pattern)
            except (ValueError, RecursionError) as exc:
                logger.debug("Failed to parse %s assignment: %s", self._variable, exc)
                continue
            item = _dig(data, HYDRATION_ITEM_PATH)
            if isinstance(item, dict) and item:
                return normalize_item(item)
        return None


class JsonElementStrategy:
    """
    `<script id="__NEXT_DATA__" type="application/json">{...}</script>`.
    """

    name = "json_element"

    def __init__(self, element_id: str = "__NEXT_DATA__") -> None:
        self._element_id = element_id

    def extract(self, soup: BeautifulSoup) -> ItemPayload | None:
        element = soup.find(id=self._element_id)
        if element is None:
            return None
        body = element.string if element.string is not None else element.get_text()
        if not body or not body.strip():
            return None
        try:
            data = json.loads(body)
        except (ValueError, RecursionError) as exc:
            logger.debug("Failed to parse #%s element: %s", self._element_id, exc)
            return None
        item = _dig(data, HYDRATION_ITEM_PATH)
        if isinstance(item, dict) and item:
            return normalize_item(item)
        return None


class PayloadExtractor:
    """
    Runs strategies in priority order; the first payload found wins.
    """

    def __init__(self, strategies: Sequence[PayloadStrategy]) -> None:
        self._strategies = list(strategies)

    @classmethod
    def default(
        cls,
        *,
        payload_variable: str = "pageData",
        hydration_variable: str = "__NEXT_DATA__",
    ) -> "PayloadExtractor":
        return cls(
            [
                AssignedObjectStrategy(payload_variable),
                HydrationPayloadStrategy(hydration_variable),
                JsonElementStrategy(hydration_variable),
            ]
        )

    def extract(self, soup: BeautifulSoup) -> ExtractedPayload | None:
        for strategy in self._strategies:
            payload = strategy.extract(soup)
            if payload is not None:
                return ExtractedPayload(strategy=strategy.name, payload=payload)
        return None
