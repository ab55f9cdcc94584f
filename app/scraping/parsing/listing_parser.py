"""
BeautifulSoup-based parsing of seller listing pages.
"""

from __future__ import annotations

import math
import re
from urllib.parse import urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup, Tag

from app.domain.closed_auctions import CandidateItem

TOTAL_PAGES_REGEX = re.compile(r"(\d[\d,]*)\s*ページ中")
TOTAL_ITEMS_REGEX = re.compile(r"合計[：:]\s*(\d[\d,]*)\s*件")
TITLE_CONTAINERS = ["tr", "li", "div"]
TITLE_SELECTORS = ".ProductName, .product-name, [class*='title']"


def parse_total_pages(text: str, *, page_size: int = 25) -> int:
    """
    Total listing pages announced by the page text.

    "<N>ページ中" wins; otherwise "合計：<N>件" is divided by the page size.
    Falls back to 1.
    """

    match = TOTAL_PAGES_REGEX.search(text)
    if match is not None:
        return max(1, _to_int(match.group(1)))

    match = TOTAL_ITEMS_REGEX.search(text)
    if match is not None:
        return max(1, math.ceil(_to_int(match.group(1)) / max(1, page_size)))

    return 1


def _to_int(raw: str) -> int:
    return int(raw.replace(",", ""))


def _clean_text(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()


class ListingPageParser:
    """
    Extracts pagination and candidate item links from one listing page.
    """

    def __init__(
        self,
        *,
        base_url: str,
        item_path_marker: str,
        page_size: int = 25,
    ) -> None:
        self._base_url = base_url.rstrip("/") + "/"
        self._item_path_marker = item_path_marker
        self._page_size = page_size

    def total_pages(self, soup: BeautifulSoup) -> int:
        root = soup.body or soup
        return parse_total_pages(root.get_text(" "), page_size=self._page_size)

    def candidates(self, soup: BeautifulSoup) -> list[CandidateItem]:
        items: list[CandidateItem] = []
        for anchor in soup.select(f'a[href*="{self._item_path_marker}"]'):
            href = anchor.get("href")
            if not isinstance(href, str) or not href.strip():
                continue

            title = _clean_text(anchor.get_text(" ", strip=True))
            if not title:
                title = self._container_title(anchor)

            items.append(CandidateItem(url=self.normalize_url(href), title=title))
        return items

    def normalize_url(self, href: str) -> str:
        """
        Absolute item URL without query string or fragment.
        """

        absolute = urljoin(self._base_url, href.strip())
        parts = urlsplit(absolute)
        return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))

    @staticmethod
    def _container_title(anchor: Tag) -> str:
        container = anchor.find_parent(TITLE_CONTAINERS)
        if container is None:
            return ""
        texts = [node.get_text(" ", strip=True) for node in container.select(TITLE_SELECTORS)]
        return _clean_text(" ".join(text for text in texts if text))
