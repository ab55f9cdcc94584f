"""
app/domain/closed_auctions.py

Domain models for closed-auction harvesting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SearchQuery:
    """
    Inbound search request for one seller's closed auctions.
    """

    seller_url: str
    keyword: str = ""
    limit: int | None = None

    @property
    def effective_limit(self) -> int | None:
        if self.limit is None or self.limit <= 0:
            return None
        return self.limit


@dataclass(frozen=True)
class CandidateItem:
    """
    Item link harvested from a listing page, before detail verification.
    """

    url: str
    title: str = ""


@dataclass(frozen=True)
class AuctionRecord:
    """
    Verified closed-sale item.
    """

    id: str
    title: str
    price: int
    end_time: str
    url: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "price": self.price,
            "endTime": self.end_time,
            "url": self.url,
        }


@dataclass(frozen=True)
class PriceStatistics:
    average: int
    max: int
    min: int

    def to_payload(self) -> dict[str, int]:
        return {"average": self.average, "max": self.max, "min": self.min}


@dataclass(frozen=True)
class SearchResult:
    """
    Final outcome of one search: records sorted by end time, newest first.
    """

    items: list[AuctionRecord] = field(default_factory=list)
    statistics: PriceStatistics | None = None

    @property
    def total_count(self) -> int:
        return len(self.items)

    def to_payload(self) -> dict[str, Any]:
        return {
            "items": [item.to_payload() for item in self.items],
            "totalCount": self.total_count,
            "statistics": self.statistics.to_payload() if self.statistics else None,
        }
