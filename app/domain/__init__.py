"""
app/domain package marker.
"""

from app.domain.closed_auctions import (
    AuctionRecord,
    CandidateItem,
    PriceStatistics,
    SearchQuery,
    SearchResult,
)

__all__ = [
    "AuctionRecord",
    "CandidateItem",
    "PriceStatistics",
    "SearchQuery",
    "SearchResult",
]
