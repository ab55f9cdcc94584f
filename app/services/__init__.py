"""
app/services package marker.
"""

from app.services.auction_search_service import (
    AuctionSearchService,
    get_auction_search_service,
)

__all__ = [
    "AuctionSearchService",
    "get_auction_search_service",
]
