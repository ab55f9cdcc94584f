"""
app/schemas package marker.
"""

from app.schemas.auction_search import AuctionSearchErrorResponse, AuctionSearchRequest

__all__ = [
    "AuctionSearchErrorResponse",
    "AuctionSearchRequest",
]
