"""
app/schemas/auction_search.py

Request and error schemas for the closed-auction search endpoint.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.domain.closed_auctions import SearchQuery


class AuctionSearchRequest(BaseModel):
    """
    Inbound search request as sent by the client.
    """

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    seller_url: str = Field(default="", alias="sellerUrl")
    keyword: str = ""
    limit: int | None = Field(
        default=None,
        description="Cap on detail fetches after filtering; null or non-positive means no cap.",
    )

    def to_query(self) -> SearchQuery:
        return SearchQuery(seller_url=self.seller_url, keyword=self.keyword, limit=self.limit)


class AuctionSearchErrorResponse(BaseModel):
    error: str
    details: str | None = None
