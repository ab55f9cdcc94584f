"""
Scraping configuration models.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote


@dataclass(frozen=True)
class AuctionScrapingSettings:
    """
    Runtime settings for closed-auction harvesting.
    """

    base_url: str = "https://auctions.yahoo.co.jp"
    listing_path: str = "/jp/show/rating"
    item_path_marker: str = "/jp/auction/"
    seller_host: str = "auctions.yahoo.co.jp"
    user_agent: str = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"
    timeout_seconds: float = 15.0
    max_attempts: int = 3
    backoff_base_seconds: float = 1.0
    listing_delay_seconds: float = 0.5
    batch_delay_seconds: float = 0.5
    batch_size: int = 5
    listing_page_size: int = 25
    payload_variable: str = "pageData"
    hydration_variable: str = "__NEXT_DATA__"

    def listing_url(self, seller_id: str, page: int) -> str:
        return (
            f"{self.base_url.rstrip('/')}{self.listing_path}"
            f"?auc_user_id={quote(seller_id, safe='')}&role=seller&apg={page}"
        )
