"""
Config helpers for closed-auction scraping.
"""

from app.scraping.config.loader import (
    get_auction_scraping_settings,
    load_auction_scraping_settings,
)
from app.scraping.config.models import AuctionScrapingSettings

__all__ = [
    "AuctionScrapingSettings",
    "get_auction_scraping_settings",
    "load_auction_scraping_settings",
]
