"""
Environment config loader for closed-auction scraping.
"""

from __future__ import annotations

import os
from functools import lru_cache

from app.config import load_env_files
from app.scraping.config.models import AuctionScrapingSettings

_ENV_PREFIX = "AUCTION_SCRAPE_"


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(_ENV_PREFIX + name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(_ENV_PREFIX + name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    raw = os.getenv(_ENV_PREFIX + name)
    if raw is None:
        return default
    stripped = raw.strip()
    return stripped if stripped else default


def load_auction_scraping_settings() -> AuctionScrapingSettings:
    """
    Build scraper settings from environment variables.
    """

    defaults = AuctionScrapingSettings()
    return AuctionScrapingSettings(
        base_url=_get_str_env("BASE_URL", defaults.base_url).rstrip("/"),
        listing_path=_get_str_env("LISTING_PATH", defaults.listing_path),
        item_path_marker=_get_str_env("ITEM_PATH_MARKER", defaults.item_path_marker),
        seller_host=_get_str_env("SELLER_HOST", defaults.seller_host).lower(),
        user_agent=_get_str_env("USER_AGENT", defaults.user_agent),
        timeout_seconds=max(
            1.0,
            _get_float_env("TIMEOUT_SECONDS", defaults.timeout_seconds),
        ),
        max_attempts=max(1, _get_int_env("MAX_ATTEMPTS", defaults.max_attempts)),
        backoff_base_seconds=max(
            0.0,
            _get_float_env("BACKOFF_BASE_SECONDS", defaults.backoff_base_seconds),
        ),
        listing_delay_seconds=max(
            0.0,
            _get_float_env("LISTING_DELAY_SECONDS", defaults.listing_delay_seconds),
        ),
        batch_delay_seconds=max(
            0.0,
            _get_float_env("BATCH_DELAY_SECONDS", defaults.batch_delay_seconds),
        ),
        batch_size=max(1, _get_int_env("BATCH_SIZE", defaults.batch_size)),
        listing_page_size=max(
            1,
            _get_int_env("LISTING_PAGE_SIZE", defaults.listing_page_size),
        ),
        payload_variable=_get_str_env("PAYLOAD_VARIABLE", defaults.payload_variable),
        hydration_variable=_get_str_env("HYDRATION_VARIABLE", defaults.hydration_variable),
    )


@lru_cache(maxsize=1)
def get_auction_scraping_settings() -> AuctionScrapingSettings:
    """
    Return cached scraper settings, loading `.env` files first.
    """

    load_env_files()
    return load_auction_scraping_settings()
