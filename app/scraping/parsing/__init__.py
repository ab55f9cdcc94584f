"""
Parsing layer exports.
"""

from app.scraping.parsing.listing_parser import ListingPageParser, parse_total_pages
from app.scraping.parsing.payload_extractors import (
    AssignedObjectStrategy,
    ExtractedPayload,
    HydrationPayloadStrategy,
    ItemPayload,
    JsonElementStrategy,
    PayloadExtractor,
    normalize_item,
    parse_price,
)

__all__ = [
    "AssignedObjectStrategy",
    "ExtractedPayload",
    "HydrationPayloadStrategy",
    "ItemPayload",
    "JsonElementStrategy",
    "ListingPageParser",
    "PayloadExtractor",
    "normalize_item",
    "parse_price",
    "parse_total_pages",
]
