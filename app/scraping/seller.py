"""
Seller identifier extraction from seller listing URLs.
"""

from __future__ import annotations

from urllib.parse import parse_qs, urlparse

from app.scraping.errors import SellerUrlValidationError

SELLER_ID_PARAM = "auc_user_id"


def extract_seller_id(url: str | None, *, seller_host: str) -> str:
    """
    Return the seller identifier carried by `url`.

    Raises SellerUrlValidationError when the URL is missing, unparseable,
    points to another host or lacks a non-empty seller parameter.
    """

    if not url or not url.strip():
        raise SellerUrlValidationError("Seller URL is required.")

    try:
        parsed = urlparse(url.strip())
        hostname = (parsed.hostname or "").lower()
    except ValueError as exc:
        raise SellerUrlValidationError(f"Seller URL could not be parsed: {url}") from exc

    if not parsed.scheme or seller_host.lower() not in hostname:
        raise SellerUrlValidationError(f"Seller URL must point to {seller_host}: {url}")

    values = parse_qs(parsed.query).get(SELLER_ID_PARAM, [])
    seller_id = values[0].strip() if values else ""
    if not seller_id:
        raise SellerUrlValidationError(f"Seller URL is missing '{SELLER_ID_PARAM}': {url}")
    return seller_id


def is_valid_seller_url(url: str | None, *, seller_host: str) -> bool:
    try:
        extract_seller_id(url, seller_host=seller_host)
    except SellerUrlValidationError:
        return False
    return True
