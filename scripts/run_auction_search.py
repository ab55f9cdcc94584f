"""
Run a closed-auction search from CLI and print progress events as JSON lines.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from app.config import get_app_settings
from app.domain.closed_auctions import SearchQuery
from app.scraping.errors import SellerUrlValidationError
from app.services.auction_search_service import AuctionSearchService


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Harvest closed auctions for one seller.")
    parser.add_argument("seller_url", help="Seller listing URL containing auc_user_id.")
    parser.add_argument("--keyword", default="", help="Case-insensitive title filter.")
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of detail pages to fetch after filtering.",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Also print per-item progress events.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, get_app_settings().log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )

    query = SearchQuery(seller_url=args.seller_url, keyword=args.keyword, limit=args.limit)
    service = AuctionSearchService()
    try:
        events = service.stream_events(query)
    except SellerUrlValidationError as exc:
        print(json.dumps({"type": "error", "error": "Invalid seller URL.", "details": str(exc)}))
        return 2

    exit_code = 0
    for event in events:
        if event.type == "progress" and not args.progress:
            continue
        print(json.dumps(event.to_payload(), ensure_ascii=False), flush=True)
        if event.type == "error":
            exit_code = 1
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
