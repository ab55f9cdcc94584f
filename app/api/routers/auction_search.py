"""
app/api/routers/auction_search.py

Closed-auction search endpoint streaming progress as server-sent events.
"""

from __future__ import annotations

import json
from collections.abc import Iterator

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, StreamingResponse

from app.schemas.auction_search import AuctionSearchErrorResponse, AuctionSearchRequest
from app.scraping.errors import SellerUrlValidationError
from app.scraping.events import ProgressEvent
from app.services.auction_search_service import (
    AuctionSearchService,
    get_auction_search_service,
)

router = APIRouter(prefix="/api", tags=["auction-search"])


def _to_sse(events: Iterator[ProgressEvent]) -> Iterator[str]:
    try:
        for event in events:
            yield f"data: {json.dumps(event.to_payload(), ensure_ascii=False)}\n\n"
    finally:
        close = getattr(events, "close", None)
        if close is not None:
            close()


def _bad_request(error: str, details: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=AuctionSearchErrorResponse(error=error, details=details).model_dump(),
    )


@router.post(
    "/search",
    response_model=None,
    responses={status.HTTP_400_BAD_REQUEST: {"model": AuctionSearchErrorResponse}},
)
def search_closed_auctions(
    payload: AuctionSearchRequest,
    search_service: AuctionSearchService = Depends(get_auction_search_service),
) -> StreamingResponse | JSONResponse:
    """
    Stream status, total, progress and a final complete or error event.
    """

    if not payload.seller_url:
        return _bad_request("Seller URL is required.")

    try:
        events = search_service.stream_events(payload.to_query())
    except SellerUrlValidationError as exc:
        return _bad_request("Invalid seller URL.", str(exc))

    return StreamingResponse(
        content=_to_sse(events),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )
