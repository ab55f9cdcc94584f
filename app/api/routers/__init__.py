"""
app/api/routers package marker.
"""

from app.api.routers.auction_search import router as auction_search_router

__all__ = ["auction_search_router"]
