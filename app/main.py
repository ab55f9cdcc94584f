from __future__ import annotations

import logging

from fastapi import FastAPI

from app.config import get_app_settings


def _configure_logging(log_level: str) -> None:
    """
    Configure root logging once for the API process.
    """

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    settings = get_app_settings()
    _configure_logging(settings.log_level)

    application = FastAPI(title=settings.title, version="1.0.0")

    from app.api.routers import auction_search_router

    application.include_router(auction_search_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
