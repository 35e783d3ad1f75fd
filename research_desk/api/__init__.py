"""API routers."""

from __future__ import annotations

from fastapi import APIRouter

from . import pages, research, trading


def get_api_router() -> APIRouter:
    """Router carrying the JSON API under ``/api``."""
    api_router = APIRouter(prefix="/api")
    api_router.include_router(research.router)
    api_router.include_router(trading.router)
    return api_router


def get_pages_router() -> APIRouter:
    """Router carrying the server-rendered pages."""
    return pages.router


__all__ = ["get_api_router", "get_pages_router"]
