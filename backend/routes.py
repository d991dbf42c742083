"""Consolidated API router for all domain endpoints."""

from fastapi import APIRouter

from backend.config.settings import get_settings
from backend.domains.board import routes as board


def build_api_router() -> APIRouter:
    """Mount domain routers under the configured prefix."""
    router = APIRouter(prefix=get_settings().api_prefix)
    router.include_router(board.router, tags=["board"])
    return router
