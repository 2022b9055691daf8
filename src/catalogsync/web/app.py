"""FastAPI application factory."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI

from .live import get_release_search_provider
from .live import router as live_router

if TYPE_CHECKING:
    from catalogsync.domain.ports.fetching import ReleaseSearchProvider


def create_app(*, provider: ReleaseSearchProvider | None = None) -> FastAPI:
    """Build the app; configuration errors surface here, never inside a request."""

    app = FastAPI(title="catalogsync")
    app.include_router(live_router)
    if provider is not None:
        app.dependency_overrides[get_release_search_provider] = lambda: provider
    else:
        get_release_search_provider()
    return app
