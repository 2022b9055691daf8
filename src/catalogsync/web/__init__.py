"""HTTP surface for request-scoped catalog lookups."""

from __future__ import annotations

from .app import create_app
from .live import get_release_search_provider, router

__all__ = ["create_app", "get_release_search_provider", "router"]
