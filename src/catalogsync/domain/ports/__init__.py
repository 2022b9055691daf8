"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import ArtistCatalogProvider, ProviderError, ReleaseSearchProvider
from .persistence import (
    ArtistRepository,
    CreditRepository,
    ReleaseRepository,
    Repository,
    TrackRepository,
)
from .unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ArtistCatalogProvider",
    "ArtistRepository",
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "CreditRepository",
    "ProviderError",
    "ReleaseRepository",
    "ReleaseSearchProvider",
    "Repository",
    "RepositoryCollection",
    "TrackRepository",
    "UnitOfWork",
]
