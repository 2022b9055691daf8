"""SQLAlchemy adapter package for the catalog store."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyArtistRepository,
    SqlAlchemyCreditRepository,
    SqlAlchemyReleaseRepository,
    SqlAlchemyTrackRepository,
)
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyArtistRepository",
    "SqlAlchemyCatalogUnitOfWork",
    "SqlAlchemyCreditRepository",
    "SqlAlchemyReleaseRepository",
    "SqlAlchemyTrackRepository",
    "StartupError",
    "create_all_tables",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
