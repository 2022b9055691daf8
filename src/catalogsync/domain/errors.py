"""Errors raised by the catalog synchronisation pipeline."""

from __future__ import annotations


class CatalogSyncError(RuntimeError):
    """Base class for pipeline failures."""


class ArtistNotFoundError(CatalogSyncError):
    """The provider returned no candidates for an artist query."""

    def __init__(self, query: str) -> None:
        super().__init__(f'No MusicBrainz artist found for "{query}"')
        self.query = query


class ImportCancelled(CatalogSyncError):  # noqa: N818
    """The operator declined every artist candidate."""


class WriteConflictError(CatalogSyncError):
    """A catalog write violated a uniqueness constraint despite pre-probing."""
