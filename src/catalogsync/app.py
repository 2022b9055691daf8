"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.adapters.musicbrainz import MusicBrainzClient
from catalogsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    is_started,
    startup,
)
from catalogsync.config import get_catalog_config, get_musicbrainz_config
from catalogsync.domain.sync import import_artist

if TYPE_CHECKING:
    from catalogsync.domain.ports.fetching import ArtistCatalogProvider
    from catalogsync.domain.release_filter import FilterOptions
    from catalogsync.domain.sync import ArtistChooser, ImportReport, UnitOfWorkFactory

log = getLogger(__name__)


def build_musicbrainz_client() -> MusicBrainzClient:
    return MusicBrainzClient(config=get_musicbrainz_config())


def import_artist_from_config(
    query: str,
    *,
    options: FilterOptions | None = None,
    dry_run: bool = False,
    chooser: ArtistChooser | None = None,
    provider: ArtistCatalogProvider | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ImportReport:
    """Import ``query`` with adapters built from the environment.

    Configuration is read up front, so a missing credential fails before any
    request reaches the provider.
    """

    if unit_of_work_factory is None:
        catalog = get_catalog_config()
        if not is_started():
            startup(database_url=catalog.engine_url())
        unit_of_work_factory = SqlAlchemyCatalogUnitOfWork
    effective_provider = provider or build_musicbrainz_client()

    log.debug("Starting import: query=%r, options=%s, dry_run=%s", query, options, dry_run)
    return asyncio.run(
        import_artist(
            query,
            provider=effective_provider,
            unit_of_work_factory=unit_of_work_factory,
            chooser=chooser,
            options=options,
            dry_run=dry_run,
        )
    )
