"""SQLAlchemy mapping metadata for the catalog model."""

from __future__ import annotations

import logging
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    Enum,
    ForeignKey,
    Integer,
    String,
    Table,
    UniqueConstraint,
    orm,
)

from catalogsync.domain.model import Artist, CreditRole, Release, Track

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Core tables -----------------------------------------------------------------

artist_table = Table(
    "artists",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("slug", String, nullable=False, unique=True),
    Column("mbid", String(36), nullable=True, unique=True),
)

release_table = Table(
    "releases",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String, nullable=False),
    Column("slug", String, nullable=False, unique=True),
    Column("artist_id", Integer, ForeignKey("artists.id"), nullable=True),
    Column("year", Integer, nullable=True),
    Column("mbid", String(36), nullable=True, unique=True),
)

track_table = Table(
    "tracks",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "release_id",
        Integer,
        ForeignKey("releases.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("disc_no", Integer, nullable=False, default=1),
    Column("track_no", Integer, nullable=False),
    Column("title", String, nullable=False),
    Column("duration_seconds", Integer, nullable=True),
    UniqueConstraint("release_id", "disc_no", "track_no"),
)

# Link tables -----------------------------------------------------------------
# Written through dialect upserts, so they are read as plain rows, not mapped.

release_artist_table = Table(
    "release_artists",
    mapper_registry.metadata,
    Column(
        "release_id",
        Integer,
        ForeignKey("releases.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("artist_id", Integer, ForeignKey("artists.id", ondelete="CASCADE"), primary_key=True),
    Column("position", Integer, nullable=False, default=1),
    Column("is_primary", Boolean, nullable=False, default=False),
)

track_artist_table = Table(
    "track_artists",
    mapper_registry.metadata,
    Column("track_id", Integer, ForeignKey("tracks.id", ondelete="CASCADE"), primary_key=True),
    Column("artist_id", Integer, ForeignKey("artists.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "role",
        Enum(
            CreditRole,
            native_enum=False,
            values_callable=lambda roles: [role.value for role in roles],
        ),
        nullable=False,
    ),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the catalog model."""

    log.debug("Starting SQLAlchemy mappers")
    mapper_registry.map_imperatively(Artist, artist_table)
    mapper_registry.map_imperatively(Release, release_table)
    mapper_registry.map_imperatively(Track, track_table)
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create missing catalog tables; existing tables are left untouched."""

    log.debug("Ensuring catalog tables exist")
    mapper_registry.metadata.create_all(engine)
