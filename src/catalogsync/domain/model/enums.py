"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class CreditRole(StrEnum):
    """Role of an artist on a track."""

    PRIMARY = "primary"
    FEATURE = "feature"


class ReleaseOutcomeStatus(StrEnum):
    IMPORTED = "imported"
    SKIPPED_NO_OFFICIAL = "skipped-no-official-edition"
    SKIPPED_PROVIDER_ERROR = "skipped-provider-error"
    FAILED_WRITE = "failed-write"

    @property
    def is_skip(self) -> bool:
        return self in {
            ReleaseOutcomeStatus.SKIPPED_NO_OFFICIAL,
            ReleaseOutcomeStatus.SKIPPED_PROVIDER_ERROR,
        }


class ArtistMatch(StrEnum):
    """How an external artist identity was matched to a catalog row."""

    EXTERNAL_ID = "external-id"
    SLUG = "slug"
    NAME = "name"
