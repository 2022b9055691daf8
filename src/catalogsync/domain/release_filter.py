"""Studio-album filter for provider release groups."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

ALBUM_PRIMARY_TYPE: Final[str] = "album"
MIXTAPE_TYPE: Final[str] = "Mixtape/Street"
COMPILATION_TYPE: Final[str] = "Compilation"
EXCLUDED_SECONDARY_TYPES: Final[frozenset[str]] = frozenset(
    {
        "Live",
        "Remix",
        "DJ-mix",
        "Soundtrack",
        "Spokenword",
        "Interview",
        "Audiobook",
        "Demo",
        "Other",
        "EP",
        "Single",
    }
)


class ReleaseGroupLike(Protocol):
    @property
    def primary_type(self) -> str | None: ...

    @property
    def secondary_types(self) -> Sequence[str]: ...


@dataclass(frozen=True, slots=True)
class FilterOptions:
    include_mixtapes: bool = False
    include_compilations: bool = False


def should_keep_group(group: ReleaseGroupLike, options: FilterOptions | None = None) -> bool:
    """Return whether ``group`` is a canonical album under ``options``.

    Secondary types not listed anywhere are rejected too: a tag the provider adds
    in future should not slip into the catalog unnoticed.
    """

    active = options or FilterOptions()
    if str(group.primary_type or "").lower() != ALBUM_PRIMARY_TYPE:
        return False

    secondary = {str(value) for value in group.secondary_types}
    if not secondary:
        return True
    # an excluded tag wins over any opt-in flag ("Mixtape/Street" + "Live" stays out)
    if secondary & EXCLUDED_SECONDARY_TYPES:
        return False
    return secondary <= _opted_in_types(active)


def _opted_in_types(options: FilterOptions) -> frozenset[str]:
    allowed: set[str] = set()
    if options.include_mixtapes:
        allowed.add(MIXTAPE_TYPE)
    if options.include_compilations:
        allowed.add(COMPILATION_TYPE)
    return frozenset(allowed)


def filter_groups[TGroup: ReleaseGroupLike](
    groups: Iterable[TGroup],
    options: FilterOptions | None = None,
) -> list[TGroup]:
    return [group for group in groups if should_keep_group(group, options)]
