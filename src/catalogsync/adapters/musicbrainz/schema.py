"""MusicBrainz response schemas for catalog synchronisation.

Provider data quality varies per entity, so almost every field is optional and
unknown keys are accepted.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)

type MBId = str
type MBDate = str  # YYYY, YYYY-MM or YYYY-MM-DD
type CountryCode = str  # ISO 3166-1 + specials, see https://musicbrainz.org/doc/Release/Country


class MusicBrainzBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "MusicBrainz %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class MBEntityType(StrEnum):
    ARTIST = "artist"
    RECORDING = "recording"
    RELEASE = "release"
    RELEASE_GROUP = "release-group"


class ReleaseGroupPrimaryType(StrEnum):
    ALBUM = "Album"
    SINGLE = "Single"
    EP = "EP"
    BROADCAST = "Broadcast"
    OTHER = "Other"


class ReleaseGroupSecondaryType(StrEnum):
    COMPILATION = "Compilation"
    SOUNDTRACK = "Soundtrack"
    SPOKENWORD = "Spokenword"
    INTERVIEW = "Interview"
    AUDIOBOOK = "Audiobook"
    AUDIO_DRAMA = "Audio drama"
    LIVE = "Live"
    REMIX = "Remix"
    DJMIX = "DJ-mix"
    MIXTAPE = "Mixtape/Street"
    DEMO = "Demo"
    FIELD_RECORDING = "Field recording"


class MusicBrainzLifeSpan(MusicBrainzBaseModel):
    begin: MBDate | None = None
    end: MBDate | None = None
    ended: bool | None = None


class MusicBrainzArtist(MusicBrainzBaseModel):
    id: MBId | None = None
    name: str | None = None
    sort_name: str | None = Field(default=None, alias="sort-name")
    disambiguation: str | None = None
    country: CountryCode | None = None
    type: str | None = None
    score: int | None = None
    life_span: MusicBrainzLifeSpan | None = Field(default=None, alias="life-span")


class MusicBrainzArtistCredit(MusicBrainzBaseModel):
    """One entry of an ``artist-credit`` list.

    Most payloads nest a full artist object; some older or hand-built payloads
    carry the artist as a bare string, or only the credited ``name``.
    """

    name: str | None = None
    artist: MusicBrainzArtist | str | None = None
    join_phrase: str | None = Field(default=None, alias="joinphrase")

    @property
    def artist_id(self) -> MBId | None:
        if isinstance(self.artist, MusicBrainzArtist):
            return self.artist.id
        return None


class MusicBrainzReleaseGroup(MusicBrainzBaseModel):
    id: MBId
    title: str = ""
    disambiguation: str | None = None
    primary_type: str | None = Field(default=None, alias="primary-type")
    secondary_types: list[str] = Field(default_factory=list, alias="secondary-types")
    first_release_date: MBDate | None = Field(default=None, alias="first-release-date")

    @property
    def year(self) -> int | None:
        raw = (self.first_release_date or "")[:4]
        return int(raw) if raw.isdigit() else None


class MusicBrainzRecording(MusicBrainzBaseModel):
    id: MBId | None = None
    title: str | None = None
    length: int | None = Field(default=None, description="Length in ms")
    artist_credit: list[MusicBrainzArtistCredit] = Field(
        default_factory=list["MusicBrainzArtistCredit"], alias="artist-credit"
    )


class MusicBrainzTrack(MusicBrainzBaseModel):
    id: MBId | None = None
    title: str | None = None
    number: str | None = None
    position: int | None = None
    length: int | None = Field(default=None, description="Length in ms")
    artist_credit: list[MusicBrainzArtistCredit] = Field(
        default_factory=list["MusicBrainzArtistCredit"], alias="artist-credit"
    )
    recording: MusicBrainzRecording | None = None

    @property
    def effective_credits(self) -> list[MusicBrainzArtistCredit]:
        """Track-level credits, falling back to the underlying recording's."""

        if self.artist_credit:
            return self.artist_credit
        if self.recording is not None:
            return self.recording.artist_credit
        return []

    @property
    def length_ms(self) -> int | None:
        if self.recording is not None and self.recording.length is not None:
            return self.recording.length
        return self.length


class MusicBrainzMedium(MusicBrainzBaseModel):
    position: int | None = None
    format: str | None = None
    tracks: list[MusicBrainzTrack] = Field(default_factory=list["MusicBrainzTrack"])


class MusicBrainzRelease(MusicBrainzBaseModel):
    id: MBId
    title: str = ""
    status: str | None = None
    country: CountryCode | None = None
    date: MBDate | None = None
    score: int | None = None
    disambiguation: str | None = None
    artist_credit: list[MusicBrainzArtistCredit] = Field(
        default_factory=list["MusicBrainzArtistCredit"], alias="artist-credit"
    )
    release_group: MusicBrainzReleaseGroup | None = Field(default=None, alias="release-group")
    media: list[MusicBrainzMedium] = Field(default_factory=list["MusicBrainzMedium"])


class MusicBrainzArtistSearch(MusicBrainzBaseModel):
    count: int | None = None
    offset: int | None = None
    artists: list[MusicBrainzArtist] = Field(default_factory=list["MusicBrainzArtist"])


class MusicBrainzReleaseGroupBrowse(MusicBrainzBaseModel):
    release_group_count: int | None = Field(default=None, alias="release-group-count")
    release_group_offset: int | None = Field(default=None, alias="release-group-offset")
    release_groups: list[MusicBrainzReleaseGroup] = Field(
        default_factory=list["MusicBrainzReleaseGroup"], alias="release-groups"
    )


class MusicBrainzReleaseList(MusicBrainzBaseModel):
    """Response of both the release browse and the release search endpoints."""

    count: int | None = None
    offset: int | None = None
    release_count: int | None = Field(default=None, alias="release-count")
    release_offset: int | None = Field(default=None, alias="release-offset")
    releases: list[MusicBrainzRelease] = Field(default_factory=list["MusicBrainzRelease"])
