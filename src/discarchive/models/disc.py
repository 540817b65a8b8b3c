"""Disc models."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .page import Page
from .resources import (
    Episode,
    MovieSpec,
    NewEpisodeSpec,
    NewVolumeSpec,
    OtherSpec,
    PhotoSetSpec,
    SeriesSpec,
    SizedModel,
    Volume,
)
from .sizes import SizeInput


class DiscType(str, Enum):
    """Physical media format of a disc."""

    CD_R = "CD-R"
    CD_RW = "CD-RW"
    DVD_R = "DVD-R"
    DVD_RW = "DVD-RW"
    DVD_PLUS_R = "DVD+R"
    DVD_PLUS_RW = "DVD+RW"
    DVD_R_DL = "DVD-R/DL"
    DVD_PLUS_R_DL = "DVD+R/DL"
    BD_R = "BD-R"
    BD_RE = "BD-RE"
    BD_R_DL = "BD-R/DL"
    BD_RE_DL = "BD-RE/DL"
    BD_R_TL = "BD-R/TL"
    BD_RE_TL = "BD-RE/TL"
    BD_R_QL = "BD-R/QL"
    BD_RE_QL = "BD-RE/QL"


class InspectionCreate(BaseModel):
    """Request to append an inspection record."""

    date: date
    status: bool  # True = disc reads fine
    note: Optional[str] = None


class InspectionRecord(BaseModel):
    """One inspection of a disc."""

    id: int
    disc_id: int
    date: date
    status: bool
    note: Optional[str] = None


class DiscCreate(BaseModel):
    """Request to create a disc with existing and/or new resources."""

    type: DiscType
    size: Optional[SizeInput] = None  # Declared size; derived from resources when omitted

    selected_movie_ids: list[int] = Field(default_factory=list)
    movie_notes: dict[int, str] = Field(default_factory=dict)
    new_movies: list[MovieSpec] = Field(default_factory=list)

    selected_episode_ids: list[int] = Field(default_factory=list)
    episode_notes: dict[int, str] = Field(default_factory=dict)
    new_episodes: list[NewEpisodeSpec] = Field(default_factory=list)
    new_series: list[SeriesSpec] = Field(default_factory=list)

    selected_volume_ids: list[int] = Field(default_factory=list)
    volume_notes: dict[int, str] = Field(default_factory=dict)
    new_volumes: list[NewVolumeSpec] = Field(default_factory=list)
    new_photo_sets: list[PhotoSetSpec] = Field(default_factory=list)

    selected_other_ids: list[int] = Field(default_factory=list)
    other_notes: dict[int, str] = Field(default_factory=dict)
    new_others: list[OtherSpec] = Field(default_factory=list)


class DiscUpdate(BaseModel):
    """
    Partial disc update.

    A ``size`` value declares and locks the disc size; an explicit
    ``size: null`` unlocks it and derives it from the linked resources again.
    """

    type: Optional[DiscType] = None
    size: Optional[SizeInput] = None


class LinkRequest(BaseModel):
    """Request to link an existing resource to a disc."""

    notes: Optional[str] = None


class MovieInfo(SizedModel):
    """Movie fields shown on a disc."""

    id: int
    name: str
    format: str
    codec: str


class OtherInfo(SizedModel):
    """Other-resource fields shown on a disc."""

    id: int
    name: str
    description: Optional[str] = None


class DiscMovieEntry(BaseModel):
    """A movie linked to a disc."""

    movie: MovieInfo
    burned_at: datetime
    notes: Optional[str] = None


class DiscEpisodeEntry(BaseModel):
    """An episode linked to a disc."""

    episode: Episode
    burned_at: datetime
    notes: Optional[str] = None


class DiscVolumeEntry(BaseModel):
    """A volume linked to a disc."""

    volume: Volume
    burned_at: datetime
    notes: Optional[str] = None


class DiscOtherEntry(BaseModel):
    """An other resource linked to a disc."""

    other: OtherInfo
    burned_at: datetime
    notes: Optional[str] = None


class Disc(SizedModel):
    """A disc with everything burned on it."""

    id: int
    code: str
    type: DiscType
    size_locked: bool = False
    created_at: datetime
    movies: list[DiscMovieEntry] = Field(default_factory=list)
    episodes: list[DiscEpisodeEntry] = Field(default_factory=list)
    volumes: list[DiscVolumeEntry] = Field(default_factory=list)
    others: list[DiscOtherEntry] = Field(default_factory=list)
    history: list[InspectionRecord] = Field(default_factory=list)  # Newest first

    @property
    def resource_count(self) -> int:
        """Number of resources linked to this disc."""
        return len(self.movies) + len(self.episodes) + len(self.volumes) + len(self.others)


class DiscPage(Page[Disc]):
    """A page of discs."""
