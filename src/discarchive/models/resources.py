"""Resource models: movies, series and episodes, photo sets and volumes, others."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from ..services import size_units
from .sizes import SizeInput


class ResourceKind(str, Enum):
    """Kind of resource a disc can hold."""

    MOVIE = "movie"
    EPISODE = "episode"
    VOLUME = "volume"
    OTHER = "other"


class DiscRef(BaseModel):
    """A disc a resource is burned on, with the link metadata."""

    disc_id: int
    code: str
    burned_at: datetime
    notes: Optional[str] = None


class SizedModel(BaseModel):
    """Mixin adding a display rendering of ``size``."""

    size: Optional[int] = None  # KiB

    @computed_field
    @property
    def size_display(self) -> str:
        """Size rendered as KiB/MiB/GiB."""
        return size_units.format_size(self.size)


# -- Creation specs ---------------------------------------------------------


class MovieSpec(BaseModel):
    """A movie to create."""

    name: str = Field(min_length=1)
    size: Optional[SizeInput] = None
    format: str
    codec: str
    notes: Optional[str] = None  # Link note when created on a disc


class EpisodeSpec(BaseModel):
    """An episode to create under a series."""

    season: str = Field(min_length=1)  # Label, e.g. "S01"
    episode: int = Field(ge=0)
    size: Optional[SizeInput] = None
    format: str
    codec: str
    notes: Optional[str] = None


class NewEpisodeSpec(EpisodeSpec):
    """An episode to create under an existing series."""

    series_id: int


class SeriesSpec(BaseModel):
    """A series to create together with its episodes."""

    name: str = Field(min_length=1)
    episodes: list[EpisodeSpec] = Field(default_factory=list)


class VolumeSpec(BaseModel):
    """A volume to create under a photo set."""

    vol: int = Field(ge=0)
    size: Optional[SizeInput] = None
    notes: Optional[str] = None


class NewVolumeSpec(VolumeSpec):
    """A volume to create under an existing photo set."""

    photo_set_id: int


class PhotoSetSpec(BaseModel):
    """A photo set to create together with its volumes."""

    name: str = Field(min_length=1)
    volumes: list[VolumeSpec] = Field(default_factory=list)


class OtherSpec(BaseModel):
    """A miscellaneous resource to create."""

    name: str = Field(min_length=1)
    description: Optional[str] = None
    size: Optional[SizeInput] = None
    notes: Optional[str] = None


# -- Standalone create/update requests --------------------------------------


class MovieCreate(MovieSpec):
    """Request to create a movie, optionally linking it to a disc."""

    disc_id: Optional[int] = None


class OtherCreate(OtherSpec):
    """Request to create an other resource, optionally linking it to a disc."""

    disc_id: Optional[int] = None


class EpisodeCreate(EpisodeSpec):
    """Request to add an episode to a series, optionally linking it to a disc."""

    disc_id: Optional[int] = None


class VolumeCreate(VolumeSpec):
    """Request to add a volume to a photo set, optionally linking it to a disc."""

    disc_id: Optional[int] = None


class MovieUpdate(BaseModel):
    """Partial movie update. An explicit ``size: null`` clears the size."""

    name: Optional[str] = None
    size: Optional[SizeInput] = None
    format: Optional[str] = None
    codec: Optional[str] = None


class OtherUpdate(BaseModel):
    """Partial other-resource update."""

    name: Optional[str] = None
    description: Optional[str] = None
    size: Optional[SizeInput] = None


class EpisodeUpdate(BaseModel):
    """Partial episode update."""

    season: Optional[str] = None
    episode: Optional[int] = None
    size: Optional[SizeInput] = None
    format: Optional[str] = None
    codec: Optional[str] = None


class VolumeUpdate(BaseModel):
    """Partial volume update."""

    vol: Optional[int] = None
    size: Optional[SizeInput] = None


class RenameRequest(BaseModel):
    """Rename a series or photo set."""

    name: str = Field(min_length=1)


# -- Read models --------------------------------------------------------------


class Movie(SizedModel):
    """A movie and the discs it is burned on."""

    id: int
    name: str
    format: str
    codec: str
    created_at: datetime
    discs: list[DiscRef] = Field(default_factory=list)


class Other(SizedModel):
    """A miscellaneous resource and the discs it is burned on."""

    id: int
    name: str
    description: Optional[str] = None
    created_at: datetime
    discs: list[DiscRef] = Field(default_factory=list)


class Episode(SizedModel):
    """An episode of a series."""

    id: int
    series_id: int
    series_name: str
    season: str
    episode: int
    format: str
    codec: str
    discs: list[DiscRef] = Field(default_factory=list)

    @property
    def label(self) -> str:
        """Label such as ``"Show S01E3"``."""
        return f"{self.series_name} S{self.season}E{self.episode}"


class Series(SizedModel):
    """A series with its episodes."""

    id: int
    name: str
    created_at: datetime
    episodes: list[Episode] = Field(default_factory=list)


class Volume(SizedModel):
    """A volume of a photo set."""

    id: int
    photo_set_id: int
    photo_set_name: str
    vol: int
    discs: list[DiscRef] = Field(default_factory=list)

    @property
    def label(self) -> str:
        """Label such as ``"Album Vol.2"``."""
        return f"{self.photo_set_name} Vol.{self.vol}"


class PhotoSet(SizedModel):
    """A photo set with its volumes."""

    id: int
    name: str
    created_at: datetime
    volumes: list[Volume] = Field(default_factory=list)
