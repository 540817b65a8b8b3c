"""Pydantic models for API requests/responses and domain objects."""

from .disc import (
    Disc,
    DiscCreate,
    DiscPage,
    DiscType,
    DiscUpdate,
    InspectionCreate,
    InspectionRecord,
    LinkRequest,
)
from .duplicates import DuplicateCheckRequest, DuplicateCheckResponse, DuplicateReport
from .page import Page
from .resources import (
    Episode,
    EpisodeSpec,
    Movie,
    MovieSpec,
    NewEpisodeSpec,
    NewVolumeSpec,
    Other,
    OtherSpec,
    PhotoSet,
    PhotoSetSpec,
    ResourceKind,
    Series,
    SeriesSpec,
    Volume,
    VolumeSpec,
)
from .sizes import SizeInput, SizeParseRequest, SizeQuantity, SizeReading, SizeUnit

__all__ = [
    "Disc",
    "DiscCreate",
    "DiscPage",
    "DiscType",
    "DiscUpdate",
    "InspectionCreate",
    "InspectionRecord",
    "LinkRequest",
    "DuplicateCheckRequest",
    "DuplicateCheckResponse",
    "DuplicateReport",
    "Page",
    "Episode",
    "EpisodeSpec",
    "Movie",
    "MovieSpec",
    "NewEpisodeSpec",
    "NewVolumeSpec",
    "Other",
    "OtherSpec",
    "PhotoSet",
    "PhotoSetSpec",
    "ResourceKind",
    "Series",
    "SeriesSpec",
    "Volume",
    "VolumeSpec",
    "SizeInput",
    "SizeParseRequest",
    "SizeQuantity",
    "SizeReading",
    "SizeUnit",
]
