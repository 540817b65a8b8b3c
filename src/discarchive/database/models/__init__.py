"""Database ORM models."""

from .disc import DiscORM, InspectionRecordORM
from .links import DiscEpisodeORM, DiscMovieORM, DiscOtherORM, DiscVolumeORM
from .movie import MovieORM, OtherORM
from .photo_set import PhotoSetORM, VolumeORM
from .series import EpisodeORM, SeriesORM

__all__ = [
    "DiscORM",
    "InspectionRecordORM",
    "MovieORM",
    "OtherORM",
    "SeriesORM",
    "EpisodeORM",
    "PhotoSetORM",
    "VolumeORM",
    "DiscMovieORM",
    "DiscEpisodeORM",
    "DiscVolumeORM",
    "DiscOtherORM",
]
