"""Repository layer for database operations."""

from .disc_repository import DiscRepository
from .link_repository import LINK_TABLES, LinkRepository
from .movie_repository import MovieRepository
from .other_repository import OtherRepository
from .photo_set_repository import PhotoSetRepository, VolumeRepository
from .series_repository import EpisodeRepository, SeriesRepository

__all__ = [
    "DiscRepository",
    "LINK_TABLES",
    "LinkRepository",
    "MovieRepository",
    "OtherRepository",
    "PhotoSetRepository",
    "VolumeRepository",
    "EpisodeRepository",
    "SeriesRepository",
]
