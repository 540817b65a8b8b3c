"""Disc link (junction) ORM models.

One table per resource kind. The composite primary key allows a resource on
many discs (backup copies) but only once per disc.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..base import Base, utcnow

if TYPE_CHECKING:
    from .disc import DiscORM
    from .movie import MovieORM, OtherORM
    from .photo_set import VolumeORM
    from .series import EpisodeORM


class DiscMovieORM(Base):
    """ORM model for disc_movies table."""

    __tablename__ = "disc_movies"

    disc_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("discs.id", ondelete="CASCADE"), primary_key=True
    )
    movie_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("movies.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    burned_at: Mapped[datetime] = mapped_column(default=utcnow)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    disc: Mapped["DiscORM"] = relationship("DiscORM", back_populates="movie_links")
    movie: Mapped["MovieORM"] = relationship("MovieORM", back_populates="disc_links")


class DiscEpisodeORM(Base):
    """ORM model for disc_episodes table."""

    __tablename__ = "disc_episodes"

    disc_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("discs.id", ondelete="CASCADE"), primary_key=True
    )
    episode_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("episodes.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    burned_at: Mapped[datetime] = mapped_column(default=utcnow)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    disc: Mapped["DiscORM"] = relationship("DiscORM", back_populates="episode_links")
    episode: Mapped["EpisodeORM"] = relationship("EpisodeORM", back_populates="disc_links")


class DiscVolumeORM(Base):
    """ORM model for disc_volumes table."""

    __tablename__ = "disc_volumes"

    disc_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("discs.id", ondelete="CASCADE"), primary_key=True
    )
    volume_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("volumes.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    burned_at: Mapped[datetime] = mapped_column(default=utcnow)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    disc: Mapped["DiscORM"] = relationship("DiscORM", back_populates="volume_links")
    volume: Mapped["VolumeORM"] = relationship("VolumeORM", back_populates="disc_links")


class DiscOtherORM(Base):
    """ORM model for disc_others table."""

    __tablename__ = "disc_others"

    disc_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("discs.id", ondelete="CASCADE"), primary_key=True
    )
    other_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("others.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    burned_at: Mapped[datetime] = mapped_column(default=utcnow)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    disc: Mapped["DiscORM"] = relationship("DiscORM", back_populates="other_links")
    other: Mapped["OtherORM"] = relationship("OtherORM", back_populates="disc_links")
