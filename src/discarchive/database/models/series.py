"""Series (bangumi) and episode ORM models."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..base import Base, utcnow

if TYPE_CHECKING:
    from .links import DiscEpisodeORM


class SeriesORM(Base):
    """ORM model for series table."""

    __tablename__ = "series"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Basic info
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    size: Mapped[Optional[int]] = mapped_column(BigInteger)  # KiB, derived from episodes
    created_at: Mapped[datetime] = mapped_column(default=utcnow)

    # Relationship to episodes
    episodes: Mapped[list["EpisodeORM"]] = relationship(
        "EpisodeORM",
        back_populates="series",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: [EpisodeORM.season, EpisodeORM.episode, EpisodeORM.id],
    )


class EpisodeORM(Base):
    """ORM model for episodes table."""

    __tablename__ = "episodes"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Foreign key
    series_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("series.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Basic info
    season: Mapped[str] = mapped_column(String(20), nullable=False)  # Label, e.g. "S01"
    episode: Mapped[int] = mapped_column(Integer, nullable=False)
    size: Mapped[Optional[int]] = mapped_column(BigInteger)  # KiB
    format: Mapped[str] = mapped_column(String(20), nullable=False)
    codec: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)

    # Relationship to series
    series: Mapped["SeriesORM"] = relationship("SeriesORM", back_populates="episodes")

    # Discs this episode is burned on
    disc_links: Mapped[list["DiscEpisodeORM"]] = relationship(
        "DiscEpisodeORM",
        back_populates="episode",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="desc(DiscEpisodeORM.burned_at)",
    )
