"""Disc and inspection record ORM models."""

import datetime as dt
from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, Boolean, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..base import Base, utcnow

if TYPE_CHECKING:
    from .links import DiscEpisodeORM, DiscMovieORM, DiscOtherORM, DiscVolumeORM


class DiscORM(Base):
    """ORM model for discs table."""

    __tablename__ = "discs"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Basic info
    code: Mapped[str] = mapped_column(String(6), nullable=False, unique=True, index=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    size: Mapped[Optional[int]] = mapped_column(BigInteger)  # KiB
    size_locked: Mapped[bool] = mapped_column(Boolean, default=False)  # Size was declared, not derived
    created_at: Mapped[dt.datetime] = mapped_column(default=utcnow, index=True)

    # Resource links
    movie_links: Mapped[list["DiscMovieORM"]] = relationship(
        "DiscMovieORM",
        back_populates="disc",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="desc(DiscMovieORM.burned_at)",
    )
    episode_links: Mapped[list["DiscEpisodeORM"]] = relationship(
        "DiscEpisodeORM",
        back_populates="disc",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="desc(DiscEpisodeORM.burned_at)",
    )
    volume_links: Mapped[list["DiscVolumeORM"]] = relationship(
        "DiscVolumeORM",
        back_populates="disc",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="desc(DiscVolumeORM.burned_at)",
    )
    other_links: Mapped[list["DiscOtherORM"]] = relationship(
        "DiscOtherORM",
        back_populates="disc",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="desc(DiscOtherORM.burned_at)",
    )

    # Inspection history, newest first
    history: Mapped[list["InspectionRecordORM"]] = relationship(
        "InspectionRecordORM",
        back_populates="disc",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: [InspectionRecordORM.date.desc(), InspectionRecordORM.id.desc()],
    )


class InspectionRecordORM(Base):
    """ORM model for inspection_records table."""

    __tablename__ = "inspection_records"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Foreign key
    disc_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("discs.id", ondelete="CASCADE"), nullable=False, index=True
    )

    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    status: Mapped[bool] = mapped_column(Boolean, nullable=False)  # True = healthy
    note: Mapped[Optional[str]] = mapped_column(Text)

    # Relationship to disc
    disc: Mapped["DiscORM"] = relationship("DiscORM", back_populates="history")
