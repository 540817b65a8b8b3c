"""Photo set and volume ORM models."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..base import Base, utcnow

if TYPE_CHECKING:
    from .links import DiscVolumeORM


class PhotoSetORM(Base):
    """ORM model for photo_sets table."""

    __tablename__ = "photo_sets"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Basic info
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    size: Mapped[Optional[int]] = mapped_column(BigInteger)  # KiB, derived from volumes
    created_at: Mapped[datetime] = mapped_column(default=utcnow)

    # Relationship to volumes
    volumes: Mapped[list["VolumeORM"]] = relationship(
        "VolumeORM",
        back_populates="photo_set",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: [VolumeORM.vol, VolumeORM.id],
    )


class VolumeORM(Base):
    """ORM model for volumes table."""

    __tablename__ = "volumes"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Foreign key
    photo_set_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("photo_sets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Basic info
    vol: Mapped[int] = mapped_column(Integer, nullable=False)
    size: Mapped[Optional[int]] = mapped_column(BigInteger)  # KiB
    created_at: Mapped[datetime] = mapped_column(default=utcnow)

    # Relationship to photo set
    photo_set: Mapped["PhotoSetORM"] = relationship("PhotoSetORM", back_populates="volumes")

    # Discs this volume is burned on
    disc_links: Mapped[list["DiscVolumeORM"]] = relationship(
        "DiscVolumeORM",
        back_populates="volume",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="desc(DiscVolumeORM.burned_at)",
    )
