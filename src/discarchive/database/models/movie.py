"""Movie and other-resource ORM models."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..base import Base, utcnow

if TYPE_CHECKING:
    from .links import DiscMovieORM, DiscOtherORM


class MovieORM(Base):
    """ORM model for movies table."""

    __tablename__ = "movies"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Basic info
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    size: Mapped[Optional[int]] = mapped_column(BigInteger)  # KiB
    format: Mapped[str] = mapped_column(String(20), nullable=False)
    codec: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)

    # Discs this movie is burned on
    disc_links: Mapped[list["DiscMovieORM"]] = relationship(
        "DiscMovieORM",
        back_populates="movie",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="desc(DiscMovieORM.burned_at)",
    )


class OtherORM(Base):
    """ORM model for others table (files that fit no other category)."""

    __tablename__ = "others"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Basic info
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    size: Mapped[Optional[int]] = mapped_column(BigInteger)  # KiB
    created_at: Mapped[datetime] = mapped_column(default=utcnow)

    # Discs this resource is burned on
    disc_links: Mapped[list["DiscOtherORM"]] = relationship(
        "DiscOtherORM",
        back_populates="other",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="desc(DiscOtherORM.burned_at)",
    )
