"""Declarative base for ORM models."""

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models."""


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form SQLite hands back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
