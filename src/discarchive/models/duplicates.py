"""Duplicate resource check models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .resources import ResourceKind


class DuplicateCheckRequest(BaseModel):
    """Resource ids about to be burned, by kind."""

    movie_ids: list[int] = Field(default_factory=list)
    episode_ids: list[int] = Field(default_factory=list)
    volume_ids: list[int] = Field(default_factory=list)
    other_ids: list[int] = Field(default_factory=list)


class DuplicateReport(BaseModel):
    """One existing disc link of a candidate resource."""

    kind: ResourceKind
    resource_id: int
    resource_label: str
    disc_code: str
    disc_id: int
    burned_at: datetime
    notes: Optional[str] = None


class DuplicateCheckResponse(BaseModel):
    """Advisory result of a duplicate check."""

    duplicates: list[DuplicateReport] = Field(default_factory=list)
