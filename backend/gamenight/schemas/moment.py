"""Pydantic schemas for moments."""
from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field

from gamenight.models.moment import MomentType


class MomentCreate(BaseModel):
    type: MomentType
    content: str = Field(max_length=1000)


class MomentOut(BaseModel):
    moment_id: str
    event_id: str
    type: MomentType
    content: str
    created_by_id: str
    created_at: datetime

    model_config = {"from_attributes": True}
