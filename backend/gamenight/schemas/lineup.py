"""Pydantic schemas for the game lineup and voting."""
from __future__ import annotations
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

from gamenight.models.lineup import LineupStatus


class LineupEntryCreate(BaseModel):
    game_ref: Optional[str] = None
    game_title: Optional[str] = Field(default=None, max_length=200)
    custom_name: Optional[str] = Field(default=None, max_length=200)
    estimated_minutes: Optional[int] = Field(default=None, ge=1)


class LineupEntryUpdate(BaseModel):
    status: Optional[LineupStatus] = None
    winner_name: Optional[str] = Field(default=None, max_length=100)
    chaos_level: Optional[int] = Field(default=None, ge=1, le=5)
    notes: Optional[str] = None
    play_order: Optional[int] = Field(default=None, ge=0)


class LineupEntryOut(BaseModel):
    entry_id: str
    event_id: str
    game_ref: Optional[str] = None
    game_title: Optional[str] = None
    custom_name: Optional[str] = None
    display_name: str
    status: LineupStatus
    play_order: int
    estimated_minutes: Optional[int] = None
    winner_name: Optional[str] = None
    chaos_level: Optional[int] = None
    notes: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    vote_count: int = 0
    voter_count: int = 0
    my_vote: int = 0

    model_config = {"from_attributes": True}


class VotePayload(BaseModel):
    value: Literal[-1, 0, 1]


class VoteResult(BaseModel):
    entry_id: str
    vote_count: int
    voter_count: int
    my_vote: int
