"""Pydantic schemas for game nights."""
from __future__ import annotations
import datetime as dt
from typing import Optional
from pydantic import BaseModel, Field

from gamenight.models.event import GameNightStatus, Vibe
from gamenight.schemas.guest import GuestCounts, GuestOut
from gamenight.schemas.lineup import LineupEntryOut
from gamenight.schemas.moment import MomentOut


class EventCreate(BaseModel):
    host_id: str
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    date: dt.date
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    timezone: str = "UTC"
    location: Optional[str] = Field(default=None, max_length=500)
    vibe: Vibe = Vibe.chill
    theme: Optional[str] = Field(default=None, max_length=200)
    house_rules: Optional[str] = None
    max_guests: Optional[int] = Field(default=None, ge=1)


class EventUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    date: Optional[dt.date] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    timezone: Optional[str] = None
    location: Optional[str] = Field(default=None, max_length=500)
    vibe: Optional[Vibe] = None
    theme: Optional[str] = Field(default=None, max_length=200)
    max_guests: Optional[int] = Field(default=None, ge=1)


class StatusChange(BaseModel):
    status: GameNightStatus


class HouseRulesUpdate(BaseModel):
    house_rules: Optional[str] = None


class EventOut(BaseModel):
    event_id: str
    host_id: str
    title: str
    description: Optional[str] = None
    date: dt.date
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    timezone: str
    starts_at_utc: Optional[dt.datetime] = None
    location: Optional[str] = None
    vibe: Vibe
    theme: Optional[str] = None
    house_rules: Optional[str] = None
    max_guests: Optional[int] = None
    status: GameNightStatus
    allowed_next: list[GameNightStatus] = []
    completed_at: Optional[dt.datetime] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}


class FeatureGates(BaseModel):
    moments_enabled: bool
    chaos_enabled: bool


class EventDetail(EventOut):
    guests: list[GuestOut] = []
    guest_counts: GuestCounts
    lineup: list[LineupEntryOut] = []
    moments: list[MomentOut] = []
    features: FeatureGates
    is_host: bool = False
    my_guest_id: Optional[str] = None
