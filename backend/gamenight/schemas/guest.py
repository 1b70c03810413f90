"""Pydantic schemas for guests, invites, and RSVPs."""
from __future__ import annotations
import datetime as dt
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

from gamenight.models.event import GameNightStatus, Vibe
from gamenight.models.guest import GuestRole, GuestStatus


class GuestCreate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    user_id: Optional[str] = None
    send_email: bool = False
    personal_message: Optional[str] = Field(default=None, max_length=1000)


class GuestOut(BaseModel):
    guest_id: str
    event_id: str
    user_id: Optional[str] = None
    display_name: str
    avatar_url: Optional[str] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    status: GuestStatus
    role: GuestRole
    bringing: Optional[str] = None
    invite_token: Optional[str] = None
    invite_sent_at: Optional[datetime] = None
    invite_method: Optional[str] = None
    responded_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class GuestAdded(BaseModel):
    guest: GuestOut
    email_sent: bool = False
    delivery_error: Optional[str] = None


class InviteResent(BaseModel):
    guest: GuestOut
    email_sent: bool
    delivery_error: Optional[str] = None


class GuestStatusUpdate(BaseModel):
    status: GuestStatus


class BringingUpdate(BaseModel):
    bringing: Optional[str] = Field(default=None, max_length=200)


class RSVPPayload(BaseModel):
    status: Literal["IN", "MAYBE", "OUT"]
    guest_name: Optional[str] = Field(default=None, max_length=100)
    bringing: Optional[str] = Field(default=None, max_length=200)


class RSVPResponse(BaseModel):
    message: str
    guest: GuestOut


class GuestCounts(BaseModel):
    total: int
    going: int = Field(serialization_alias="in")
    maybe: int
    out: int
    pending: int
    spots_left: Optional[int] = None


class InviteGuestView(BaseModel):
    guest_id: str
    status: GuestStatus
    guest_name: Optional[str] = None
    bringing: Optional[str] = None
    responded_at: Optional[datetime] = None


class InviteEventView(BaseModel):
    event_id: str
    title: str
    description: Optional[str] = None
    date: dt.date
    start_time: Optional[dt.time] = None
    location: Optional[str] = None
    vibe: Vibe
    theme: Optional[str] = None
    status: GameNightStatus
    host_name: str
    confirmed_guests: list[str] = []
    games_planned: list[str] = []
    total_invited: int


class InviteView(BaseModel):
    game_night: InviteEventView
    guest: InviteGuestView
