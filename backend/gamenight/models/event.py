"""GameNight ORM model and its status state machine."""
import uuid
import enum
from datetime import datetime
from typing import Optional

import pytz
from sqlalchemy import Column, String, Text, Date, Time, DateTime, Integer, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from gamenight.database import Base


class GameNightStatus(str, enum.Enum):
    planning = "PLANNING"
    locked_in = "LOCKED_IN"
    in_progress = "IN_PROGRESS"
    completed = "COMPLETED"
    cancelled = "CANCELLED"


class Vibe(str, enum.Enum):
    chill = "CHILL"
    competitive = "COMPETITIVE"
    chaos = "CHAOS"
    party = "PARTY"
    cozy = "COZY"


# current status -> statuses a host may move to next
ALLOWED_TRANSITIONS: dict[GameNightStatus, frozenset[GameNightStatus]] = {
    GameNightStatus.planning: frozenset({GameNightStatus.locked_in, GameNightStatus.cancelled}),
    GameNightStatus.locked_in: frozenset({
        GameNightStatus.in_progress,
        GameNightStatus.planning,
        GameNightStatus.cancelled,
    }),
    GameNightStatus.in_progress: frozenset({GameNightStatus.completed}),
    GameNightStatus.completed: frozenset(),
    GameNightStatus.cancelled: frozenset({GameNightStatus.planning}),
}

MOMENTS_OPEN = frozenset({GameNightStatus.in_progress, GameNightStatus.completed})
CHAOS_OPEN = frozenset({GameNightStatus.in_progress})


def allowed_next(current: GameNightStatus) -> frozenset[GameNightStatus]:
    return ALLOWED_TRANSITIONS[current]


def can_transition(current: GameNightStatus, requested: GameNightStatus) -> bool:
    return requested in ALLOWED_TRANSITIONS[current]


class GameNight(Base):
    __tablename__ = "game_nights"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    host_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    timezone = Column(String(50), nullable=False, default="UTC")  # IANA tz
    location = Column(String(500), nullable=True)
    vibe = Column(SAEnum(Vibe), nullable=False, default=Vibe.chill)
    theme = Column(String(200), nullable=True)
    house_rules = Column(Text, nullable=True)
    max_guests = Column(Integer, nullable=True)
    status = Column(SAEnum(GameNightStatus), nullable=False, default=GameNightStatus.planning)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    guests = relationship(
        "Guest", back_populates="event", cascade="all, delete-orphan", order_by="Guest.created_at"
    )
    lineup = relationship(
        "LineupEntry", back_populates="event", cascade="all, delete-orphan", order_by="LineupEntry.play_order"
    )

    @property
    def allowed_next(self) -> list[GameNightStatus]:
        return sorted(allowed_next(self.status), key=lambda s: list(GameNightStatus).index(s))

    @property
    def starts_at_utc(self) -> Optional[datetime]:
        """Start of the night in UTC, localized from the event's own timezone."""
        if self.start_time is None:
            return None
        tz = pytz.timezone(self.timezone or "UTC")
        local = tz.localize(datetime.combine(self.date, self.start_time))
        return local.astimezone(pytz.utc)
