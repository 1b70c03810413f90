"""LineupEntry and Vote ORM models."""
import uuid
import enum
from sqlalchemy import (
    Column, String, Text, DateTime, Integer, SmallInteger, ForeignKey,
    UniqueConstraint, CheckConstraint, Enum as SAEnum,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from gamenight.database import Base


class LineupStatus(str, enum.Enum):
    queued = "QUEUED"
    playing = "PLAYING"
    completed = "COMPLETED"


class LineupEntry(Base):
    __tablename__ = "lineup_entries"

    entry_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("game_nights.event_id"), nullable=False, index=True)
    game_ref = Column(String(100), nullable=True)  # catalog game id
    game_title = Column(String(200), nullable=True)
    custom_name = Column(String(200), nullable=True)
    status = Column(SAEnum(LineupStatus), nullable=False, default=LineupStatus.queued)
    play_order = Column(Integer, nullable=False, default=0)
    estimated_minutes = Column(Integer, nullable=True)
    winner_name = Column(String(100), nullable=True)
    chaos_level = Column(SmallInteger, nullable=True)
    notes = Column(Text, nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("GameNight", back_populates="lineup")
    votes = relationship("Vote", cascade="all, delete-orphan")

    @property
    def display_name(self) -> str:
        return self.custom_name or self.game_title or self.game_ref


class Vote(Base):
    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint("entry_id", "guest_id", name="uq_vote_entry_guest"),
        CheckConstraint("value IN (-1, 0, 1)", name="ck_vote_value"),
    )

    vote_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("game_nights.event_id"), nullable=False, index=True)
    entry_id = Column(String(36), ForeignKey("lineup_entries.entry_id", ondelete="CASCADE"), nullable=False)
    guest_id = Column(String(36), ForeignKey("guests.guest_id"), nullable=False)
    value = Column(SmallInteger, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
