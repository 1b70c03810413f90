"""Moment ORM model — append-only quotes and highlights captured during a game night."""
import uuid
import enum
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Enum as SAEnum
from gamenight.database import Base


class MomentType(str, enum.Enum):
    quote = "QUOTE"
    chaos = "CHAOS"
    highlight = "HIGHLIGHT"


class Moment(Base):
    __tablename__ = "moments"

    moment_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("game_nights.event_id"), nullable=False, index=True)
    type = Column(SAEnum(MomentType), nullable=False)
    content = Column(Text, nullable=False)
    created_by_id = Column(String(36), ForeignKey("guests.guest_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
