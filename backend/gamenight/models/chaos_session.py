"""ChaosSession ORM model."""
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from gamenight.database import Base


class ChaosSession(Base):
    __tablename__ = "chaos_sessions"

    session_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("game_nights.event_id"), nullable=False, unique=True)
    room_code = Column(String(6), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
