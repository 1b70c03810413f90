"""ChatMessage ORM model: an append-only log.

Messages display in (created_at, message_id) order. ``seq`` is assigned by the
database at insert and is what polling cursors compare against.
"""
import uuid
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Index
from gamenight.database import Base


class ChatMessage(Base):
    __tablename__ = "chat_messages"
    __table_args__ = (
        Index("ix_chat_messages_event_order", "event_id", "created_at", "message_id"),
        Index("ix_chat_messages_event_seq", "event_id", "seq"),
        {"sqlite_autoincrement": True},
    )

    seq = Column(Integer, primary_key=True, autoincrement=True)
    message_id = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("game_nights.event_id"), nullable=False)
    author_id = Column(String(36), ForeignKey("guests.guest_id"), nullable=False)
    author_name = Column(String(100), nullable=False)
    author_avatar = Column(String(500), nullable=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    is_edited = Column(Boolean, nullable=False, default=False)
