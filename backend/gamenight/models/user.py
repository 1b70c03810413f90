"""User ORM model, the local stand-in for the user directory."""
import uuid
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from gamenight.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    display_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True, unique=True)
    avatar_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
