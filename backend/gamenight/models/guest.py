"""Guest ORM model — one invitee (account holder or anonymous) of a game night."""
import uuid
import enum
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship
from gamenight.database import Base


class GuestStatus(str, enum.Enum):
    pending = "PENDING"
    going = "IN"
    maybe = "MAYBE"
    out = "OUT"


class GuestRole(str, enum.Enum):
    host = "HOST"
    guest = "GUEST"


class Guest(Base):
    __tablename__ = "guests"
    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_guest_event_user"),
        UniqueConstraint("event_id", "guest_email", name="uq_guest_event_email"),
    )

    guest_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("game_nights.event_id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=True)
    guest_name = Column(String(100), nullable=True)
    guest_email = Column(String(255), nullable=True)
    status = Column(SAEnum(GuestStatus), nullable=False, default=GuestStatus.pending)
    role = Column(SAEnum(GuestRole), nullable=False, default=GuestRole.guest)
    bringing = Column(String(200), nullable=True)
    invite_token = Column(String(64), nullable=False, unique=True)
    invite_sent_at = Column(DateTime(timezone=True), nullable=True)
    invite_method = Column(String(20), nullable=True)
    responded_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    event = relationship("GameNight", back_populates="guests")
    user = relationship("User", lazy="joined")

    @property
    def display_name(self) -> str:
        if self.user is not None:
            return self.user.display_name
        return self.guest_name or "Mystery Guest"

    @property
    def avatar_url(self):
        return self.user.avatar_url if self.user is not None else None
