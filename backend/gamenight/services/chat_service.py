"""Chat channel, an append-only message log per game night read by polling."""
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from gamenight.errors import NotFound, ValidationError
from gamenight.models.chat import ChatMessage
from gamenight.models.event import GameNight
from gamenight.services.identity_service import Credential, authorize

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 2000


def post_message(db: Session, event_id: str, credential: Optional[Credential], content: str) -> ChatMessage:
    actor = authorize(db, event_id, credential)
    content = (content or "").strip()
    if not content:
        raise ValidationError("Message content required")
    if len(content) > MAX_MESSAGE_LENGTH:
        raise ValidationError("Message too long")

    # posts to one event serialize on the event row, so seq follows commit order
    db.query(GameNight).filter(GameNight.event_id == event_id).with_for_update().one()
    message = ChatMessage(
        event_id=event_id,
        author_id=actor.guest_id,
        author_name=actor.guest.display_name,
        author_avatar=actor.guest.avatar_url,
        content=content,
        created_at=datetime.now(timezone.utc),
        is_edited=False,
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    logger.info("Chat message %s posted to game night %s by guest %s", message.message_id, event_id, actor.guest_id)
    return message


def list_messages(db: Session, event_id: str, credential: Optional[Credential],
                  since_id: Optional[str] = None) -> list[ChatMessage]:
    """All messages in (created_at, message_id) order, or only those stored after ``since_id``.

    The cursor compares insert sequence, not timestamps, so a message stamped
    earlier but committed later than the anchor is still delivered.
    """
    authorize(db, event_id, credential)
    query = db.query(ChatMessage).filter(ChatMessage.event_id == event_id)

    if since_id:
        anchor = (
            db.query(ChatMessage)
            .filter(ChatMessage.event_id == event_id, ChatMessage.message_id == since_id)
            .first()
        )
        if not anchor:
            raise NotFound("Message not found")
        query = query.filter(ChatMessage.seq > anchor.seq)

    return query.order_by(ChatMessage.created_at, ChatMessage.message_id).all()
