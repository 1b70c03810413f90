"""Moments feed: quotes, chaos and highlights captured during or after the night."""
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from gamenight.errors import FeatureLocked, ValidationError
from gamenight.models.event import MOMENTS_OPEN, GameNight
from gamenight.models.moment import Moment, MomentType
from gamenight.services.identity_service import Credential, authorize

logger = logging.getLogger(__name__)

FEED_LIMIT = 50


def _check_open(event: GameNight) -> None:
    if event.status not in MOMENTS_OPEN:
        raise FeatureLocked("Moments open once the game night is in progress")


def recent_moments(db: Session, event: GameNight) -> list[Moment]:
    return (
        db.query(Moment)
        .filter(Moment.event_id == event.event_id)
        .order_by(Moment.created_at.desc(), Moment.moment_id.desc())
        .limit(FEED_LIMIT)
        .all()
    )


def add_moment(db: Session, event_id: str, credential: Optional[Credential],
               moment_type: MomentType, content: str) -> Moment:
    actor = authorize(db, event_id, credential)
    _check_open(actor.event)
    content = (content or "").strip()
    if not content:
        raise ValidationError("Moment content required")

    moment = Moment(
        event_id=event_id,
        type=moment_type,
        content=content,
        created_by_id=actor.guest_id,
        created_at=datetime.now(timezone.utc),
    )
    db.add(moment)
    db.commit()
    db.refresh(moment)
    logger.info("Captured %s moment %s on game night %s", moment_type.value, moment.moment_id, event_id)
    return moment


def list_moments(db: Session, event_id: str, credential: Optional[Credential]) -> list[Moment]:
    actor = authorize(db, event_id, credential)
    _check_open(actor.event)
    return recent_moments(db, actor.event)
