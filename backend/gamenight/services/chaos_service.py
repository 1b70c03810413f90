"""Chaos session handle. The core only mints a room code for the realtime layer."""
import logging
import secrets
from typing import Any, Optional

from sqlalchemy.orm import Session

from gamenight.config import settings
from gamenight.errors import FeatureLocked, NotFound
from gamenight.models.chaos_session import ChaosSession
from gamenight.models.event import CHAOS_OPEN
from gamenight.services.identity_service import Credential, authorize, require_host

logger = logging.getLogger(__name__)

ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"  # no 0/O, 1/I
ROOM_CODE_LENGTH = 6
MAX_CODE_ATTEMPTS = 10


def new_room_code(db: Session) -> str:
    for _ in range(MAX_CODE_ATTEMPTS):
        code = "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))
        if not db.query(ChaosSession.session_id).filter(ChaosSession.room_code == code).first():
            return code
    raise RuntimeError("Could not generate a unique room code")


def _handle(session: ChaosSession) -> dict[str, Any]:
    return {
        "session_id": session.session_id,
        "room_code": session.room_code,
        "join_url": f"{settings.PUBLIC_BASE_URL.rstrip('/')}/chaos/join/{session.room_code}",
    }


def start_session(db: Session, event_id: str, credential: Optional[Credential]) -> dict[str, Any]:
    """Open (or return the already open) chaos session; the night must be in progress."""
    actor = authorize(db, event_id, credential)
    require_host(actor)

    existing = db.query(ChaosSession).filter(ChaosSession.event_id == event_id).first()
    if existing:
        return _handle(existing)
    if actor.event.status not in CHAOS_OPEN:
        raise FeatureLocked("Game night must be in progress to start a chaos session")

    session = ChaosSession(event_id=event_id, room_code=new_room_code(db))
    db.add(session)
    db.commit()
    db.refresh(session)
    logger.info("Chaos session %s (room %s) opened for game night %s", session.session_id, session.room_code, event_id)
    return _handle(session)


def get_session(db: Session, event_id: str, credential: Optional[Credential]) -> dict[str, Any]:
    authorize(db, event_id, credential)
    session = db.query(ChaosSession).filter(ChaosSession.event_id == event_id).first()
    if not session:
        raise NotFound("No chaos session for this game night")
    return _handle(session)
