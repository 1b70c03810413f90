"""Public join-link routes; the token in the path is the whole credential."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gamenight.database import get_db
from gamenight.models.guest import GuestStatus
from gamenight.schemas.guest import InviteView, RSVPPayload, RSVPResponse
from gamenight.services import invite_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/{token}", response_model=InviteView)
def view_invite(token: str, db: Session = Depends(get_db)):
    return invite_service.get_invite_view(db, token)


@router.post("/{token}/rsvp", response_model=RSVPResponse)
def rsvp(token: str, payload: RSVPPayload, db: Session = Depends(get_db)):
    guest, message = invite_service.respond(
        db,
        token,
        GuestStatus(payload.status),
        guest_name=payload.guest_name,
        bringing=payload.bringing,
    )
    return {"message": message, "guest": guest}
