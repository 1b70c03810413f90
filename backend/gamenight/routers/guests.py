"""Guest list routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from gamenight.database import get_db
from gamenight.routers.deps import get_credential
from gamenight.schemas.guest import (
    BringingUpdate, GuestAdded, GuestCreate, GuestOut, GuestStatusUpdate, InviteResent,
)
from gamenight.services import invite_service
from gamenight.services.email_service import EmailSender, get_email_sender
from gamenight.services.identity_service import Credential, authorize

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=list[GuestOut])
def list_guests(
    event_id: str,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    actor = authorize(db, event_id, credential)
    return invite_service.visible_guests(actor, invite_service.list_guests(db, actor.event))


@router.post("/", response_model=GuestAdded, status_code=status.HTTP_201_CREATED)
def add_guest(
    event_id: str,
    payload: GuestCreate,
    credential: Optional[Credential] = Depends(get_credential),
    sender: EmailSender = Depends(get_email_sender),
    db: Session = Depends(get_db),
):
    """Add a guest; a failed invite email is reported, not raised."""
    guest, result = invite_service.add_guest(
        db,
        event_id,
        credential,
        sender,
        name=payload.name,
        email=payload.email,
        user_id=payload.user_id,
        send_email=payload.send_email,
        personal_message=payload.personal_message,
    )
    return {
        "guest": guest,
        "email_sent": bool(result and result.delivered),
        "delivery_error": result.error if result else None,
    }


@router.post("/{guest_id}/resend", response_model=InviteResent)
def resend_invite(
    event_id: str,
    guest_id: str,
    credential: Optional[Credential] = Depends(get_credential),
    sender: EmailSender = Depends(get_email_sender),
    db: Session = Depends(get_db),
):
    guest, result = invite_service.resend_invite(db, event_id, credential, sender, guest_id)
    return {"guest": guest, "email_sent": result.delivered, "delivery_error": result.error}


@router.put("/{guest_id}/status", response_model=GuestOut)
def set_guest_status(
    event_id: str,
    guest_id: str,
    payload: GuestStatusUpdate,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    return invite_service.set_guest_status(db, event_id, credential, guest_id, payload.status)


@router.put("/{guest_id}/bringing", response_model=GuestOut)
def set_bringing(
    event_id: str,
    guest_id: str,
    payload: BringingUpdate,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    return invite_service.set_bringing(db, event_id, credential, guest_id, payload.bringing)
