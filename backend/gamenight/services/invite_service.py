"""Invite & RSVP service — guest rows, invite tokens, delivery state, responses.

The invite token is a capability: whoever holds it may view the event and
answer for that guest, no account needed. Email delivery is a side effect with
its own failure domain; a failed send never rolls back the guest write.
"""
import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.orm import Session

from gamenight.config import settings
from gamenight.errors import Conflict, Forbidden, NotFound, ValidationError
from gamenight.models.event import GameNight
from gamenight.models.guest import Guest, GuestRole, GuestStatus
from gamenight.models.user import User
from gamenight.services.email_service import DeliveryResult, EmailSender
from gamenight.services.email_templates import INVITE_SUBJECT
from gamenight.services.identity_service import (
    Actor, Credential, authorize, host_guest, require_host, resolve_invite,
)

logger = logging.getLogger(__name__)

TOKEN_BYTES = 24
MAX_TOKEN_ATTEMPTS = 5

RSVP_MESSAGES = {
    GuestStatus.going: "You're in! See you there! 🎲",
    GuestStatus.maybe: "Got it! We hope you can make it! 🤞",
    GuestStatus.out: "No worries! Maybe next time! 👋",
}


def new_invite_token(db: Session) -> str:
    """Generate an invite token not already held by any guest."""
    for _ in range(MAX_TOKEN_ATTEMPTS):
        token = secrets.token_urlsafe(TOKEN_BYTES)
        if not db.query(Guest.guest_id).filter(Guest.invite_token == token).first():
            return token
    raise RuntimeError("Could not generate a unique invite token")


def join_url(token: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/join/{token}"


def list_guests(db: Session, event: GameNight) -> list[Guest]:
    """Host first, then guests in the order they were added."""
    guests = db.query(Guest).filter(Guest.event_id == event.event_id).order_by(Guest.created_at).all()
    return sorted(guests, key=lambda g: g.role != GuestRole.host)


def visible_guests(actor: Actor, guests: list[Guest]) -> list[dict[str, Any]]:
    """Guest rows as the caller may see them; only the host sees other guests' tokens."""
    rows = []
    for guest in guests:
        row = {column.name: getattr(guest, column.name) for column in Guest.__table__.columns}
        row["display_name"] = guest.display_name
        row["avatar_url"] = guest.avatar_url
        if not actor.is_host and guest.guest_id != actor.guest_id:
            row["invite_token"] = None
        rows.append(row)
    return rows


def guest_counts(guests: list[Guest], max_guests: Optional[int] = None) -> dict[str, Any]:
    """Summary counts for the guest list; the host counts as a confirmed guest."""
    counts = {status: 0 for status in GuestStatus}
    for guest in guests:
        counts[guest.status] += 1
    going = counts[GuestStatus.going]
    return {
        "total": len(guests),
        "going": going,
        "maybe": counts[GuestStatus.maybe],
        "out": counts[GuestStatus.out],
        "pending": counts[GuestStatus.pending],
        "spots_left": max(max_guests - going, 0) if max_guests else None,
    }


def _send_invite(sender: EmailSender, event: GameNight, guest: Guest, host_name: str,
                 personal_message: Optional[str] = None) -> DeliveryResult:
    context = {
        "guest_name": guest.display_name if guest.user_id or guest.guest_name else None,
        "host_name": host_name,
        "title": event.title,
        "date": event.date.strftime("%A, %B %d, %Y"),
        "start_time": event.start_time.strftime("%I:%M %p").lstrip("0") if event.start_time else None,
        "location": event.location,
        "vibe": event.vibe.value,
        "personal_message": personal_message,
        "rsvp_url": join_url(guest.invite_token),
    }
    subject = INVITE_SUBJECT.format(host_name=host_name, title=event.title)
    return sender.send(guest.guest_email, subject, "game_night_invite", context)


def _mark_sent(guest: Guest, result: DeliveryResult) -> None:
    if result.delivered:
        guest.invite_sent_at = datetime.now(timezone.utc)
        guest.invite_method = "email"


def add_guest(
    db: Session,
    event_id: str,
    credential: Optional[Credential],
    sender: EmailSender,
    name: Optional[str] = None,
    email: Optional[str] = None,
    user_id: Optional[str] = None,
    send_email: bool = False,
    personal_message: Optional[str] = None,
) -> tuple[Guest, Optional[DeliveryResult]]:
    """Create a PENDING guest with a fresh token; optionally email the invite.

    Returns the guest and the delivery result (None when no email was attempted).
    """
    actor = authorize(db, event_id, credential)
    require_host(actor)
    event = actor.event

    name = name.strip() if name else None
    email = email.strip().lower() if email else None
    if not name and not user_id:
        raise ValidationError("A guest needs a name or a linked user")
    if email and "@" not in email:
        raise ValidationError("Invalid email address")

    if user_id:
        if not db.query(User).filter(User.user_id == user_id).first():
            raise NotFound("User not found")
        existing = db.query(Guest).filter(Guest.event_id == event.event_id, Guest.user_id == user_id).first()
        if existing:
            raise Conflict("User is already invited")
    if email:
        existing = db.query(Guest).filter(Guest.event_id == event.event_id, Guest.guest_email == email).first()
        if existing:
            raise Conflict("This email is already invited")

    guest = Guest(
        event_id=event.event_id,
        user_id=user_id,
        guest_name=name,
        guest_email=email,
        role=GuestRole.guest,
        status=GuestStatus.pending,
        invite_token=new_invite_token(db),
    )
    db.add(guest)
    db.commit()
    db.refresh(guest)
    logger.info("Added guest %s to game night %s", guest.guest_id, event.event_id)

    result = None
    if send_email and email:
        result = _send_invite(sender, event, guest, actor.guest.display_name, personal_message)
        _mark_sent(guest, result)
        db.commit()
        db.refresh(guest)
    return guest, result


def resend_invite(db: Session, event_id: str, credential: Optional[Credential],
                  sender: EmailSender, guest_id: str) -> tuple[Guest, DeliveryResult]:
    """Send the invite again, reusing the guest's existing token."""
    actor = authorize(db, event_id, credential)
    require_host(actor)

    guest = _get_guest(db, actor.event, guest_id)
    if not guest.guest_email:
        raise ValidationError("Guest has no email address")

    result = _send_invite(sender, actor.event, guest, actor.guest.display_name)
    _mark_sent(guest, result)
    db.commit()
    db.refresh(guest)
    logger.info("Resent invite to guest %s (delivered=%s)", guest_id, result.delivered)
    return guest, result


def respond(db: Session, token: str, status: GuestStatus, guest_name: Optional[str] = None,
            bringing: Optional[str] = None) -> tuple[Guest, str]:
    """Record an RSVP made with an invite token."""
    guest = resolve_invite(db, token)
    if status not in RSVP_MESSAGES:
        raise ValidationError("Status must be IN, MAYBE or OUT")
    if guest.role == GuestRole.host:
        raise ValidationError("The host is always in")

    guest.status = status
    guest.responded_at = datetime.now(timezone.utc)
    if guest_name and guest_name.strip() and not guest.user_id:
        guest.guest_name = guest_name.strip()
    # a blank field on the RSVP form means nothing was filled in
    if bringing and bringing.strip():
        guest.bringing = _clean_bringing(bringing)
    db.commit()
    db.refresh(guest)
    logger.info("Guest %s RSVP'd %s to game night %s", guest.guest_id, status.value, guest.event_id)
    return guest, RSVP_MESSAGES[status]


def set_guest_status(db: Session, event_id: str, credential: Optional[Credential],
                     guest_id: str, status: GuestStatus) -> Guest:
    """Host overrides a guest's status."""
    actor = authorize(db, event_id, credential)
    require_host(actor)

    guest = _get_guest(db, actor.event, guest_id)
    if guest.role == GuestRole.host:
        raise ValidationError("The host is always in")
    guest.status = status
    guest.responded_at = datetime.now(timezone.utc) if status != GuestStatus.pending else None
    db.commit()
    db.refresh(guest)
    logger.info("Host set guest %s to %s on game night %s", guest_id, status.value, event_id)
    return guest


def set_bringing(db: Session, event_id: str, credential: Optional[Credential],
                 guest_id: str, item: Optional[str]) -> Guest:
    """Set what a guest is bringing: the guest themself or the host may do it."""
    actor = authorize(db, event_id, credential)
    guest = _get_guest(db, actor.event, guest_id)
    if not actor.is_host and actor.guest_id != guest.guest_id:
        raise Forbidden("Only the host or the guest can change this")

    guest.bringing = _clean_bringing(item)
    db.commit()
    db.refresh(guest)
    logger.info("Guest %s is bringing %r", guest_id, guest.bringing)
    return guest


def get_invite_view(db: Session, token: str) -> dict[str, Any]:
    """The limited event view shown on a public join link."""
    guest = resolve_invite(db, token)
    event = guest.event
    guests = list_guests(db, event)
    host = host_guest(db, event)
    return {
        "game_night": {
            "event_id": event.event_id,
            "title": event.title,
            "description": event.description,
            "date": event.date,
            "start_time": event.start_time,
            "location": event.location,
            "vibe": event.vibe,
            "theme": event.theme,
            "status": event.status,
            "host_name": host.display_name,
            "confirmed_guests": [g.display_name for g in guests if g.status == GuestStatus.going],
            "games_planned": [entry.display_name for entry in event.lineup],
            "total_invited": len(guests),
        },
        "guest": {
            "guest_id": guest.guest_id,
            "status": guest.status,
            "guest_name": guest.guest_name,
            "bringing": guest.bringing,
            "responded_at": guest.responded_at,
        },
    }


def _clean_bringing(item: Optional[str]) -> Optional[str]:
    if item is None:
        return None
    item = item.strip()
    if not item:
        raise ValidationError("Bringing can't be blank")
    if len(item) > 200:
        raise ValidationError("Bringing field too long")
    return item


def _get_guest(db: Session, event: GameNight, guest_id: str) -> Guest:
    guest = db.query(Guest).filter(Guest.guest_id == guest_id, Guest.event_id == event.event_id).first()
    if not guest:
        raise NotFound("Guest not found")
    return guest
