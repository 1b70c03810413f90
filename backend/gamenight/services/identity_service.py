"""Identity/Guest resolver — maps a caller credential to the guest it may act as.

Two credential types exist and are resolved separately:
- ``UserCredential``: an authenticated account (host or linked guest)
- ``InviteCapability``: an invite token; possession alone grants guest access
"""
import logging
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy.orm import Session

from gamenight.errors import Forbidden, NotFound, Unauthorized
from gamenight.models.event import GameNight
from gamenight.models.guest import Guest, GuestRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserCredential:
    user_id: str


@dataclass(frozen=True)
class InviteCapability:
    token: str


Credential = Union[UserCredential, InviteCapability]


@dataclass
class Actor:
    """Who is acting on an event, already authorized to act as ``guest``."""

    event: GameNight
    guest: Guest
    is_host: bool
    via_token: bool = False

    @property
    def guest_id(self) -> str:
        return self.guest.guest_id

    @property
    def user_id(self) -> Optional[str]:
        return self.guest.user_id


def get_event(db: Session, event_id: str) -> GameNight:
    event = db.query(GameNight).filter(GameNight.event_id == event_id).first()
    if not event:
        raise NotFound("Game night not found")
    return event


def host_guest(db: Session, event: GameNight) -> Guest:
    """The host's own guest row, created together with the event."""
    return (
        db.query(Guest)
        .filter(Guest.event_id == event.event_id, Guest.role == GuestRole.host)
        .one()
    )


def resolve_invite(db: Session, token: str) -> Guest:
    """Look up the guest owning an invite token."""
    guest = db.query(Guest).filter(Guest.invite_token == token).first() if token else None
    if not guest:
        raise NotFound("Invalid or expired invite link")
    return guest


def resolve_actor(db: Session, event: GameNight, credential: Optional[Credential]) -> Actor:
    """Resolve ``credential`` against ``event`` or raise Unauthorized."""
    if isinstance(credential, UserCredential):
        if credential.user_id == event.host_id:
            return Actor(event=event, guest=host_guest(db, event), is_host=True)
        guest = (
            db.query(Guest)
            .filter(Guest.event_id == event.event_id, Guest.user_id == credential.user_id)
            .first()
        )
        if guest:
            return Actor(event=event, guest=guest, is_host=False)
    elif isinstance(credential, InviteCapability):
        guest = db.query(Guest).filter(Guest.invite_token == credential.token).first()
        if guest and guest.event_id == event.event_id:
            return Actor(
                event=event,
                guest=guest,
                is_host=guest.role == GuestRole.host,
                via_token=True,
            )

    logger.info("Unresolved caller for game night %s", event.event_id)
    raise Unauthorized()


def require_host(actor: Actor) -> None:
    if not actor.is_host:
        raise Forbidden("Only the host can do that")


def authorize(db: Session, event_id: str, credential: Optional[Credential]) -> Actor:
    """Load the event and resolve the caller in one step."""
    return resolve_actor(db, get_event(db, event_id), credential)
