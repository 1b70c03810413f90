"""Event lifecycle service — owns the GameNight record and its status machine.

Responsibilities:
- Host-only writes (metadata, status, house rules)
- Transition legality via the static table in ``models.event``
- Mutation ledger (EventMutations) for every host write
- Event detail read model with guest counts, ranked lineup and feature gates
"""
import logging
from datetime import date, datetime, time, timezone
from typing import Any, Optional

import pytz
from sqlalchemy import or_
from sqlalchemy.orm import Session

from gamenight.errors import InvalidTransition, NotFound, ValidationError
from gamenight.models.event import (
    CHAOS_OPEN, MOMENTS_OPEN, GameNight, GameNightStatus, Vibe, can_transition,
)
from gamenight.models.event_mutation import ActionType, EventMutation
from gamenight.models.guest import Guest, GuestRole, GuestStatus
from gamenight.models.user import User
from gamenight.services import invite_service, lineup_service, moment_service
from gamenight.services.identity_service import Credential, get_event, require_host, resolve_actor

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "title", "description", "date", "start_time", "end_time", "timezone",
    "location", "vibe", "theme", "max_guests",
)
REQUIRED_FIELDS = ("title", "date", "timezone", "vibe")


def _event_snapshot(event: GameNight) -> dict[str, Any]:
    """Serialize an event to a JSON-safe dict for the mutation ledger."""
    return {
        "event_id": event.event_id,
        "title": event.title,
        "date": event.date.isoformat() if event.date else None,
        "start_time": event.start_time.isoformat() if event.start_time else None,
        "end_time": event.end_time.isoformat() if event.end_time else None,
        "timezone": event.timezone,
        "location": event.location,
        "vibe": event.vibe.value if event.vibe else None,
        "theme": event.theme,
        "max_guests": event.max_guests,
        "status": event.status.value if event.status else None,
        "house_rules": event.house_rules,
    }


def _record(db: Session, event: GameNight, actor_user_id: str, action: ActionType,
            before: Optional[dict[str, Any]]) -> None:
    db.add(EventMutation(
        event_id=event.event_id,
        actor_user_id=actor_user_id,
        action_type=action,
        before_snapshot=before,
        after_snapshot=_event_snapshot(event),
    ))


def _check_timezone(name: str) -> None:
    try:
        pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        raise ValidationError(f"Unknown timezone: {name}")


def create_event(
    db: Session,
    host_id: str,
    title: str,
    event_date: date,
    start_time: Optional[time] = None,
    end_time: Optional[time] = None,
    tz_name: str = "UTC",
    description: Optional[str] = None,
    location: Optional[str] = None,
    vibe: Vibe = Vibe.chill,
    theme: Optional[str] = None,
    house_rules: Optional[str] = None,
    max_guests: Optional[int] = None,
) -> GameNight:
    """Create a game night in PLANNING; the host joins as a HOST guest already IN."""
    host = db.query(User).filter(User.user_id == host_id).first()
    if not host:
        raise NotFound("Host user not found")
    if not title or not title.strip():
        raise ValidationError("Title is required")
    _check_timezone(tz_name)

    event = GameNight(
        host_id=host_id,
        title=title.strip(),
        description=description,
        date=event_date,
        start_time=start_time,
        end_time=end_time,
        timezone=tz_name,
        location=location,
        vibe=vibe,
        theme=theme,
        house_rules=house_rules,
        max_guests=max_guests,
        status=GameNightStatus.planning,
    )
    db.add(event)
    db.flush()

    db.add(Guest(
        event_id=event.event_id,
        user_id=host_id,
        role=GuestRole.host,
        status=GuestStatus.going,
        invite_token=invite_service.new_invite_token(db),
        responded_at=datetime.now(timezone.utc),
    ))
    _record(db, event, host_id, ActionType.create, before=None)
    db.commit()
    db.refresh(event)
    logger.info("Created game night '%s' (%s) hosted by %s", event.title, event.event_id, host_id)
    return event


def update_event(db: Session, event_id: str, credential: Optional[Credential],
                 updates: dict[str, Any]) -> GameNight:
    """Host-only metadata edit. Status changes go through ``set_status``."""
    event = get_event(db, event_id)
    actor = resolve_actor(db, event, credential)
    require_host(actor)

    if "status" in updates:
        raise ValidationError("Use the status endpoint to change status")
    for field in REQUIRED_FIELDS:
        if field in updates and updates[field] is None:
            raise ValidationError(f"{field} cannot be cleared")
    if "title" in updates and not updates["title"].strip():
        raise ValidationError("Title is required")
    if updates.get("timezone") is not None:
        _check_timezone(updates["timezone"])

    before = _event_snapshot(event)
    for field, value in updates.items():
        if field in EDITABLE_FIELDS:
            setattr(event, field, value)
    event.updated_at = datetime.now(timezone.utc)

    _record(db, event, actor.user_id, ActionType.update, before)
    db.commit()
    db.refresh(event)
    logger.info("Updated game night %s fields %s", event_id, sorted(updates))
    return event


def set_status(db: Session, event_id: str, credential: Optional[Credential],
               new_status: GameNightStatus) -> GameNight:
    """Move an event along the status machine (host only)."""
    event = get_event(db, event_id)
    actor = resolve_actor(db, event, credential)
    require_host(actor)

    current = event.status
    if not can_transition(current, new_status):
        logger.info("Rejected transition %s -> %s on game night %s", current.value, new_status.value, event_id)
        raise InvalidTransition(current, new_status)

    before = _event_snapshot(event)
    event.status = new_status
    if new_status == GameNightStatus.completed:
        event.completed_at = datetime.now(timezone.utc)
    event.updated_at = datetime.now(timezone.utc)

    _record(db, event, actor.user_id, ActionType.status_change, before)
    db.commit()
    db.refresh(event)
    logger.info("Game night %s moved %s -> %s", event_id, current.value, new_status.value)
    return event


def set_house_rules(db: Session, event_id: str, credential: Optional[Credential],
                    house_rules: Optional[str]) -> GameNight:
    """Replace the house rules text wholesale (host only)."""
    event = get_event(db, event_id)
    actor = resolve_actor(db, event, credential)
    require_host(actor)

    before = _event_snapshot(event)
    event.house_rules = house_rules
    event.updated_at = datetime.now(timezone.utc)

    _record(db, event, actor.user_id, ActionType.house_rules, before)
    db.commit()
    db.refresh(event)
    logger.info("House rules replaced on game night %s", event_id)
    return event


def list_events_for_user(db: Session, user_id: str, include_cancelled: bool = False) -> list[GameNight]:
    """Events the user hosts or is invited to, soonest first."""
    invited = db.query(Guest.event_id).filter(Guest.user_id == user_id)
    query = db.query(GameNight).filter(
        or_(GameNight.host_id == user_id, GameNight.event_id.in_(invited))
    )
    if not include_cancelled:
        query = query.filter(GameNight.status != GameNightStatus.cancelled)
    return query.order_by(GameNight.date, GameNight.start_time).all()


def feature_gates(event: GameNight) -> dict[str, bool]:
    """Read-time gates derived from status; nothing here is stored."""
    return {
        "moments_enabled": event.status in MOMENTS_OPEN,
        "chaos_enabled": event.status in CHAOS_OPEN,
    }


def get_event_detail(db: Session, event_id: str, credential: Optional[Credential]) -> dict[str, Any]:
    """Event detail read model for the host, a guest, or an invite token holder."""
    event = get_event(db, event_id)
    actor = resolve_actor(db, event, credential)
    gates = feature_gates(event)

    guests = invite_service.list_guests(db, event)
    detail = {
        **{field: getattr(event, field) for field in (
            "event_id", "host_id", "title", "description", "date", "start_time", "end_time",
            "timezone", "starts_at_utc", "location", "vibe", "theme", "house_rules",
            "max_guests", "status", "allowed_next", "completed_at", "created_at", "updated_at",
        )},
        "guests": invite_service.visible_guests(actor, guests),
        "guest_counts": invite_service.guest_counts(guests, event.max_guests),
        "lineup": lineup_service.ranked_lineup(db, event, viewer_guest_id=actor.guest_id),
        "moments": moment_service.recent_moments(db, event) if gates["moments_enabled"] else [],
        "features": gates,
        "is_host": actor.is_host,
        "my_guest_id": actor.guest_id,
    }
    return detail

