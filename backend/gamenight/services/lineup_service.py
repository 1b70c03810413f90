"""Game lineup and voting service.

Vote aggregates are never stored: vote_count / voter_count are summed from the
vote rows on every read, so concurrent voters cannot lose each other's updates.
A vote write is one INSERT ... ON CONFLICT (entry_id, guest_id) DO UPDATE, so the
toggle decision and the write happen in a single statement under the unique key.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import case, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from gamenight.errors import NotFound, ValidationError
from gamenight.models.event import GameNight
from gamenight.models.lineup import LineupEntry, LineupStatus, Vote
from gamenight.services.identity_service import Credential, authorize, require_host

logger = logging.getLogger(__name__)

VOTE_VALUES = (-1, 0, 1)
# vote toggling needs INSERT ... ON CONFLICT DO UPDATE
UPSERT_INSERTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}


@dataclass
class Tally:
    vote_count: int = 0
    voter_count: int = 0


def _tallies(db: Session, event_id: str) -> dict[str, Tally]:
    rows = (
        db.query(
            Vote.entry_id,
            func.coalesce(func.sum(Vote.value), 0),
            func.sum(case((Vote.value != 0, 1), else_=0)),
        )
        .filter(Vote.event_id == event_id)
        .group_by(Vote.entry_id)
        .all()
    )
    return {entry_id: Tally(int(total or 0), int(voters or 0)) for entry_id, total, voters in rows}


def _tally_for(db: Session, entry_id: str) -> Tally:
    total, voters = (
        db.query(
            func.coalesce(func.sum(Vote.value), 0),
            func.sum(case((Vote.value != 0, 1), else_=0)),
        )
        .filter(Vote.entry_id == entry_id)
        .one()
    )
    return Tally(int(total or 0), int(voters or 0))


def rank(entries: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Highest vote count first; ties keep their play order (sorted() is stable)."""
    by_order = sorted(entries, key=lambda e: e["play_order"])
    return sorted(by_order, key=lambda e: -e["vote_count"])


def ranked_lineup(db: Session, event: GameNight, viewer_guest_id: Optional[str] = None) -> list[dict[str, Any]]:
    """Lineup entries with their vote aggregates, in display order."""
    entries = (
        db.query(LineupEntry)
        .filter(LineupEntry.event_id == event.event_id)
        .order_by(LineupEntry.play_order, LineupEntry.created_at)
        .all()
    )
    tallies = _tallies(db, event.event_id)
    mine: dict[str, int] = {}
    if viewer_guest_id:
        mine = dict(
            db.query(Vote.entry_id, Vote.value)
            .filter(Vote.event_id == event.event_id, Vote.guest_id == viewer_guest_id)
            .all()
        )

    rows = []
    for entry in entries:
        tally = tallies.get(entry.entry_id, Tally())
        rows.append({
            **{column.name: getattr(entry, column.name) for column in LineupEntry.__table__.columns},
            "display_name": entry.display_name,
            "vote_count": tally.vote_count,
            "voter_count": tally.voter_count,
            "my_vote": mine.get(entry.entry_id, 0),
        })
    return rank(rows)


def list_lineup(db: Session, event_id: str, credential: Optional[Credential]) -> list[dict[str, Any]]:
    actor = authorize(db, event_id, credential)
    return ranked_lineup(db, actor.event, viewer_guest_id=actor.guest_id)


def add_entry(
    db: Session,
    event_id: str,
    credential: Optional[Credential],
    game_ref: Optional[str] = None,
    game_title: Optional[str] = None,
    custom_name: Optional[str] = None,
    estimated_minutes: Optional[int] = None,
) -> LineupEntry:
    """Append a catalog game or a custom-named game at the next play order (host only)."""
    actor = authorize(db, event_id, credential)
    require_host(actor)

    custom_name = custom_name.strip() if custom_name else None
    if bool(game_ref) == bool(custom_name):
        raise ValidationError("Provide either a catalog game or a custom game name")

    last = (
        db.query(func.max(LineupEntry.play_order))
        .filter(LineupEntry.event_id == event_id)
        .scalar()
    )
    entry = LineupEntry(
        event_id=event_id,
        game_ref=game_ref,
        game_title=game_title,
        custom_name=custom_name,
        estimated_minutes=estimated_minutes,
        play_order=0 if last is None else last + 1,
        status=LineupStatus.queued,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info("Added '%s' to lineup of game night %s at position %d", entry.display_name, event_id, entry.play_order)
    return entry


def update_entry(db: Session, event_id: str, credential: Optional[Credential], entry_id: str,
                 updates: dict[str, Any]) -> LineupEntry:
    """Host edits an entry: start it, record its outcome, reorder it, add notes."""
    actor = authorize(db, event_id, credential)
    require_host(actor)
    entry = _get_entry(db, event_id, entry_id)

    chaos_level = updates.get("chaos_level")
    if chaos_level is not None and not 1 <= chaos_level <= 5:
        raise ValidationError("Chaos level must be between 1 and 5")

    status = updates.get("status")
    if status is not None and status != entry.status:
        now = datetime.now(timezone.utc)
        if status == LineupStatus.playing:
            entry.started_at = now
        elif status == LineupStatus.completed:
            entry.completed_at = now
        entry.status = status

    for field in ("winner_name", "chaos_level", "notes", "play_order"):
        if field in updates:
            setattr(entry, field, updates[field])

    db.commit()
    db.refresh(entry)
    logger.info("Updated lineup entry %s on game night %s (%s)", entry_id, event_id, entry.status.value)
    return entry


def record_outcome(db: Session, event_id: str, credential: Optional[Credential], entry_id: str,
                   winner_name: Optional[str] = None, chaos_level: Optional[int] = None) -> LineupEntry:
    """Mark an entry COMPLETED with its winner and chaos level."""
    return update_entry(db, event_id, credential, entry_id, {
        "status": LineupStatus.completed,
        "winner_name": winner_name,
        "chaos_level": chaos_level,
    })


def remove_entry(db: Session, event_id: str, credential: Optional[Credential], entry_id: str) -> None:
    """Remove an entry and its votes (host only)."""
    actor = authorize(db, event_id, credential)
    require_host(actor)
    entry = _get_entry(db, event_id, entry_id)
    db.delete(entry)
    db.commit()
    logger.info("Removed lineup entry %s from game night %s", entry_id, event_id)


def _upsert_statement(db: Session, event_id: str, entry_id: str, guest_id: str, value: int):
    dialect = db.get_bind().dialect.name
    insert = UPSERT_INSERTS.get(dialect)
    if insert is None:
        raise NotImplementedError(f"Vote upsert is not supported on the {dialect} dialect")
    stmt = insert(Vote).values(
        event_id=event_id,
        entry_id=entry_id,
        guest_id=guest_id,
        value=value,
    )
    # same nonzero value again clears the vote
    toggled = case((Vote.value == stmt.excluded.value, 0), else_=stmt.excluded.value)
    return stmt.on_conflict_do_update(
        index_elements=[Vote.entry_id, Vote.guest_id],
        set_={"value": toggled, "updated_at": func.now()},
    )


def vote(db: Session, event_id: str, credential: Optional[Credential], entry_id: str,
         value: int) -> dict[str, Any]:
    """Cast, change, or toggle off the caller's vote on one lineup entry."""
    if value not in VOTE_VALUES:
        raise ValidationError("Vote must be -1, 0 or 1")
    actor = authorize(db, event_id, credential)
    _get_entry(db, event_id, entry_id)

    db.execute(_upsert_statement(db, event_id, entry_id, actor.guest_id, value))
    mine = (
        db.query(Vote.value)
        .filter(Vote.entry_id == entry_id, Vote.guest_id == actor.guest_id)
        .scalar()
    )
    tally = _tally_for(db, entry_id)
    db.commit()
    logger.info("Guest %s voted %d on entry %s (now %d)", actor.guest_id, value, entry_id, mine)
    return {
        "entry_id": entry_id,
        "vote_count": tally.vote_count,
        "voter_count": tally.voter_count,
        "my_vote": mine,
    }


def _get_entry(db: Session, event_id: str, entry_id: str) -> LineupEntry:
    entry = (
        db.query(LineupEntry)
        .filter(LineupEntry.entry_id == entry_id, LineupEntry.event_id == event_id)
        .first()
    )
    if not entry:
        raise NotFound("Lineup entry not found")
    return entry


def get_entry_view(db: Session, event_id: str, credential: Optional[Credential], entry_id: str) -> dict[str, Any]:
    """One entry with the caller's view of its votes."""
    for row in list_lineup(db, event_id, credential):
        if row["entry_id"] == entry_id:
            return row
    raise NotFound("Lineup entry not found")
