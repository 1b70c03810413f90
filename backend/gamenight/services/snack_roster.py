"""Snack roster classifier.

Pure keyword matching over an ordered rule list. The first category whose
keyword appears in the item wins, so "soda and chips" is a drink. Nothing is
persisted: the roster is rebuilt from guests' ``bringing`` text on every read.
"""
import logging
from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session

from gamenight.models.guest import Guest
from gamenight.services.identity_service import Credential, authorize

logger = logging.getLogger(__name__)

OTHER = "other"

CATEGORY_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("drinks", ("drink", "soda", "beer", "wine", "juice", "water")),
    ("desserts", ("dessert", "cake", "cookie", "brownie", "ice cream", "candy")),
    ("main", ("pizza", "wings", "sandwich", "tacos", "dinner", "main")),
    ("snacks", ("chips", "snack", "popcorn", "dip", "pretzels", "nuts")),
)

CATEGORIES = tuple(name for name, _ in CATEGORY_RULES) + (OTHER,)


def classify_item(item: str) -> str:
    text = item.lower()
    for category, keywords in CATEGORY_RULES:
        if any(keyword in text for keyword in keywords):
            return category
    return OTHER


def build_roster(guests: Iterable[Guest]) -> dict[str, Any]:
    categories: dict[str, list[dict[str, str]]] = {name: [] for name in CATEGORIES}
    total = 0
    for guest in guests:
        if not guest.bringing:
            continue
        categories[classify_item(guest.bringing)].append({
            "guest_name": guest.display_name,
            "item": guest.bringing,
        })
        total += 1
    return {"categories": categories, "total": total, "is_empty": total == 0}


def roster_for_event(db: Session, event_id: str, credential: Optional[Credential]) -> dict[str, Any]:
    actor = authorize(db, event_id, credential)
    guests = (
        db.query(Guest)
        .filter(Guest.event_id == actor.event.event_id, Guest.bringing.isnot(None))
        .order_by(Guest.created_at)
        .all()
    )
    return build_roster(guests)
