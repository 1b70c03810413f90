"""Game night routes — delegates to event_service for the status machine and ledger."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gamenight.database import get_db
from gamenight.routers.deps import get_credential
from gamenight.schemas.event import (
    EventCreate, EventDetail, EventOut, EventUpdate, HouseRulesUpdate, StatusChange,
)
from gamenight.services import event_service
from gamenight.services.identity_service import Credential

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_game_night(payload: EventCreate, db: Session = Depends(get_db)):
    """Create a game night in PLANNING with the host already IN."""
    return event_service.create_event(
        db=db,
        host_id=payload.host_id,
        title=payload.title,
        event_date=payload.date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        tz_name=payload.timezone,
        description=payload.description,
        location=payload.location,
        vibe=payload.vibe,
        theme=payload.theme,
        house_rules=payload.house_rules,
        max_guests=payload.max_guests,
    )


@router.get("/", response_model=list[EventOut])
def list_game_nights(
    user_id: str = Query(..., description="List game nights this user hosts or is invited to"),
    include_cancelled: bool = Query(False),
    db: Session = Depends(get_db),
):
    return event_service.list_events_for_user(db, user_id, include_cancelled=include_cancelled)


@router.get("/{event_id}", response_model=EventDetail, response_model_by_alias=True)
def get_game_night(
    event_id: str,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    """Full detail for the host, a guest, or an invite token holder."""
    return event_service.get_event_detail(db, event_id, credential)


@router.patch("/{event_id}", response_model=EventOut)
def update_game_night(
    event_id: str,
    payload: EventUpdate,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    updates = payload.model_dump(exclude_unset=True)
    return event_service.update_event(db, event_id, credential, updates)


@router.post("/{event_id}/status", response_model=EventOut)
def change_status(
    event_id: str,
    payload: StatusChange,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    """Move along the status machine; illegal moves are 409."""
    return event_service.set_status(db, event_id, credential, payload.status)


@router.put("/{event_id}/house-rules", response_model=EventOut)
def replace_house_rules(
    event_id: str,
    payload: HouseRulesUpdate,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    return event_service.set_house_rules(db, event_id, credential, payload.house_rules)
