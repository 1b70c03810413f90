"""Game lineup and voting routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from gamenight.database import get_db
from gamenight.routers.deps import get_credential
from gamenight.schemas.lineup import (
    LineupEntryCreate, LineupEntryOut, LineupEntryUpdate, VotePayload, VoteResult,
)
from gamenight.services import lineup_service
from gamenight.services.identity_service import Credential

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=list[LineupEntryOut])
def list_lineup(
    event_id: str,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    """Entries ranked by net votes; ties keep play order."""
    return lineup_service.list_lineup(db, event_id, credential)


@router.post("/", response_model=LineupEntryOut, status_code=status.HTTP_201_CREATED)
def add_entry(
    event_id: str,
    payload: LineupEntryCreate,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    entry = lineup_service.add_entry(
        db,
        event_id,
        credential,
        game_ref=payload.game_ref,
        game_title=payload.game_title,
        custom_name=payload.custom_name,
        estimated_minutes=payload.estimated_minutes,
    )
    return lineup_service.get_entry_view(db, event_id, credential, entry.entry_id)


@router.patch("/{entry_id}", response_model=LineupEntryOut)
def update_entry(
    event_id: str,
    entry_id: str,
    payload: LineupEntryUpdate,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    lineup_service.update_entry(db, event_id, credential, entry_id, payload.model_dump(exclude_unset=True))
    return lineup_service.get_entry_view(db, event_id, credential, entry_id)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_entry(
    event_id: str,
    entry_id: str,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    lineup_service.remove_entry(db, event_id, credential, entry_id)


@router.post("/{entry_id}/vote", response_model=VoteResult)
def vote(
    event_id: str,
    entry_id: str,
    payload: VotePayload,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    """Same vote twice clears it."""
    return lineup_service.vote(db, event_id, credential, entry_id, payload.value)
