"""Chaos session handle routes."""
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gamenight.database import get_db
from gamenight.routers.deps import get_credential
from gamenight.schemas.chaos import ChaosSessionOut
from gamenight.services import chaos_service
from gamenight.services.identity_service import Credential

router = APIRouter()


@router.post("/", response_model=ChaosSessionOut)
def start_session(
    event_id: str,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    """Open the room (host only, while in progress); repeated calls return the same room."""
    return chaos_service.start_session(db, event_id, credential)


@router.get("/", response_model=ChaosSessionOut)
def get_session(
    event_id: str,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    return chaos_service.get_session(db, event_id, credential)
