"""Snack roster route."""
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gamenight.database import get_db
from gamenight.routers.deps import get_credential
from gamenight.schemas.roster import SnackRosterOut
from gamenight.services import snack_roster
from gamenight.services.identity_service import Credential

router = APIRouter()


@router.get("/", response_model=SnackRosterOut)
def get_roster(
    event_id: str,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    return snack_roster.roster_for_event(db, event_id, credential)
