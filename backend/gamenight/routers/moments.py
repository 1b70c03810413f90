"""Moments feed routes."""
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from gamenight.database import get_db
from gamenight.routers.deps import get_credential
from gamenight.schemas.moment import MomentCreate, MomentOut
from gamenight.services import moment_service
from gamenight.services.identity_service import Credential

router = APIRouter()


@router.get("/", response_model=list[MomentOut])
def list_moments(
    event_id: str,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    return moment_service.list_moments(db, event_id, credential)


@router.post("/", response_model=MomentOut, status_code=status.HTTP_201_CREATED)
def add_moment(
    event_id: str,
    payload: MomentCreate,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    return moment_service.add_moment(db, event_id, credential, payload.type, payload.content)
