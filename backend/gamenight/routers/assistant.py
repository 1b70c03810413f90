"""Assistant route. Suggestions are returned, never applied."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gamenight.assistant import suggestions
from gamenight.database import get_db
from gamenight.routers.deps import get_credential
from gamenight.schemas.suggestion import SuggestionOut, SuggestionRequest
from gamenight.services.identity_service import Credential

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/suggest", response_model=SuggestionOut)
def suggest(
    payload: SuggestionRequest,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    return suggestions.suggest(db, payload.kind, payload.context.model_dump(), credential)
