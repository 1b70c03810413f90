"""Chat routes; clients poll with since_id for new messages."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gamenight.config import settings
from gamenight.database import get_db
from gamenight.routers.deps import get_credential
from gamenight.schemas.chat import ChatMessageCreate, ChatMessageOut, ChatPage
from gamenight.services import chat_service
from gamenight.services.identity_service import Credential

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=ChatPage)
def list_messages(
    event_id: str,
    since_id: Optional[str] = Query(None, description="Only messages after this one"),
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    messages = chat_service.list_messages(db, event_id, credential, since_id=since_id)
    return {"messages": messages, "poll_interval_seconds": settings.CHAT_POLL_INTERVAL_SECONDS}


@router.post("/", response_model=ChatMessageOut, status_code=status.HTTP_201_CREATED)
def post_message(
    event_id: str,
    payload: ChatMessageCreate,
    credential: Optional[Credential] = Depends(get_credential),
    db: Session = Depends(get_db),
):
    return chat_service.post_message(db, event_id, credential, payload.content)
