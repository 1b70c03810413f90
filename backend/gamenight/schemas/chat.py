"""Pydantic schemas for the chat channel."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class ChatMessageCreate(BaseModel):
    content: str = Field(max_length=2000)


class ChatMessageOut(BaseModel):
    message_id: str
    event_id: str
    author_id: str
    author_name: str
    author_avatar: Optional[str] = None
    content: str
    created_at: datetime
    is_edited: bool

    model_config = {"from_attributes": True}


class ChatPage(BaseModel):
    messages: list[ChatMessageOut]
    poll_interval_seconds: int
