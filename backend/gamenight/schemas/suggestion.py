"""Pydantic schemas for assistant suggestions."""
from __future__ import annotations
from typing import Any, Literal, Optional
from pydantic import BaseModel

SuggestionKind = Literal[
    "suggest_games",
    "suggest_snacks",
    "generate_theme",
    "generate_invite",
    "plan_night",
    "generate_recap",
]


class SuggestionContext(BaseModel):
    player_count: Optional[int] = None
    vibe: Optional[str] = None
    duration_minutes: Optional[int] = None
    theme: Optional[str] = None
    guest_names: list[str] = []
    games_owned: list[str] = []
    dietary_restrictions: list[str] = []
    event_id: Optional[str] = None
    custom_prompt: Optional[str] = None


class SuggestionRequest(BaseModel):
    kind: SuggestionKind
    context: SuggestionContext = SuggestionContext()


class SuggestionOut(BaseModel):
    kind: SuggestionKind
    source: Literal["ai", "fallback"]
    suggestion: Any
    raw_suggestion: Optional[str] = None
