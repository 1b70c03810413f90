"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from gamenight.config import settings
from gamenight.database import Base, engine

from gamenight.routers import (
    assistant, chaos, chat, events, guests, invites, lineup, moments, roster, users,
)

# Import all models so Base.metadata knows about them
from gamenight.models.user import User                     # noqa: F401
from gamenight.models.event import GameNight               # noqa: F401
from gamenight.models.guest import Guest                   # noqa: F401
from gamenight.models.lineup import LineupEntry, Vote      # noqa: F401
from gamenight.models.moment import Moment                 # noqa: F401
from gamenight.models.chat import ChatMessage              # noqa: F401
from gamenight.models.chaos_session import ChaosSession    # noqa: F401
from gamenight.models.event_mutation import EventMutation  # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Game Night Planner",
    description="Plan board game nights: invites and RSVPs, a voted game lineup, snacks, chat and moments",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

GAME_NIGHT = "/api/game-nights/{event_id}"

app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(events.router, prefix="/api/game-nights", tags=["GameNights"])
app.include_router(guests.router, prefix=f"{GAME_NIGHT}/guests", tags=["Guests"])
app.include_router(invites.router, prefix="/api/invites", tags=["Invites"])
app.include_router(lineup.router, prefix=f"{GAME_NIGHT}/lineup", tags=["Lineup"])
app.include_router(roster.router, prefix=f"{GAME_NIGHT}/roster", tags=["Roster"])
app.include_router(chat.router, prefix=f"{GAME_NIGHT}/chat", tags=["Chat"])
app.include_router(moments.router, prefix=f"{GAME_NIGHT}/moments", tags=["Moments"])
app.include_router(chaos.router, prefix=f"{GAME_NIGHT}/chaos-session", tags=["Chaos"])
app.include_router(assistant.router, prefix="/api/assistant", tags=["Assistant"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
