"""Pydantic schemas for the chaos session handle."""
from pydantic import BaseModel


class ChaosSessionOut(BaseModel):
    session_id: str
    room_code: str
    join_url: str
