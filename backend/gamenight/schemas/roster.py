"""Pydantic schemas for the snack roster view."""
from pydantic import BaseModel


class SnackItemOut(BaseModel):
    guest_name: str
    item: str


class SnackRosterOut(BaseModel):
    categories: dict[str, list[SnackItemOut]]
    total: int
    is_empty: bool
