
# ============================================================================
# FILE: app/schemas/watchlist.py
# ============================================================================
from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
from app.schemas.base import CamelModel, as_utc
from app.schemas.media import MediaType

class WatchlistEntryCreate(CamelModel):
    """Schema for adding a movie or show to the watchlist"""
    media_id: int = Field(gt=0)
    media_type: MediaType
    title: str = Field(min_length=1)
    poster_path: Optional[str] = None

class WatchlistEntryResponse(CamelModel):
    """Schema for a watchlist entry"""
    media_id: int
    media_type: MediaType
    title: str
    poster_path: Optional[str] = None
    added_at: datetime

    @field_validator("added_at")
    @classmethod
    def added_at_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

class WatchlistCheckResponse(CamelModel):
    is_in_watchlist: bool
