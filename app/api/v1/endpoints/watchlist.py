# ============================================================================
# FILE: app/api/v1/endpoints/watchlist.py
# ============================================================================
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from app.db.session import get_db
from app.api.dependencies import require_current_user_id
from app.schemas.media import MediaType
from app.schemas.watchlist import (
    WatchlistCheckResponse,
    WatchlistEntryCreate,
    WatchlistEntryResponse,
)
from app.services.watchlist_service import watchlist_service

router = APIRouter()

@router.get("", response_model=List[WatchlistEntryResponse])
async def get_watchlist(
    db: Session = Depends(get_db),
    user_id: str = Depends(require_current_user_id)
):
    """
    Get the current user's watchlist
    Requires authentication
    """
    return watchlist_service.list_entries(db, user_id)

@router.get("/check/{media_id}", response_model=WatchlistCheckResponse)
async def check_watchlist(
    media_id: int,
    media_type: Optional[MediaType] = Query(None, alias="mediaType"),
    db: Session = Depends(get_db),
    user_id: str = Depends(require_current_user_id)
):
    """Check whether a movie or show is in the watchlist"""
    found = watchlist_service.contains(
        db, user_id, media_id, media_type.value if media_type else None
    )
    return WatchlistCheckResponse(is_in_watchlist=found)

@router.post("", response_model=List[WatchlistEntryResponse])
async def add_to_watchlist(
    entry_data: WatchlistEntryCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(require_current_user_id)
):
    """
    Add a movie or show to the watchlist
    Returns the updated watchlist
    """
    return watchlist_service.add(db, user_id, entry_data)

@router.delete("/{media_id}", response_model=List[WatchlistEntryResponse])
async def remove_from_watchlist(
    media_id: int,
    media_type: Optional[MediaType] = Query(None, alias="mediaType"),
    db: Session = Depends(get_db),
    user_id: str = Depends(require_current_user_id)
):
    """
    Remove a movie or show from the watchlist
    Returns the updated watchlist
    """
    return watchlist_service.remove(
        db, user_id, media_id, media_type.value if media_type else None
    )
