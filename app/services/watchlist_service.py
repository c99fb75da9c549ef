# ============================================================================
# FILE: app/services/watchlist_service.py
# ============================================================================
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.core.exceptions import DuplicateError, NotFoundError
from app.db.models.user import User
from app.db.models.watchlist import WatchlistEntry, STATUS_ACTIVE, STATUS_REMOVED
from app.schemas.watchlist import WatchlistEntryCreate
from app.services.user_service import user_service
import logging

logger = logging.getLogger(__name__)

class WatchlistService:
    """
    Service layer for a user's watchlist

    Removal is a soft delete: entries are flagged ``removed`` and drop out
    of every read path. Uniqueness of an active (media_id, media_type) pair
    is checked here and guaranteed by a partial unique index.
    """

    def _active_entries(self, db: Session, user_id: str) -> List[WatchlistEntry]:
        return db.query(WatchlistEntry).filter(
            WatchlistEntry.user_id == user_id,
            WatchlistEntry.status == STATUS_ACTIVE
        ).order_by(WatchlistEntry.id).all()

    def _matching(self, entries: List[WatchlistEntry], media_id: int, media_type: Optional[str]) -> List[WatchlistEntry]:
        return [
            entry for entry in entries
            if entry.media_id == media_id and (media_type is None or entry.media_type == media_type)
        ]

    def list_entries(self, db: Session, user_id: str) -> List[WatchlistEntry]:
        """Get active entries in insertion order"""
        user_service.require_user(db, user_id)
        return self._active_entries(db, user_id)

    def contains(self, db: Session, user_id: str, media_id: int, media_type: Optional[str] = None) -> bool:
        """Check whether an active entry matches; read-only"""
        return bool(self._matching(self.list_entries(db, user_id), media_id, media_type))

    def add(self, db: Session, user_id: str, entry_data: WatchlistEntryCreate) -> List[WatchlistEntry]:
        """Append an entry and return the updated active list"""
        user: User = user_service.require_user(db, user_id)
        media_type = entry_data.media_type.value

        if self._matching(self._active_entries(db, user.id), entry_data.media_id, media_type):
            raise DuplicateError("Item already in watchlist", field="mediaId")

        entry = WatchlistEntry(
            user_id=user.id,
            media_id=entry_data.media_id,
            media_type=media_type,
            title=entry_data.title,
            poster_path=entry_data.poster_path,
            added_at=datetime.now(timezone.utc),
            status=STATUS_ACTIVE
        )
        try:
            db.add(entry)
            db.commit()
        except IntegrityError:
            # A concurrent add won; the partial unique index rejected ours
            db.rollback()
            raise DuplicateError("Item already in watchlist", field="mediaId")

        logger.info(f"Watchlist add for user {user.id}: {media_type}/{entry_data.media_id}")
        return self._active_entries(db, user.id)

    def remove(self, db: Session, user_id: str, media_id: int, media_type: Optional[str] = None) -> List[WatchlistEntry]:
        """
        Mark matching active entries removed and return the updated list

        Without ``media_type`` every active entry with ``media_id`` matches.
        """
        user_service.require_user(db, user_id)
        matches = self._matching(self._active_entries(db, user_id), media_id, media_type)
        if not matches:
            raise NotFoundError("Item not found in watchlist")

        try:
            for entry in matches:
                entry.status = STATUS_REMOVED
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(f"Watchlist remove for user {user_id}: {media_id} ({len(matches)} entries)")
        return self._active_entries(db, user_id)

# Create singleton instance
watchlist_service = WatchlistService()
