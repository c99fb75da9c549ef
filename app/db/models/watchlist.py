
# ============================================================================
# FILE: app/db/models/watchlist.py
# ============================================================================
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from app.db.base import Base

STATUS_ACTIVE = "active"
STATUS_REMOVED = "removed"

class WatchlistEntry(Base):
    """A movie or show saved by one user; removal only flips the status"""
    __tablename__ = "watchlist_entries"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    media_id = Column(Integer, nullable=False)  # TMDB id
    media_type = Column(String(10), nullable=False)  # "movie" or "tv"
    title = Column(String, nullable=False)
    poster_path = Column(String, nullable=True)
    added_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    status = Column(String(10), default=STATUS_ACTIVE, nullable=False)

    # Relationships
    user = relationship("User", back_populates="watchlist")

    __table_args__ = (
        # At most one active entry per (user, media) pair
        Index(
            "uq_watchlist_active_media",
            "user_id", "media_id", "media_type",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
    )

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE
