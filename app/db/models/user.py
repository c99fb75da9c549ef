
# ============================================================================
# FILE: app/db/models/user.py
# ============================================================================
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from app.db.base import Base
import uuid

class User(Base):
    """User model holding credentials and owning the watchlist"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(30), unique=True, index=True, nullable=False)
    email = Column(String(254), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    join_date = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    # Relationships
    watchlist = relationship(
        "WatchlistEntry",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="WatchlistEntry.id",
    )

    @property
    def active_watchlist(self):
        return [entry for entry in self.watchlist if entry.is_active]
