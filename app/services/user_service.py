# ============================================================================
# FILE: app/services/user_service.py
# ============================================================================
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.db.models.user import User
from app.core.exceptions import DuplicateError, NotFoundError
import logging

logger = logging.getLogger(__name__)

class UserService:
    """Service layer for stored user records"""

    def create_user(self, db: Session, username: str, email: str, hashed_password: str) -> User:
        """Create a new user account; callers pass an already hashed password"""
        if self.get_user_by_email(db, email):
            raise DuplicateError("email already in use", field="email")
        if self.get_user_by_username(db, username):
            raise DuplicateError("username already in use", field="username")

        user = User(
            username=username,
            email=email,
            hashed_password=hashed_password
        )
        try:
            db.add(user)
            db.commit()
            db.refresh(user)
        except IntegrityError as e:
            db.rollback()
            # Lost a race against a concurrent registration
            field = "email" if "email" in str(e.orig).lower() else "username"
            raise DuplicateError(f"{field} already in use", field=field)
        logger.info(f"User created: {user.id}")
        return user

    def get_user(self, db: Session, user_id: str) -> Optional[User]:
        return db.get(User, user_id)

    def require_user(self, db: Session, user_id: str) -> User:
        """Get user by id or raise NotFoundError"""
        user = self.get_user(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def get_user_by_username(self, db: Session, username: str) -> Optional[User]:
        """Get user by username"""
        return db.query(User).filter(User.username == username).first()

    def get_user_by_email(self, db: Session, email: str) -> Optional[User]:
        """Get user by email (case-insensitive)"""
        return db.query(User).filter(User.email == email.strip().lower()).first()

    def update_password(self, db: Session, user: User, hashed_password: str) -> User:
        try:
            user.hashed_password = hashed_password
            db.commit()
            db.refresh(user)
        except Exception:
            db.rollback()
            raise
        logger.info(f"Password updated for user {user.id}")
        return user

# Create singleton instance
user_service = UserService()
