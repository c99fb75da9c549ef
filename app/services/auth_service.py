# ============================================================================
# FILE: app/services/auth_service.py
# ============================================================================
from dataclasses import dataclass
from sqlalchemy.orm import Session
from app.core.exceptions import InvalidCredentialsError, InvalidTokenError
from app.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from app.schemas.user import UserCreate
from app.services.user_service import user_service
import logging

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    user_id: str
    username: str
    token: str


class AuthService:
    """Registration, login and bearer token verification"""

    def register(self, db: Session, user_data: UserCreate) -> AuthResult:
        """
        Register a new account and issue a token

        Raises:
            DuplicateError: email or username already taken (``field`` names which)
        """
        user = user_service.create_user(
            db,
            username=user_data.username,
            email=user_data.email,
            hashed_password=get_password_hash(user_data.password),
        )
        return AuthResult(user_id=user.id, username=user.username, token=create_access_token(user.id))

    def login(self, db: Session, email: str, password: str) -> AuthResult:
        """
        Authenticate by email and password

        Unknown email and wrong password raise the same error.
        """
        user = user_service.get_user_by_email(db, email)
        if user is None or not verify_password(password, user.hashed_password):
            raise InvalidCredentialsError()
        return AuthResult(user_id=user.id, username=user.username, token=create_access_token(user.id))

    def verify(self, token: str) -> str:
        """Return the user id carried by a valid token"""
        payload = decode_access_token(token)
        user_id = payload.get("sub")
        if not user_id:
            raise InvalidTokenError()
        return user_id

    def change_password(self, db: Session, user_id: str, current_password: str, new_password: str) -> None:
        user = user_service.require_user(db, user_id)
        if not verify_password(current_password, user.hashed_password):
            raise InvalidCredentialsError("Current password is incorrect")
        user_service.update_password(db, user, get_password_hash(new_password))

auth_service = AuthService()
