# ============================================================================
# FILE: app/schemas/user.py
# ============================================================================
from pydantic import EmailStr, Field, field_validator
from typing import List
from datetime import datetime
from app.schemas.base import CamelModel, as_utc
from app.schemas.watchlist import WatchlistEntryResponse
import re

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_\s\-.]*$")
MIN_PASSWORD_LENGTH = 6
# bcrypt ignores everything past the first 72 bytes
MAX_PASSWORD_BYTES = 72


def check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")
    return value

class UserCreate(CamelModel):
    """Schema for user registration"""
    username: str
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        value = value.strip()
        if not 3 <= len(value) <= 30:
            raise ValueError("Username must be between 3 and 30 characters long")
        if not USERNAME_PATTERN.match(value):
            raise ValueError(
                "Username can only contain letters, numbers, spaces, hyphens, periods, and underscores"
            )
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return check_password_bytes(value)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

class UserLogin(CamelModel):
    """Schema for user login"""
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

class PasswordChange(CamelModel):
    """Schema for changing the current user's password"""
    current_password: str
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH)

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, value: str) -> str:
        return check_password_bytes(value)

class AuthResponse(CamelModel):
    """Token issued on registration or login"""
    token: str
    user_id: str
    username: str

class LoginResponse(CamelModel):
    token: str
    user_id: str

class UserProfile(CamelModel):
    """User profile without credentials"""
    id: str
    username: str
    email: str
    join_date: datetime
    watchlist: List[WatchlistEntryResponse] = []

    @field_validator("join_date")
    @classmethod
    def join_date_utc(cls, value: datetime) -> datetime:
        return as_utc(value)
