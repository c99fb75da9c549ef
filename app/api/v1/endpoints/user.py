# ============================================================================
# FILE: app/api/v1/endpoints/user.py
# ============================================================================
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.api.dependencies import require_current_user_id
from app.schemas.user import (
    AuthResponse,
    LoginResponse,
    PasswordChange,
    UserCreate,
    UserLogin,
    UserProfile,
)
from app.services.auth_service import auth_service
from app.schemas.watchlist import WatchlistEntryResponse
from app.services.user_service import user_service

router = APIRouter()

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: Session = Depends(get_db)
):
    """
    Register a new user account
    Returns a bearer token for the new user
    """
    result = auth_service.register(db, user_data)
    return AuthResponse(token=result.token, user_id=result.user_id, username=result.username)

@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: UserLogin,
    db: Session = Depends(get_db)
):
    """
    Login with email and password
    Returns JWT access token
    """
    result = auth_service.login(db, credentials.email, credentials.password)
    return LoginResponse(token=result.token, user_id=result.user_id)

@router.get("/verify", response_model=UserProfile)
@router.get("/profile", response_model=UserProfile)
async def get_current_user_info(
    user_id: str = Depends(require_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Get current user profile with active watchlist
    Requires authentication
    """
    user = user_service.require_user(db, user_id)
    return UserProfile(
        id=user.id,
        username=user.username,
        email=user.email,
        join_date=user.join_date,
        watchlist=[WatchlistEntryResponse.model_validate(entry) for entry in user.active_watchlist],
    )

@router.put("/password")
async def change_password(
    payload: PasswordChange,
    user_id: str = Depends(require_current_user_id),
    db: Session = Depends(get_db)
):
    """Change the current user's password"""
    auth_service.change_password(db, user_id, payload.current_password, payload.new_password)
    return {"message": "Password updated successfully"}
