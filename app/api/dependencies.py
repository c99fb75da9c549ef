# ============================================================================
# FILE: app/api/dependencies.py
# ============================================================================
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from typing import Optional
from app.config import settings
from app.core.exceptions import InvalidTokenError
from app.core.tmdb_client import TMDBClient
from app.services.auth_service import auth_service
from app.services.media_service import MediaService

bearer_scheme = HTTPBearer(auto_error=False)

def require_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> str:
    """
    Resolve the user id from the ``Authorization: Bearer`` header
    Raises 401 if the header is missing or the token is invalid
    """
    if credentials is None or not credentials.credentials:
        raise InvalidTokenError("Not authenticated")
    return auth_service.verify(credentials.credentials)

def get_tmdb_client(request: Request) -> TMDBClient:
    return request.app.state.tmdb

def get_media_service(client: TMDBClient = Depends(get_tmdb_client)) -> MediaService:
    return MediaService(
        client,
        trending_pages=settings.TRENDING_PAGES,
        page_delay=settings.TRENDING_PAGE_DELAY_SECONDS,
    )
