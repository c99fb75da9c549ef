# ============================================================================
# FILE: app/api/v1/endpoints/movies.py
# Movie and TV metadata proxied from TMDB
# ============================================================================
from fastapi import APIRouter, Depends, Path, Query
from typing import Dict, List, Optional
from app.api.dependencies import get_media_service
from app.schemas.media import MediaType, TrendingType
from app.services.media_service import MediaService

router = APIRouter()

@router.get("/search", response_model=List[Dict])
async def search_media(
    query: str = Query(..., description="Search query"),
    type: Optional[MediaType] = Query(None, description="Restrict to movie or tv"),
    page: int = Query(1, ge=1, le=500),
    media_service: MediaService = Depends(get_media_service)
):
    """
    Search movies and TV shows, most popular first

    A failing movie or TV sub-request degrades to partial results.
    """
    return await media_service.search(query, page, type.value if type else None)

@router.get("/search/multi")
async def search_multi(
    query: str = Query(..., description="Search query"),
    page: int = Query(1, ge=1, le=500),
    media_service: MediaService = Depends(get_media_service)
):
    """Raw TMDB multi-search page (movies, shows and people)"""
    return await media_service.search_multi(query, page)

@router.get("/trending/{type}", response_model=List[Dict])
async def get_trending(
    type: TrendingType,
    page: int = Query(1, ge=1, le=499),
    media_service: MediaService = Depends(get_media_service)
):
    """Get this week's trending titles, two pages merged"""
    return await media_service.trending(type.value, page)

@router.get("/details/{type}/{media_id}")
async def get_details(
    type: MediaType,
    media_id: int = Path(..., gt=0),
    media_service: MediaService = Depends(get_media_service)
):
    """Get movie or TV details with videos and credits"""
    return await media_service.details(type.value, media_id)

@router.get("/popular/movies")
async def get_popular_movies(
    page: int = Query(1, ge=1, le=500),
    media_service: MediaService = Depends(get_media_service)
):
    return await media_service.popular(MediaType.MOVIE.value, page)

@router.get("/tv/popular")
async def get_popular_tv(
    page: int = Query(1, ge=1, le=500),
    media_service: MediaService = Depends(get_media_service)
):
    return await media_service.popular(MediaType.TV.value, page)

@router.get("/tv/{media_id}")
async def get_tv_details(
    media_id: int = Path(..., gt=0),
    media_service: MediaService = Depends(get_media_service)
):
    return await media_service.details(MediaType.TV.value, media_id)
