# ============================================================================
# FILE: app/schemas/media.py
# ============================================================================
from enum import Enum

class MediaType(str, Enum):
    """Kinds of media stored in a watchlist"""
    MOVIE = "movie"
    TV = "tv"

class TrendingType(str, Enum):
    """Kinds accepted by the provider's trending endpoint"""
    MOVIE = "movie"
    TV = "tv"
    ALL = "all"
