# ============================================================================
# FILE: app/core/tmdb_client.py
# TMDB (The Movie Database) v3 client for search, trending and details
# ============================================================================
import httpx
from typing import Any, Dict, List, Optional
from app.core.cache import RedisCache
from app.core.exceptions import UpstreamError, UpstreamTimeoutError
import logging

logger = logging.getLogger(__name__)


class TMDBClient:
    """
    Async TMDB API client

    Every request carries a bounded timeout. Non-2xx responses raise
    UpstreamError with the provider's status; timeouts raise
    UpstreamTimeoutError. Details and popular lists are cached when a
    Redis cache is configured.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.themoviedb.org/3",
        language: str = "en-US",
        timeout: float = 10.0,
        search_timeout: float = 5.0,
        cache: Optional[RedisCache] = None,
        cache_expire: int = 3600,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.language = language
        self.timeout = timeout
        self.search_timeout = search_timeout
        self.cache = cache
        self.cache_expire = cache_expire
        self.http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            follow_redirects=True,
            headers={"Accept": "application/json", "Accept-Encoding": "gzip"},
            transport=transport,
        )

    async def close(self) -> None:
        await self.http.aclose()

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None, timeout: Optional[float] = None) -> Dict:
        query = {"api_key": self.api_key, "language": self.language}
        if params:
            query.update(params)

        try:
            response = await self.http.get(path, params=query, timeout=timeout or self.timeout)
        except httpx.TimeoutException:
            logger.warning(f"TMDB request timed out: {path}")
            raise UpstreamTimeoutError(f"Metadata provider timed out for {path}")
        except httpx.RequestError as e:
            logger.warning(f"TMDB request failed: {path}: {e}")
            raise UpstreamError(f"Metadata provider unreachable for {path}")

        if not response.is_success:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = (body.get("status_message") if isinstance(body, dict) else None) or response.reason_phrase
            raise UpstreamError(f"Metadata provider error: {message}", upstream_status=response.status_code)

        try:
            return response.json()
        except ValueError:
            logger.warning(f"TMDB returned a non-JSON body for {path}")
            raise UpstreamError(
                "Metadata provider returned an invalid response",
                upstream_status=response.status_code,
            )

    async def _get_cached(self, cache_key: str, path: str, params: Optional[Dict[str, Any]] = None) -> Dict:
        if self.cache:
            cached_data = self.cache.get_cache(cache_key)
            if cached_data:
                logger.debug(f"Cache hit: {cache_key}")
                return cached_data

        data = await self._get(path, params)
        if self.cache:
            self.cache.set_cache(cache_key, data, self.cache_expire)
        return data

    async def search(self, media_type: str, query: str, page: int = 1) -> List[Dict]:
        """Search one media kind; returns the raw result list"""
        data = await self._get(
            f"/search/{media_type}",
            {"query": query, "page": page, "include_adult": "false"},
            timeout=self.search_timeout,
        )
        return data.get("results") or []

    async def search_multi(self, query: str, page: int = 1) -> Dict:
        """Mixed movie, TV and person search; returns TMDB's page object"""
        return await self._get(
            "/search/multi",
            {"query": query, "page": page, "include_adult": "false"},
            timeout=self.search_timeout,
        )

    async def trending(self, media_type: str, page: int = 1, window: str = "week") -> List[Dict]:
        data = await self._get(f"/trending/{media_type}/{window}", {"page": page, "region": "US"})
        return data.get("results") or []

    async def popular(self, media_type: str, page: int = 1) -> Dict:
        return await self._get_cached(
            f"tmdb:popular:{media_type}:{page}",
            f"/{media_type}/popular",
            {"page": page},
        )

    async def details(self, media_type: str, media_id: int) -> Dict:
        """Get details with videos and credits appended"""
        return await self._get_cached(
            f"tmdb:details:{media_type}:{media_id}",
            f"/{media_type}/{media_id}",
            {"append_to_response": "videos,credits"},
        )
