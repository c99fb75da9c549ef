# ============================================================================
# FILE: app/services/media_service.py
# ============================================================================
import asyncio
from typing import Dict, Hashable, Iterable, List, Optional
from app.core.exceptions import UpstreamError, ValidationError
from app.core.tmdb_client import TMDBClient
import logging

logger = logging.getLogger(__name__)

SEARCH_MEDIA_TYPES = ("movie", "tv")


def dedupe(items: Iterable[Dict], key) -> List[Dict]:
    """Drop items without an id and keep the first item seen per key"""
    seen = set()
    unique = []
    for item in items:
        if not item or item.get("id") is None:
            continue
        item_key: Hashable = key(item)
        if item_key in seen:
            continue
        seen.add(item_key)
        unique.append(item)
    return unique


class MediaService:
    """Aggregations over the metadata provider"""

    def __init__(self, client: TMDBClient, trending_pages: int = 2, page_delay: float = 1.0):
        self.client = client
        self.trending_pages = trending_pages
        self.page_delay = page_delay

    async def search(self, query: str, page: int = 1, media_type: Optional[str] = None) -> List[Dict]:
        """
        Search movies and shows, most popular first

        Without ``media_type`` both kinds are searched concurrently and a
        failed sub-request contributes no results. Fails only when the query
        is blank or every sub-request fails.
        """
        query = (query or "").strip()
        if not query:
            raise ValidationError("Search query is required", field="query")

        kinds = (media_type,) if media_type else SEARCH_MEDIA_TYPES
        responses = await asyncio.gather(
            *(self.client.search(kind, query, page) for kind in kinds),
            return_exceptions=True,
        )

        results = []
        failures = []
        for kind, response in zip(kinds, responses):
            if isinstance(response, UpstreamError):
                logger.warning(f"Search for {kind} failed, returning partial results: {response.message}")
                failures.append(response)
                continue
            if isinstance(response, BaseException):
                raise response
            results.extend(dict(item, media_type=kind) for item in response)

        if len(failures) == len(kinds):
            raise failures[0] if len(kinds) == 1 else UpstreamError("Search failed for all media types")

        unique = dedupe(results, key=lambda item: (item["media_type"], item["id"]))
        unique.sort(key=lambda item: item.get("popularity") or 0, reverse=True)
        return unique

    async def search_multi(self, query: str, page: int = 1) -> Dict:
        """Provider multi-search page, passed through unchanged"""
        query = (query or "").strip()
        if not query:
            raise ValidationError("Search query is required", field="query")
        return await self.client.search_multi(query, page)

    async def trending(self, media_type: str, page: int = 1) -> List[Dict]:
        """
        Fetch consecutive trending pages starting at ``page``

        Pages are requested one after another with a fixed delay between
        them. Failed pages are skipped; results keep first-seen order.
        """
        results = []
        last_error: Optional[UpstreamError] = None
        fetched = 0
        for offset in range(self.trending_pages):
            if offset > 0 and self.page_delay:
                await asyncio.sleep(self.page_delay)
            try:
                results.extend(await self.client.trending(media_type, page + offset))
                fetched += 1
            except UpstreamError as e:
                logger.warning(f"Trending {media_type} page {page + offset} failed: {e.message}")
                last_error = e

        if fetched == 0 and last_error is not None:
            raise last_error

        return dedupe(results, key=lambda item: (item.get("media_type", media_type), item["id"]))

    async def popular(self, media_type: str, page: int = 1) -> Dict:
        return await self.client.popular(media_type, page)

    async def details(self, media_type: str, media_id: int) -> Dict:
        return await self.client.details(media_type, media_id)
