"""
Tests for the TMDB client and the search/trending aggregations.
"""

import httpx
import pytest
import pytest_asyncio

from app.core.exceptions import UpstreamError, UpstreamTimeoutError, ValidationError
from app.services.media_service import MediaService, dedupe


@pytest_asyncio.fixture
async def tmdb_client(tmdb):
    client = tmdb.client()
    yield client
    await client.close()


@pytest.fixture
def media_service(tmdb_client):
    return MediaService(tmdb_client, trending_pages=2, page_delay=0)


def movie(id, popularity=1.0, **extra):
    return {"id": id, "title": f"Movie {id}", "popularity": popularity, **extra}


def show(id, popularity=1.0, **extra):
    return {"id": id, "name": f"Show {id}", "popularity": popularity, **extra}


class TestSearch:
    async def test_merges_tags_and_sorts_by_popularity(self, tmdb, media_service):
        tmdb.routes["/search/movie"] = (200, {"results": [movie(603, 50.0), movie(604, 10.0)]})
        tmdb.routes["/search/tv"] = (200, {"results": [show(1, 30.0)]})

        results = await media_service.search("matrix")

        assert [(r["media_type"], r["id"]) for r in results] == [("movie", 603), ("tv", 1), ("movie", 604)]

    async def test_movie_failure_returns_tv_results(self, tmdb, media_service):
        tmdb.routes["/search/movie"] = (500, {"status_message": "boom"})
        tmdb.routes["/search/tv"] = (200, {"results": [show(1, 3.0), show(2, 9.0)]})

        results = await media_service.search("matrix")

        assert [r["id"] for r in results] == [2, 1]
        assert {r["media_type"] for r in results} == {"tv"}

    async def test_both_failing_raises(self, tmdb, media_service):
        tmdb.routes["/search/movie"] = (500, {"status_message": "boom"})
        tmdb.routes["/search/tv"] = (503, {"status_message": "down"})

        with pytest.raises(UpstreamError):
            await media_service.search("matrix")

    async def test_blank_query_rejected(self, tmdb, media_service):
        with pytest.raises(ValidationError):
            await media_service.search("   ")
        assert tmdb.calls == []

    async def test_non_json_sub_response_degrades_to_partial(self, tmdb, media_service):
        tmdb.routes["/search/movie"] = lambda request: httpx.Response(200, text="not json")
        tmdb.routes["/search/tv"] = (200, {"results": [show(1)]})

        results = await media_service.search("office")

        assert [(r["media_type"], r["id"]) for r in results] == [("tv", 1)]

    async def test_duplicate_ids_removed(self, tmdb, media_service):
        tmdb.routes["/search/movie"] = (200, {"results": [movie(603, 5.0), movie(603, 5.0)]})
        tmdb.routes["/search/tv"] = (200, {"results": [show(603, 1.0)]})

        results = await media_service.search("matrix")

        # Movie and TV ids are separate namespaces at TMDB
        assert [(r["media_type"], r["id"]) for r in results] == [("movie", 603), ("tv", 603)]

    async def test_single_type_search(self, tmdb, media_service):
        tmdb.routes["/search/tv"] = (200, {"results": [show(1)]})

        results = await media_service.search("office", media_type="tv")

        assert [r["id"] for r in results] == [1]
        assert [call[0] for call in tmdb.calls] == ["/search/tv"]

    async def test_single_type_failure_propagates_upstream_status(self, tmdb, media_service):
        tmdb.routes["/search/movie"] = (401, {"status_message": "Invalid API key"})

        with pytest.raises(UpstreamError) as exc_info:
            await media_service.search("matrix", media_type="movie")
        assert exc_info.value.upstream_status == 401

    async def test_sends_query_page_and_key(self, tmdb, media_service):
        tmdb.routes["/search/movie"] = (200, {"results": []})
        tmdb.routes["/search/tv"] = (200, {"results": []})

        await media_service.search("matrix", page=3)

        for _, params in tmdb.calls:
            assert params["query"] == "matrix"
            assert params["page"] == "3"
            assert params["api_key"] == "test-tmdb-key"
            assert params["include_adult"] == "false"


class TestTrending:
    async def test_two_pages_deduplicated_in_first_seen_order(self, tmdb, media_service):
        tmdb.routes["/trending/movie/week"] = tmdb.paged({
            1: [movie(1), movie(2), movie(3), movie(4)],
            2: [movie(3), movie(5), movie(1), movie(2), movie(6)],
        })

        results = await media_service.trending("movie", page=1)

        assert [r["id"] for r in results] == [1, 2, 3, 4, 5, 6]
        assert [params["page"] for _, params in tmdb.calls] == ["1", "2"]

    async def test_failed_page_is_skipped(self, tmdb, media_service):
        tmdb.routes["/trending/tv/week"] = tmdb.paged({3: [show(7), show(8)]})

        results = await media_service.trending("tv", page=3)

        assert [r["id"] for r in results] == [7, 8]

    async def test_all_pages_failing_raises(self, tmdb, media_service):
        tmdb.routes["/trending/movie/week"] = tmdb.paged({})

        with pytest.raises(UpstreamError):
            await media_service.trending("movie")

    async def test_delay_between_pages(self, tmdb, tmdb_client, monkeypatch):
        sleeps = []

        async def fake_sleep(seconds):
            sleeps.append(seconds)

        monkeypatch.setattr("app.services.media_service.asyncio.sleep", fake_sleep)
        tmdb.routes["/trending/movie/week"] = tmdb.paged({1: [movie(1)], 2: [movie(2)]})

        await MediaService(tmdb_client, trending_pages=2, page_delay=1.0).trending("movie")

        assert sleeps == [1.0]


class TestPassThrough:
    async def test_details_requests_videos_and_credits(self, tmdb, media_service):
        tmdb.routes["/movie/550"] = (200, {"id": 550, "title": "Fight Club"})

        data = await media_service.details("movie", 550)

        assert data["title"] == "Fight Club"
        assert tmdb.calls[0][1]["append_to_response"] == "videos,credits"

    async def test_details_not_found_carries_upstream_status(self, media_service):
        with pytest.raises(UpstreamError) as exc_info:
            await media_service.details("movie", 999999)
        assert exc_info.value.upstream_status == 404
        assert "could not be found" in exc_info.value.message

    async def test_non_json_body_raises_upstream_error(self, tmdb, media_service):
        tmdb.routes["/movie/550"] = lambda request: httpx.Response(200, text="<html></html>")

        with pytest.raises(UpstreamError) as exc_info:
            await media_service.details("movie", 550)
        assert exc_info.value.upstream_status == 200
        assert not isinstance(exc_info.value, UpstreamTimeoutError)

    async def test_search_multi(self, tmdb, media_service):
        tmdb.routes["/search/multi"] = (200, {"page": 1, "results": [movie(1), show(2)]})

        data = await media_service.search_multi(" matrix ")

        assert [r["id"] for r in data["results"]] == [1, 2]
        assert tmdb.calls[0][1]["query"] == "matrix"

    async def test_popular(self, tmdb, media_service):
        tmdb.routes["/tv/popular"] = (200, {"page": 2, "results": [show(1)], "total_pages": 10})

        data = await media_service.popular("tv", page=2)

        assert data["page"] == 2
        assert tmdb.calls[0][1]["page"] == "2"

    async def test_timeout_raises_upstream_timeout(self, tmdb, media_service):
        def slow(request):
            raise httpx.ReadTimeout("timed out", request=request)

        tmdb.routes["/movie/550"] = slow

        with pytest.raises(UpstreamTimeoutError):
            await media_service.details("movie", 550)

    async def test_connection_error_raises_upstream_error(self, tmdb, media_service):
        def unreachable(request):
            raise httpx.ConnectError("refused", request=request)

        tmdb.routes["/movie/550"] = unreachable

        with pytest.raises(UpstreamError) as exc_info:
            await media_service.details("movie", 550)
        assert not isinstance(exc_info.value, UpstreamTimeoutError)


def test_dedupe_skips_items_without_id():
    items = [{"id": 1}, {"title": "no id"}, None, {"id": 1}, {"id": 2}]
    assert dedupe(items, key=lambda item: item["id"]) == [{"id": 1}, {"id": 2}]
