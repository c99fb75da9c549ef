"""
Shared test fixtures for the CineTrack API tests.

Provides:
- Required settings (in-memory SQLite, test secret and TMDB key)
- A standalone database handle and session for service tests
- A FastAPI TestClient running the real startup/shutdown hooks
- An httpx MockTransport standing in for TMDB
- Registered users with bearer headers
"""

import asyncio
import os
import uuid
from typing import Callable, Dict, Generator

# Set test environment variables before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-purposes-only"
os.environ["TMDB_API_KEY"] = "test-tmdb-key"
os.environ["REDIS_URL"] = ""
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["TRENDING_PAGE_DELAY_SECONDS"] = "0"

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.api.dependencies import get_tmdb_client
from app.core.tmdb_client import TMDBClient
from app.db.session import Database
from app.main import app
from app.schemas.user import UserCreate
from app.services.auth_service import auth_service

TMDB_TEST_BASE_URL = "https://tmdb.test/3"


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def database() -> Generator[Database, None, None]:
    """Fresh in-memory database with all tables"""
    database = Database("sqlite://")
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def db(database: Database) -> Generator[Session, None, None]:
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db: Session):
    """A registered user created through the auth service"""
    result = auth_service.register(
        db,
        UserCreate(username="moviefan", email="fan@example.com", password="secret123"),
    )
    return result


# =============================================================================
# TMDB Fixtures
# =============================================================================


class TMDBStub:
    """
    Route table for a MockTransport

    Each route maps a TMDB path (without the ``/3`` version prefix) to either
    ``(status, json_body)`` or a callable taking the request.
    """

    def __init__(self):
        self.routes: Dict[str, object] = {}
        self.calls = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/3")
        self.calls.append((path, dict(request.url.params)))
        route = self.routes.get(path)
        if route is None:
            return httpx.Response(404, json={"status_message": "The resource you requested could not be found."})
        if callable(route):
            return route(request)
        status, body = route
        return httpx.Response(status, json=body)

    def client(self, **kwargs) -> TMDBClient:
        return TMDBClient(
            api_key="test-tmdb-key",
            base_url=TMDB_TEST_BASE_URL,
            transport=httpx.MockTransport(self.handler),
            **kwargs,
        )

    @staticmethod
    def paged(pages: Dict[int, list]) -> Callable[[httpx.Request], httpx.Response]:
        """Route serving ``results`` by the ``page`` query parameter; other pages fail"""
        def route(request: httpx.Request) -> httpx.Response:
            page = int(request.url.params["page"])
            if page not in pages:
                return httpx.Response(500, json={"status_message": "Internal error"})
            return httpx.Response(200, json={"page": page, "results": pages[page]})
        return route


@pytest.fixture
def tmdb() -> TMDBStub:
    return TMDBStub()


# =============================================================================
# Test Client Fixtures
# =============================================================================


@pytest.fixture
def client(tmdb: TMDBStub) -> Generator[TestClient, None, None]:
    """
    TestClient with startup hooks run against in-memory SQLite

    TMDB traffic goes to the ``tmdb`` stub through one client that is
    closed on teardown.
    """
    tmdb_client = tmdb.client()
    app.dependency_overrides[get_tmdb_client] = lambda: tmdb_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    asyncio.run(tmdb_client.close())


def register(client: TestClient, username: str = None, email: str = None, password: str = "secret123") -> dict:
    suffix = uuid.uuid4().hex[:8]
    response = client.post(
        "/api/v1/users/register",
        json={
            "username": username or f"user_{suffix}",
            "email": email or f"user_{suffix}@example.com",
            "password": password,
        },
    )
    assert response.status_code == 201, f"Failed to register: {response.text}"
    return response.json()


@pytest.fixture
def register_user(client: TestClient) -> Callable[..., dict]:
    """Factory registering users through the API; returns the response body"""
    return lambda **kwargs: register(client, **kwargs)


@pytest.fixture
def registered(client: TestClient) -> dict:
    return register(client)


@pytest.fixture
def auth_headers(registered: dict) -> dict:
    """Provide authentication headers for the registered user."""
    return {"Authorization": f"Bearer {registered['token']}"}
