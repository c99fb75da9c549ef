# ============================================================================
# FILE: app/db/session.py
# ============================================================================
from typing import Generator
from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from app.db.base import Base
import logging

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the SQLAlchemy engine and session factory

    Built once at application startup and disposed at shutdown; request
    handlers receive sessions through the ``get_db`` dependency.
    """

    def __init__(self, url: str, echo: bool = False):
        engine_kwargs = {"echo": echo, "future": True}
        parsed = make_url(url)
        if parsed.get_backend_name() == "sqlite":
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if parsed.database in (None, "", ":memory:"):
                # One shared connection so every session sees the same data
                engine_kwargs["poolclass"] = StaticPool

        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )
        logger.info(f"Database engine created for backend {parsed.get_backend_name()}")

    def create_all(self) -> None:
        """Create tables for all registered models"""
        # Import models so they register with Base.metadata
        from app.db.models import user, watchlist  # noqa: F401
        Base.metadata.create_all(bind=self.engine)

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database engine disposed")


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a session bound to the application's database handle"""
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
