# ============================================================================
# FILE: app/main.py
# ============================================================================
from datetime import datetime, timezone
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.api.v1.router import api_router
from app.core.cache import RedisCache
from app.core.exceptions import (
    AppError,
    MethodNotAllowedError,
    NotFoundError,
    ServerError,
    ValidationError,
)
from app.core.logging import setup_logging
from app.core.tmdb_client import TMDBClient
from app.config import settings
from app.db.session import Database
import logging
import time

# Setup logging
setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Create FastAPI app instance
app = FastAPI(
    title="CineTrack API",
    description="Movie and TV discovery with per-user watchlists",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API v1 router
app.include_router(api_router, prefix="/api/v1")

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """One access log line per request; unexpected errors logged once here"""
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        elapsed = (time.perf_counter() - start) * 1000
        logger.exception(f"{request.method} {request.url.path} -> 500 ({elapsed:.1f}ms)")
        raise
    elapsed = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed:.1f}ms)")
    return response

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Routing errors (unknown path, wrong method) in the AppError body shape"""
    if exc.status_code == 404:
        error = NotFoundError("Route not found")
    elif exc.status_code == 405:
        error = MethodNotAllowedError(f"Method {request.method} not allowed on {request.url.path}")
    else:
        error = AppError(str(exc.detail))
        error.status_code = exc.status_code
        error.error_type = "http_error"
    return JSONResponse(status_code=error.status_code, content=error.to_dict(), headers=exc.headers)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for error in exc.errors():
        # Skip the "body"/"query"/"path" location prefix
        field = ".".join(str(part) for part in error["loc"][1:]) or str(error["loc"][0])
        errors[field] = error["msg"]
    error = ValidationError("Validation failed", errors=errors)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    error = ServerError("Internal server error", error=str(exc) if settings.DEBUG else None)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())

@app.on_event("startup")
async def startup_event():
    """Acquire the database and provider client"""
    logger.info(f"Starting {settings.APP_NAME} API")
    app.state.db = Database(settings.DATABASE_URL, echo=settings.DEBUG)
    app.state.db.create_all()
    app.state.cache = RedisCache(settings.REDIS_URL, default_expire=settings.CACHE_EXPIRE_SECONDS)
    app.state.tmdb = TMDBClient(
        api_key=settings.TMDB_API_KEY,
        base_url=settings.TMDB_BASE_URL,
        language=settings.TMDB_LANGUAGE,
        timeout=settings.TMDB_TIMEOUT_SECONDS,
        search_timeout=settings.TMDB_SEARCH_TIMEOUT_SECONDS,
        cache=app.state.cache if app.state.cache.enabled else None,
        cache_expire=settings.CACHE_EXPIRE_SECONDS,
    )

@app.on_event("shutdown")
async def shutdown_event():
    """Release the database and provider client"""
    logger.info(f"Shutting down {settings.APP_NAME} API")
    await app.state.tmdb.close()
    app.state.cache.close()
    app.state.db.dispose()

@app.get("/health")
async def health_check():
    database_ok = app.state.db.ping()
    return {
        "status": "ok" if database_ok else "degraded",
        "database": "connected" if database_ok else "disconnected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
