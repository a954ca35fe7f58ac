"""
FastAPI application entry point.
"""

import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from sokohub_feed.api import feeds
from sokohub_feed.api.router import router as v1_router
from sokohub_feed.config import get_settings
from sokohub_feed.core.security import sanitize_string_for_logging
from sokohub_feed.deps import close_clients
from sokohub_feed.schemas.common import HealthResponse

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    # Startup
    yield
    # Shutdown
    await close_clients()


app = FastAPI(
    title="Sokohub Product Feed API",
    description="Google Merchant Center product feed for the Sokohub Kenya storefront",
    version="1.0.0",
    lifespan=lifespan
)

# Include routers
app.include_router(feeds.public_router)
app.include_router(v1_router, prefix="/api/v1")


@app.get("/api/v1/health", response_model=HealthResponse, tags=["health"])
async def health_check():
    """Health check endpoint."""
    return HealthResponse(ok=True)


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": "Sokohub Product Feed API",
        "version": "1.0.0",
        "feed": "/feed.xml",
        "docs": "/docs"
    }


@app.get("/api/v1/health/redis", tags=["health"])
async def health_check_redis():
    """Check Redis connection health (only meaningful with FEED_STATE_BACKEND=redis)."""
    from sokohub_feed.deps import get_redis
    if get_settings().feed_state_backend != "redis":
        return {"ok": True, "redis": "not configured"}
    try:
        redis = get_redis()
        await redis.ping()
        return {"ok": True, "redis": "connected"}
    except Exception as e:
        return {"ok": False, "redis": "disconnected", "error": sanitize_string_for_logging(str(e))}
