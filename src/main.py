"""Beacon Visibility API - AI search visibility scoring."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import analyses_router, health_router
from config import settings
from db.session import engine as db_engine

# Root logger for the API process; DEBUG mirrors SQL echo
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Code before `yield` runs on startup, code after it on shutdown.
    """
    # Startup: the scoring engine is built on first use and cached
    logger.info(f"Starting {settings.app_name}...")
    yield
    # Shutdown: close pooled database connections
    logger.info(f"Shutting down {settings.app_name}...")
    await db_engine.dispose()


app = FastAPI(
    title="Beacon Visibility API",
    description="Scores how likely a page is to be cited by AI answer engines.",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS (restrict origins per deployment)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router, prefix="/api/v1")
app.include_router(analyses_router, prefix="/api/v1")


@app.get("/", include_in_schema=False)
async def root():
    """Point callers at the docs and health check."""
    return {
        "service": "Beacon Visibility API",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
