"""
FastAPI backend for the concentration heatmap.

Serves the normalized records and the home/institution clusters of the
current load cycle to the map front end.
"""

import logging

from dotenv import load_dotenv

load_dotenv()

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from api.cache import get_load_result
from api.routes import concentrations
from heatmap import __version__
from heatmap.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting Concentration Heatmap API...")

    # Warm the cache so the first request does not pay for the load cycle
    result = get_load_result()
    if result.notice:
        logger.warning(f"[STARTUP] {result.notice}")
    logger.info(f"[STARTUP] Loaded {len(result.records)} records")

    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="Concentration Heatmap API",
    description="Home and institution concentrations of normalized person records",
    version=__version__,
    lifespan=lifespan,
)

# CORS - allow frontend to connect (configured via API_CORS_ORIGINS env var)
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Requested-With"],
)

# GZip compression for responses > 500 bytes
app.add_middleware(GZipMiddleware, minimum_size=500)

app.include_router(concentrations.router, prefix="/api/concentrations", tags=["concentrations"])


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "version": __version__, "service": "Concentration Heatmap API"}
