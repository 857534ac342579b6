"""Status card API - Main application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from .dependencies import get_components, init_components
from .routes import router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting status card v%s", __version__)
    try:
        init_components()
        logger.info("Components initialized")
        refreshed = await get_components().engine.refresh()
        logger.info("Initial refresh: %s", refreshed)
    except Exception as e:
        logger.error("Init failed: %s", e)
    yield
    logger.info("Shutting down")
    try:
        await get_components().ha.close()
    except Exception as e:
        logger.debug("Close skipped: %s", e)


app = FastAPI(
    title="Status card",
    description="Aggregated Home Assistant status summaries",
    version=__version__,
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Required for ingress - HA handles auth
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api")


@app.get("/health", include_in_schema=False)
async def root_health():
    """Root health check for ingress."""
    try:
        engine = get_components().engine
        return {"ok": True, "detail": "API running", "ha_connected": bool(engine.ha.token)}
    except Exception:
        return {"ok": True, "detail": "API running", "ha_connected": False}
