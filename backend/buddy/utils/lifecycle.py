# /buddy/utils/lifecycle.py

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from buddy.utils.logging import setup_logging
from buddy.services.ai_service import ai_service
from buddy.config.settings import settings

# This file manages the application's lifespan: logging setup and a readiness
# summary on startup, and closing the oracle HTTP client on shutdown.

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    setup_logging()

    logger.info("Application starting up...")
    if ai_service.available:
        logger.info(
            f"Oracle configured: fast pool {settings.fast_models}, smart pool {settings.smart_models}."
        )
    else:
        logger.warning("Oracle not configured; flows will run on deterministic fallbacks only.")
    logger.info("Application startup complete. Ready to accept requests.")

    yield  # Application is now running

    logger.info("Application shutting down...")
    if ai_service.client is not None:
        await ai_service.client.close()
