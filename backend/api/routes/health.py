"""Health check endpoints."""

import asyncio
import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from adapters.ai.anthropic_adapter import anthropic_adapter
from adapters.images import UnsplashAdapter
from adapters.search import GoogleSearchAdapter, NewsAPIAdapter
from infrastructure.config import get_settings
from infrastructure.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()

DB_CHECK_TIMEOUT = 5.0


def _app_info() -> dict:
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {"status": "healthy", **_app_info()}


@router.get("/health/db")
async def health_check_db(db: AsyncSession = Depends(get_db)):
    """Health check with database connectivity."""
    try:
        result = await asyncio.wait_for(db.execute(text("SELECT 1")), timeout=DB_CHECK_TIMEOUT)
        result.scalar()
        db_status = "connected"
    except TimeoutError:
        logger.error("Health check DB timeout")
        db_status = "error: database timeout"
    except Exception as e:
        logger.error("Health check DB error: %s", e)
        db_status = "error: database check failed"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "database": db_status,
        **_app_info(),
    }


@router.get("/health/services")
async def services_check():
    """
    Which external providers have credentials.

    Generation still answers without them (empty research, no images, mock
    content), so a missing key reports ``degraded`` rather than failing.
    """
    services = {
        "anthropic": {"configured": anthropic_adapter.is_configured, "model": anthropic_adapter.model},
        "news_api": {"configured": NewsAPIAdapter().is_configured},
        "google_search": {"configured": GoogleSearchAdapter().is_configured},
        "unsplash": {"configured": UnsplashAdapter().is_configured},
    }
    all_configured = all(service["configured"] for service in services.values())

    return {
        "status": "healthy" if all_configured else "degraded",
        "services": services,
        **_app_info(),
    }
