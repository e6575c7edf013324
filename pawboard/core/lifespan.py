"""Process startup and shutdown."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import text

from pawboard.core.config import settings
from pawboard.db.session import get_engine

logger = logging.getLogger(__name__)


async def verify_database_connection() -> None:
    """Round-trip a trivial query so a bad DATABASE_URL fails at boot, not on first request."""
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        raise RuntimeError(f"Failed to connect to database: {e}") from e


def _log_scoring_policy() -> None:
    thresholds = settings.scoring.moderation
    logger.info(
        "Moderation thresholds loaded",
        extra={
            "spam_block": thresholds.spam_block,
            "toxicity_block": thresholds.toxicity_block,
            "duplicate_threshold": settings.scoring.duplicate.duplicate_threshold,
        },
    )


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    try:
        # Tests create their own schema against SQLite; there is nothing to probe.
        if settings.environment != "test":
            await verify_database_connection()
            logger.info("Database connection verified", extra={"environment": settings.environment})
        _log_scoring_policy()
        yield
    finally:
        await get_engine().dispose()
