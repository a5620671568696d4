"""Backend warmup module to eliminate cold start delays.

Opens a pooled connection and runs one catalog query so connections and ORM
mappers are ready before the first request arrives.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from kiescompass.db.connection import begin_engine_transaction

logger = logging.getLogger(__name__)


async def warmup_database(
    resolve_db_type: Callable[[], str] | None = None,
    resolve_engine: Callable[[], AsyncEngine] | None = None,
) -> None:
    """Warm up the connection pool by executing a ping query.

    Failures are logged rather than raised; the first real request will
    surface a broken database through the regular error handlers.
    """
    try:
        if resolve_db_type is None:
            from kiescompass.db.connection import get_database_type as resolve_db_type

        if resolve_engine is None:
            from kiescompass.db.connection import get_engine as resolve_engine

        start = time.time()
        db_type = resolve_db_type()
        logger.debug("Database warmup target detected as %s", db_type)

        engine = resolve_engine()

        async with begin_engine_transaction(engine) as conn:
            await conn.execute(text("SELECT 1"))

        elapsed = (time.time() - start) * 1000
        logger.info(f"✓ Database connection warmed up ({elapsed:.0f}ms)")
    except Exception as e:
        logger.warning(f"Database warmup failed: {e}")


async def warmup_repository_queries() -> None:
    """Prime the catalog mappers with a single recommendation query."""
    from kiescompass.db.connection import get_session_context
    from kiescompass.db.repositories import VkmRepository

    try:
        start = time.time()

        async with get_session_context() as session:
            await VkmRepository(session).get_recommendations(None, 1)

        elapsed = (time.time() - start) * 1000
        logger.info(
            "✓ Repository warmup executed (%.0fms)",
            elapsed,
        )
    except Exception as e:
        logger.warning(f"Repository warmup failed: {e}")


async def warmup_all(
    resolve_db_type: Callable[[], str] | None = None,
    resolve_engine: Callable[[], AsyncEngine] | None = None,
) -> None:
    """Warm up all backend connections.

    Executes all warmup functions in sequence and logs total warmup time.
    """
    logger.info("=" * 60)
    logger.info("Warming up backend connections...")
    logger.info("=" * 60)

    start = time.time()

    await warmup_database(
        resolve_db_type=resolve_db_type,
        resolve_engine=resolve_engine,
    )
    await warmup_repository_queries()

    total_elapsed = (time.time() - start) * 1000
    logger.info("=" * 60)
    logger.info(f"✓ Backend warmup complete ({total_elapsed:.0f}ms)")
    logger.info("=" * 60)
