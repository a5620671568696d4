"""Query performance monitoring for the KiesCompass API.

Hooks SQLAlchemy cursor events to log statements that exceed a configurable
duration so slow catalog filters or favorite lookups show up in the logs.
"""

import logging
import time
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import Pool

logger = logging.getLogger(__name__)

_MAX_LOGGED_STATEMENT = 500


def _truncate(statement: str) -> str:
    if len(statement) <= _MAX_LOGGED_STATEMENT:
        return statement
    return statement[:_MAX_LOGGED_STATEMENT] + "..."


def setup_query_monitoring(
    engine: Any,
    slow_query_threshold: float = 0.1,
    log_pool_stats: bool = True,
) -> None:
    """Log a warning for every query slower than ``slow_query_threshold`` seconds.

    Args:
        engine: Async engine (anything exposing ``sync_engine``) to monitor
        slow_query_threshold: Log queries slower than this many seconds
        log_pool_stats: Also log connection pool checkouts at DEBUG level
    """
    if not hasattr(engine, "sync_engine"):
        logger.warning("Engine does not have sync_engine attribute, skipping query monitoring")
        return

    sync_engine: Engine = engine.sync_engine

    @event.listens_for(sync_engine, "before_cursor_execute")
    def receive_before_cursor_execute(
        conn: Any,  # SQLAlchemy Connection
        cursor: Any,  # DBAPI cursor - type varies by driver
        statement: str,
        parameters: Any,
        context: Any,
        executemany: bool,
    ) -> None:
        """Record query start time."""
        conn.info.setdefault("query_start_time", []).append(time.perf_counter())

    @event.listens_for(sync_engine, "after_cursor_execute")
    def receive_after_cursor_execute(
        conn: Any,
        cursor: Any,
        statement: str,
        parameters: Any,
        context: Any,
        executemany: bool,
    ) -> None:
        """Log slow queries after execution."""
        started = conn.info.get("query_start_time")
        if not started:
            return
        total = time.perf_counter() - started.pop()

        if total > slow_query_threshold:
            logger.warning(
                "Slow query detected (%.3fs): %s",
                total,
                _truncate(statement),
                extra={
                    "duration_seconds": total,
                    "threshold_seconds": slow_query_threshold,
                },
            )

    if log_pool_stats:

        @event.listens_for(Pool, "checkout")
        def receive_checkout(
            dbapi_conn: Any,
            connection_record: Any,
            connection_proxy: Any,
        ) -> None:
            """Log connection pool checkout."""
            logger.debug("Connection checked out from pool")

    logger.info(
        "Query performance monitoring enabled (slow query threshold: %ss, pool stats logging: %s)",
        slow_query_threshold,
        log_pool_stats,
    )
