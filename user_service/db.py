"""Database pool construction, request access, and health checks.

The pool is an ``AsyncEngine`` created once per application (see ``main.lifespan``)
and passed explicitly into every repository call. Nothing here keeps a
module-level engine.
"""

import asyncio

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from .config import Settings
from .logger import logger


# ==================== Pool Setup ====================

def create_pool(config: Settings) -> AsyncEngine:
    """Build the connection pool described by the settings."""
    pool = create_async_engine(
        config.get_async_db_url(),
        echo=False,
        pool_size=config.DB_POOL_SIZE,
        max_overflow=config.DB_MAX_OVERFLOW,
        pool_timeout=config.DB_POOL_TIMEOUT,
        pool_recycle=config.DB_POOL_RECYCLE,
        pool_pre_ping=True,
        connect_args={
            "timeout": config.DB_CONNECT_TIMEOUT,
            "command_timeout": config.DB_QUERY_TIMEOUT,
        },
    )
    logger.info(
        f"Database pool configured: pool_size={config.DB_POOL_SIZE}, "
        f"max_overflow={config.DB_MAX_OVERFLOW}, timeout={config.DB_POOL_TIMEOUT}s"
    )
    return pool


def get_db_pool(request: Request) -> AsyncEngine:
    """FastAPI dependency returning the pool owned by the running application."""
    return request.app.state.db_pool


# ==================== Resilience ====================

_RETRYABLE_MARKERS = (
    "connection",
    "timeout",
    "database is locked",
    "server closed the connection",
    "connection reset",
)


async def retry_on_db_error(func, max_retries: int = 3, base_delay: float = 0.5):
    """Run an async callable, retrying connection-class failures with exponential backoff.

    Constraint violations and other non-transient errors are raised on the first
    attempt. Repository calls do not go through this; only health checks do.
    """
    for attempt in range(max_retries):
        try:
            return await func()
        except (OperationalError, DBAPIError) as e:
            error_msg = str(e).lower()
            is_retryable = any(marker in error_msg for marker in _RETRYABLE_MARKERS)

            if not is_retryable or attempt == max_retries - 1:
                logger.error(
                    f"Database operation failed (attempt {attempt + 1}/{max_retries}): {e}",
                    exc_info=True
                )
                raise

            delay = base_delay * (2 ** attempt)
            logger.warning(
                f"Database error on attempt {attempt + 1}/{max_retries}, "
                f"retrying in {delay}s: {e}"
            )
            await asyncio.sleep(delay)


async def check_db_connection(pool: AsyncEngine, max_retries: int = 2, base_delay: float = 0.1) -> bool:
    """Return True if the pool can run a trivial query."""
    async def _check():
        async with pool.connect() as conn:
            await conn.execute(text("SELECT 1"))

    try:
        await retry_on_db_error(_check, max_retries=max_retries, base_delay=base_delay)
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


# ==================== Cleanup ====================

async def dispose_pool(pool: AsyncEngine) -> None:
    """Close every pooled connection. Called on application shutdown."""
    logger.info("Disposing database pool")
    try:
        await pool.dispose()
        logger.info("Database connections closed successfully")
    except Exception as e:
        logger.error(f"Error disposing database pool: {e}", exc_info=True)
