"""
PostgreSQL Connection Pool Management

Async connection pooling using asyncpg. The pool is the only resource shared
across requests; everything else is request-scoped.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import asyncpg

if TYPE_CHECKING:
    from src.common.storage.config import StorageConfig

logger = logging.getLogger(__name__)

# Failures of a query or of the connection underneath it
DATABASE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)

PGVECTOR_VERSION_QUERY = "SELECT extversion FROM pg_extension WHERE extname = 'vector'"


async def create_pool(config: StorageConfig) -> asyncpg.Pool:
    """
    Create a connection pool from StorageConfig.

    Args:
        config: Storage configuration

    Returns:
        asyncpg connection pool
    """
    pool = await asyncpg.create_pool(
        config.dsn,
        min_size=config.pool_min,
        max_size=config.pool_max,
        command_timeout=config.command_timeout,
        max_inactive_connection_lifetime=config.max_inactive_lifetime,
    )
    logger.info(
        f"Connection pool ready ({config.host}:{config.port}/{config.name}, "
        f"min={config.pool_min}, max={config.pool_max})"
    )
    return pool


async def close_pool(pool: asyncpg.Pool | None) -> None:
    """Close the connection pool."""
    if pool is not None:
        await pool.close()


@asynccontextmanager
async def get_connection(pool: asyncpg.Pool) -> AsyncIterator[asyncpg.Connection]:
    """
    Scoped checkout of a pooled connection.

    The connection is released on every exit path, including exceptions
    raised inside the block.

    Usage:
        async with get_connection(pool) as conn:
            rows = await conn.fetch("SELECT 1")
    """
    async with pool.acquire() as conn:
        yield conn


async def check_pool_health(pool: asyncpg.Pool) -> dict[str, Any]:
    """
    Check that the datastore answers and has the pgvector extension.

    Returns:
        healthy, pgvector (installed extension version or None), and the
        pool's size, free, used and max_size
    """
    size = pool.get_size()
    free = pool.get_idle_size()

    healthy = True
    pgvector = None
    try:
        async with get_connection(pool) as conn:
            pgvector = await conn.fetchval(PGVECTOR_VERSION_QUERY)
    except DATABASE_ERRORS as e:
        logger.warning(f"Database health check failed: {e}")
        healthy = False

    return {
        "healthy": healthy,
        "pgvector": pgvector,
        "size": size,
        "free": free,
        "used": size - free,
        "max_size": pool.get_max_size(),
    }
