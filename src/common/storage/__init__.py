"""
Storage Layer

PostgreSQL + pgvector connection management.
"""

from src.common.storage.client import (
    DATABASE_ERRORS,
    check_pool_health,
    close_pool,
    create_pool,
    get_connection,
)
from src.common.storage.config import StorageConfig

__all__ = [
    "DATABASE_ERRORS",
    "StorageConfig",
    "create_pool",
    "close_pool",
    "get_connection",
    "check_pool_health",
]
