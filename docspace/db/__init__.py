"""Database module for docspace.

Backends for the namespace store:
- Redis: shared document store (JSON documents + index sets)
- SQL: SQLite for local development, MySQL in production
"""

from docspace.db.models import Base, FileRecord, FolderRecord
from docspace.db.mysql import (
    check_connection,
    close_db,
    create_db_engine,
    create_session_factory,
    init_db,
    session_scope,
)
from docspace.db.redis_cache import RedisCache, get_redis_cache
from docspace.db.redis_db import RedisKeyPrefix

__all__ = [
    # Redis
    "RedisKeyPrefix",
    "RedisCache",
    "get_redis_cache",
    # SQL - Connection
    "create_db_engine",
    "create_session_factory",
    "session_scope",
    "init_db",
    "close_db",
    "check_connection",
    # SQL - Models
    "Base",
    "FolderRecord",
    "FileRecord",
]
