"""Unified storage provider for the namespace store.

Selects the store adapter from settings.storage_backend:
- memory: in-process store (local-dev, single instance only)
- redis: shared Redis documents (multi-instance)
- sql: SQLAlchemy tables (SQLite locally, MySQL in production)

Usage:
    from docspace.components.namespace.storage_provider import get_namespace_storage

    storage = get_namespace_storage()
    storage.insert_folder(folder)
    folder = storage.get_folder_by_path("A/B")
"""

from typing import Protocol

from docspace.components.namespace.models import File, Folder
from docspace.settings import settings
from docspace.utils import get_logger

logger = get_logger(__name__)


class NamespaceStorageProtocol(Protocol):
    """Protocol defining the namespace store interface.

    Single-record writes are atomic per record; nothing spans records.
    """

    def insert_folder(self, folder: Folder) -> None: ...
    def save_folder(self, folder: Folder) -> None: ...
    def get_folder(self, folder_id: str) -> Folder | None: ...
    def get_folder_by_path(self, path: str) -> Folder | None: ...
    def list_child_folders(self, parent_path: str | None) -> list[Folder]: ...
    def count_child_folders(self, parent_path: str | None) -> int: ...
    def list_folders_under(self, prefix: str) -> list[Folder]: ...
    def list_folders(self) -> list[Folder]: ...
    def delete_folder(self, folder_id: str) -> bool: ...

    def insert_file(self, file: File) -> None: ...
    def save_file(self, file: File) -> None: ...
    def get_file(self, file_id: str) -> File | None: ...
    def list_files_in(self, container_path: str) -> list[File]: ...
    def count_files_in(self, container_path: str) -> int: ...
    def list_files_under(self, prefix: str) -> list[File]: ...
    def list_files(self) -> list[File]: ...
    def delete_file(self, file_id: str) -> bool: ...

    def clear_all(self) -> None: ...


# Singleton storage instance
_namespace_storage: NamespaceStorageProtocol | None = None
_storage_type: str | None = None


def get_namespace_storage() -> NamespaceStorageProtocol:
    """Get the namespace store configured by settings.storage_backend."""
    global _namespace_storage, _storage_type

    if _namespace_storage is not None:
        return _namespace_storage

    backend = settings.storage_backend
    if backend == "redis":
        from docspace.components.namespace.redis_storage import get_namespace_redis_storage

        _namespace_storage = get_namespace_redis_storage()
        logger.info("NamespaceStorage: Using Redis storage (multi-instance safe)")
    elif backend == "sql":
        from docspace.components.namespace.sql_storage import NamespaceSqlStorage
        from docspace.db.mysql import init_db

        init_db()
        _namespace_storage = NamespaceSqlStorage()
        logger.info("NamespaceStorage: Using SQL storage")
    else:
        from docspace.components.namespace.storage import namespace_memory_storage

        _namespace_storage = namespace_memory_storage
        logger.info("NamespaceStorage: Using in-memory storage (single instance only)")

    _storage_type = backend
    return _namespace_storage


def get_storage_type() -> str:
    """Get the current storage type ('memory', 'redis' or 'sql')."""
    if _storage_type is None:
        get_namespace_storage()  # Initialize storage
    return _storage_type or "unknown"


def reset_namespace_storage() -> None:
    """Reset the storage singleton (for testing)."""
    global _namespace_storage, _storage_type
    _namespace_storage = None
    _storage_type = None
