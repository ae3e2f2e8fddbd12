"""Redis-backed namespace store.

Provides shared storage for multi-instance deployments:
- Folder documents with a unique path index and per-parent child sets
- File documents with per-container sets
- Lexicographic path indexes for prefix queries

Architecture (Single DB + Key Prefix Pattern):
- db=0 only, keys generated by RedisKeyPrefix
- every single-document write (document + its index entries) runs in one
  MULTI/EXEC pipeline; nothing spans more than one document

Index sets may briefly hold stale ids while a concurrent write is in flight,
so every read re-checks the loaded document against the query.
"""

import json
from collections.abc import Iterable
from contextlib import contextmanager
from typing import TypeVar

import pydantic
import redis

from docspace.components.namespace import paths
from docspace.components.namespace.errors import FolderAlreadyExists, MalformedRecord, StoreUnavailable
from docspace.components.namespace.models import File, Folder
from docspace.db.redis_cache import RedisCache, get_redis_cache
from docspace.db.redis_db import RedisKeyPrefix
from docspace.settings import PATH_SEPARATOR
from docspace.utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=pydantic.BaseModel)

# First character sorting after the separator; bounds a lex range to one prefix
_AFTER_SEPARATOR = chr(ord(PATH_SEPARATOR) + 1)


class NamespaceRedisStorage:
    """Redis-backed storage for the folder/file namespace.

    Designed for multi-instance deployments where all workers share the
    same Redis.
    """

    def __init__(self, cache: RedisCache | None = None):
        """Initialize with optional cache instance (for testing)."""
        self._cache = cache

    @property
    def cache(self) -> RedisCache:
        """Lazy initialization of Redis cache."""
        if self._cache is None:
            self._cache = get_redis_cache()
        return self._cache

    @property
    def client(self) -> redis.Redis:
        return self.cache.client

    @contextmanager
    def _guard(self, action: str):
        """Translate Redis failures into StoreUnavailable."""
        try:
            yield
        except redis.RedisError as e:
            logger.error(f"Redis {action} failed: {e}")
            raise StoreUnavailable(f"Redis {action} failed: {e}") from e

    # ==================== Decoding ====================

    def _decode(self, model: type[T], data: dict | None, key: str) -> T | None:
        if data is None:
            return None
        try:
            return model.model_validate(data)
        except pydantic.ValidationError as e:
            logger.error(f"Malformed {model.__name__} document at {key}: {e}")
            raise MalformedRecord(f"Malformed {model.__name__} document at {key}") from e

    def _load_folders(self, folder_ids: Iterable[str]) -> list[Folder]:
        keys = [RedisKeyPrefix.folder_key(fid) for fid in folder_ids]
        docs = self.cache.mget_json(keys)
        folders = [self._decode(Folder, doc, key) for key, doc in zip(keys, docs)]
        return [f for f in folders if f is not None]

    def _load_files(self, file_ids: Iterable[str]) -> list[File]:
        keys = [RedisKeyPrefix.file_key(fid) for fid in file_ids]
        docs = self.cache.mget_json(keys)
        files = [self._decode(File, doc, key) for key, doc in zip(keys, docs)]
        return [f for f in files if f is not None]

    def _paths_in_range(self, index_key: str, prefix: str) -> list[str]:
        """Members of a lex-sorted path index equal to prefix or below it."""
        below = self.client.zrangebylex(
            index_key,
            f"[{prefix}{PATH_SEPARATOR}",
            f"({prefix}{_AFTER_SEPARATOR}",
        )
        exact = self.client.zscore(index_key, prefix)
        return ([prefix] if exact is not None else []) + list(below)

    # ==================== Folder Operations ====================

    def _release_claim(self, path_key: str, folder_id: str) -> None:
        """Drop a path claim left by a failed write, if it is still ours."""
        try:
            if self.client.get(path_key) == folder_id:
                self.client.delete(path_key)
        except redis.RedisError as e:
            logger.error(f"Path claim {path_key} for {folder_id} not released: {e}")

    def insert_folder(self, folder: Folder) -> None:
        """Insert a new folder; its path must be free."""
        path_key = RedisKeyPrefix.folder_path_key(folder.path)
        with self._guard("insert folder"):
            claimed = self.client.set(path_key, folder.id, nx=True)
            if not claimed:
                raise FolderAlreadyExists(folder.path)

            try:
                pipe = self.client.pipeline(transaction=True)
                pipe.set(RedisKeyPrefix.folder_key(folder.id), json.dumps(folder.model_dump(mode="json")))
                pipe.sadd(RedisKeyPrefix.children_key(folder.parentPath), folder.id)
                pipe.sadd(RedisKeyPrefix.folder_index_key(), folder.id)
                pipe.zadd(RedisKeyPrefix.folder_paths_index_key(), {folder.path: 0})
                pipe.execute()
            except redis.RedisError:
                self._release_claim(path_key, folder.id)
                raise
        logger.debug(f"Inserted folder: {folder.id} ({folder.path})")

    def save_folder(self, folder: Folder) -> None:
        """Replace a folder record and move its index entries."""
        with self._guard("save folder"):
            previous = self.get_folder(folder.id)
            new_path_key = RedisKeyPrefix.folder_path_key(folder.path)

            claimed = False
            if previous is None or previous.path != folder.path:
                claimed = bool(self.client.set(new_path_key, folder.id, nx=True))
                if not claimed and self.client.get(new_path_key) != folder.id:
                    raise FolderAlreadyExists(folder.path)

            try:
                pipe = self.client.pipeline(transaction=True)
                pipe.set(RedisKeyPrefix.folder_key(folder.id), json.dumps(folder.model_dump(mode="json")))
                if previous is not None:
                    if previous.path != folder.path:
                        old_path_key = RedisKeyPrefix.folder_path_key(previous.path)
                        if self.client.get(old_path_key) == folder.id:
                            pipe.delete(old_path_key)
                        pipe.zrem(RedisKeyPrefix.folder_paths_index_key(), previous.path)
                    if previous.parentPath != folder.parentPath:
                        pipe.srem(RedisKeyPrefix.children_key(previous.parentPath), folder.id)
                pipe.sadd(RedisKeyPrefix.children_key(folder.parentPath), folder.id)
                pipe.sadd(RedisKeyPrefix.folder_index_key(), folder.id)
                pipe.zadd(RedisKeyPrefix.folder_paths_index_key(), {folder.path: 0})
                pipe.execute()
            except redis.RedisError:
                if claimed:
                    self._release_claim(new_path_key, folder.id)
                raise
        logger.debug(f"Saved folder: {folder.id} ({folder.path})")

    def get_folder(self, folder_id: str) -> Folder | None:
        """Get a folder by ID."""
        key = RedisKeyPrefix.folder_key(folder_id)
        with self._guard("get folder"):
            return self._decode(Folder, self.cache.get_json(key), key)

    def get_folder_by_path(self, path: str) -> Folder | None:
        """Get the folder with this exact path."""
        with self._guard("get folder by path"):
            folder_id = self.client.get(RedisKeyPrefix.folder_path_key(path))
            if folder_id is None:
                return None
            folder = self.get_folder(folder_id)
        if folder is None or folder.path != path:
            return None
        return folder

    def list_child_folders(self, parent_path: str | None) -> list[Folder]:
        """Folders whose parentPath equals parent_path (roots when None)."""
        with self._guard("list child folders"):
            folder_ids = self.client.smembers(RedisKeyPrefix.children_key(parent_path))
            folders = self._load_folders(folder_ids)
        return [f for f in folders if f.parentPath == parent_path]

    def count_child_folders(self, parent_path: str | None) -> int:
        """Number of folders whose parentPath equals parent_path."""
        return len(self.list_child_folders(parent_path))

    def list_folders_under(self, prefix: str) -> list[Folder]:
        """Folders at prefix or below it."""
        with self._guard("list folders under prefix"):
            folder_paths = self._paths_in_range(RedisKeyPrefix.folder_paths_index_key(), prefix)
            if not folder_paths:
                return []
            folder_ids = self.client.mget([RedisKeyPrefix.folder_path_key(p) for p in folder_paths])
            folders = self._load_folders(fid for fid in folder_ids if fid is not None)
        return [f for f in folders if paths.is_descendant(f.path, prefix, inclusive=True)]

    def list_folders(self) -> list[Folder]:
        """List all folders, sorted by path."""
        with self._guard("list folders"):
            folder_ids = self.client.smembers(RedisKeyPrefix.folder_index_key())
            folders = self._load_folders(folder_ids)
        return sorted(folders, key=lambda f: f.path)

    def delete_folder(self, folder_id: str) -> bool:
        """Delete a folder. Returns True if deleted, False if not found."""
        with self._guard("delete folder"):
            folder = self.get_folder(folder_id)
            if folder is None:
                return False
            path_key = RedisKeyPrefix.folder_path_key(folder.path)
            pipe = self.client.pipeline(transaction=True)
            pipe.delete(RedisKeyPrefix.folder_key(folder_id))
            if self.client.get(path_key) == folder_id:
                pipe.delete(path_key)
                pipe.zrem(RedisKeyPrefix.folder_paths_index_key(), folder.path)
            pipe.srem(RedisKeyPrefix.children_key(folder.parentPath), folder_id)
            pipe.srem(RedisKeyPrefix.folder_index_key(), folder_id)
            pipe.execute()
        logger.debug(f"Deleted folder: {folder_id} ({folder.path})")
        return True

    # ==================== File Operations ====================

    def _write_file(self, file: File, previous: File | None) -> None:
        pipe = self.client.pipeline(transaction=True)
        pipe.set(RedisKeyPrefix.file_key(file.id), json.dumps(file.model_dump(mode="json")))
        if previous is not None and previous.containerPath != file.containerPath:
            pipe.srem(RedisKeyPrefix.container_key(previous.containerPath), file.id)
        pipe.sadd(RedisKeyPrefix.container_key(file.containerPath), file.id)
        pipe.sadd(RedisKeyPrefix.file_index_key(), file.id)
        pipe.zadd(RedisKeyPrefix.containers_index_key(), {file.containerPath: 0})
        pipe.execute()

    def insert_file(self, file: File) -> None:
        """Insert a new file record."""
        with self._guard("insert file"):
            self._write_file(file, None)
        logger.debug(f"Inserted file: {file.id} in {file.containerPath}")

    def save_file(self, file: File) -> None:
        """Replace a file record and move its container entry."""
        with self._guard("save file"):
            self._write_file(file, self.get_file(file.id))
        logger.debug(f"Saved file: {file.id} in {file.containerPath}")

    def get_file(self, file_id: str) -> File | None:
        """Get a file by ID."""
        key = RedisKeyPrefix.file_key(file_id)
        with self._guard("get file"):
            return self._decode(File, self.cache.get_json(key), key)

    def list_files_in(self, container_path: str) -> list[File]:
        """Files whose containerPath equals container_path."""
        with self._guard("list files"):
            file_ids = self.client.smembers(RedisKeyPrefix.container_key(container_path))
            files = self._load_files(file_ids)
        return [f for f in files if f.containerPath == container_path]

    def count_files_in(self, container_path: str) -> int:
        """Number of files whose containerPath equals container_path."""
        return len(self.list_files_in(container_path))

    def list_files_under(self, prefix: str) -> list[File]:
        """Files whose container is prefix or below it."""
        with self._guard("list files under prefix"):
            containers = self._paths_in_range(RedisKeyPrefix.containers_index_key(), prefix)
            file_ids: set[str] = set()
            for container in containers:
                file_ids.update(self.client.smembers(RedisKeyPrefix.container_key(container)))
            files = self._load_files(file_ids)
        return [f for f in files if paths.is_descendant(f.containerPath, prefix, inclusive=True)]

    def list_files(self) -> list[File]:
        """List all files, oldest upload first."""
        with self._guard("list all files"):
            file_ids = self.client.smembers(RedisKeyPrefix.file_index_key())
            files = self._load_files(file_ids)
        return sorted(files, key=lambda f: f.uploadedAt)

    def delete_file(self, file_id: str) -> bool:
        """Delete a file record. Returns True if deleted, False if not found."""
        with self._guard("delete file"):
            file = self.get_file(file_id)
            if file is None:
                return False
            pipe = self.client.pipeline(transaction=True)
            pipe.delete(RedisKeyPrefix.file_key(file_id))
            pipe.srem(RedisKeyPrefix.container_key(file.containerPath), file_id)
            pipe.srem(RedisKeyPrefix.file_index_key(), file_id)
            pipe.execute()
        logger.debug(f"Deleted file: {file_id}")
        return True

    # ==================== Utility ====================

    def clear_all(self) -> None:
        """Clear all namespace data (useful for testing)."""
        with self._guard("clear"):
            keys = list(self.client.scan_iter(match="docspace:ns:*"))
            if keys:
                self.client.delete(*keys)
        logger.warning("Cleared all namespace data from Redis")


# Singleton instance (lazy initialized)
_namespace_redis_storage: NamespaceRedisStorage | None = None


def get_namespace_redis_storage() -> NamespaceRedisStorage:
    """Get singleton instance of NamespaceRedisStorage."""
    global _namespace_redis_storage
    if _namespace_redis_storage is None:
        _namespace_redis_storage = NamespaceRedisStorage()
    return _namespace_redis_storage
