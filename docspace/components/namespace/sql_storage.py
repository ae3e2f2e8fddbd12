"""SQL-backed namespace store.

Persists folders and files in the ns_folders / ns_files tables through the
repository layer. Every adapter call runs in its own session scope, so a
single-record write commits on its own and a cascade is a series of
independent commits.

SQLite connections are shared across threads (StaticPool for in-memory
databases), so calls are serialized with a lock for that dialect. MySQL
relies on the connection pool instead.
"""

import threading
from contextlib import contextmanager, nullcontext

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from docspace.components.namespace.errors import FolderAlreadyExists, StoreUnavailable
from docspace.components.namespace.models import File, Folder
from docspace.db.models import FileRecord, FolderRecord
from docspace.db.mysql import session_scope
from docspace.repositories import file_repository, folder_repository
from docspace.utils import get_logger

logger = get_logger(__name__)


def _folder_from_row(row: FolderRecord) -> Folder:
    return Folder(
        id=row.id,
        name=row.name,
        path=row.path,
        depth=row.depth,
        parentPath=row.parent_path,
        order=row.order,
        createdAt=row.created_at,
        createdBy=row.created_by,
        updatedAt=row.updated_at,
        updatedBy=row.updated_by,
    )


def _folder_to_row(folder: Folder) -> dict:
    return {
        "id": folder.id,
        "name": folder.name,
        "path": folder.path,
        "depth": folder.depth,
        "parent_path": folder.parentPath,
        "order": folder.order,
        "created_at": folder.createdAt,
        "created_by": folder.createdBy,
        "updated_at": folder.updatedAt,
        "updated_by": folder.updatedBy,
    }


def _file_from_row(row: FileRecord) -> File:
    return File(
        id=row.id,
        name=row.name,
        mediaType=row.media_type,
        sizeBytes=row.size_bytes,
        containerPath=row.container_path,
        storageKey=row.storage_key,
        url=row.url,
        uploadedAt=row.uploaded_at,
        uploadedBy=row.uploaded_by,
    )


def _file_to_row(file: File) -> dict:
    return {
        "id": file.id,
        "name": file.name,
        "media_type": file.mediaType,
        "size_bytes": file.sizeBytes,
        "container_path": file.containerPath,
        "storage_key": file.storageKey,
        "url": file.url,
        "uploaded_at": file.uploadedAt,
        "uploaded_by": file.uploadedBy,
    }


class NamespaceSqlStorage:
    """SQLAlchemy-backed storage for folders and files."""

    def __init__(self, session_factory: sessionmaker | None = None):
        """Initialize with optional session factory (for testing)."""
        if session_factory is None:
            from docspace.db.mysql import get_session_factory

            session_factory = get_session_factory()
        self._session_factory = session_factory

        bind = session_factory.kw.get("bind")
        is_sqlite = bind is not None and bind.dialect.name == "sqlite"
        self._lock = threading.RLock() if is_sqlite else None

    @contextmanager
    def _session(self, action: str):
        """Session scope that translates driver failures into StoreUnavailable."""
        with self._lock if self._lock is not None else nullcontext():
            try:
                with session_scope(self._session_factory) as db:
                    yield db
            except IntegrityError:
                raise
            except SQLAlchemyError as e:
                logger.error(f"SQL {action} failed: {e}")
                raise StoreUnavailable(f"SQL {action} failed: {e}") from e

    # Folder operations
    def insert_folder(self, folder: Folder) -> None:
        """Insert a new folder; its path must be free."""
        try:
            with self._session("insert folder") as db:
                if folder_repository.get_by_path(db, folder.path) is not None:
                    raise FolderAlreadyExists(folder.path)
                folder_repository.create(db, _folder_to_row(folder))
        except IntegrityError as e:
            logger.warning(f"Folder path conflict on insert: {folder.path}")
            raise FolderAlreadyExists(folder.path) from e

    def save_folder(self, folder: Folder) -> None:
        """Replace a folder record."""
        try:
            with self._session("save folder") as db:
                holder = folder_repository.get_by_path(db, folder.path)
                if holder is not None and holder.id != folder.id:
                    raise FolderAlreadyExists(folder.path)
                row = folder_repository.get_by_id(db, folder.id)
                if row is None:
                    folder_repository.create(db, _folder_to_row(folder))
                else:
                    folder_repository.update(db, row, _folder_to_row(folder))
        except IntegrityError as e:
            logger.warning(f"Folder path conflict on save: {folder.path}")
            raise FolderAlreadyExists(folder.path) from e

    def get_folder(self, folder_id: str) -> Folder | None:
        """Get a folder by ID."""
        with self._session("get folder") as db:
            row = folder_repository.get_by_id(db, folder_id)
            return _folder_from_row(row) if row else None

    def get_folder_by_path(self, path: str) -> Folder | None:
        """Get the folder with this exact path."""
        with self._session("get folder by path") as db:
            row = folder_repository.get_by_path(db, path)
            return _folder_from_row(row) if row else None

    def list_child_folders(self, parent_path: str | None) -> list[Folder]:
        """Folders whose parentPath equals parent_path (roots when None)."""
        with self._session("list child folders") as db:
            return [_folder_from_row(r) for r in folder_repository.list_by_parent(db, parent_path)]

    def count_child_folders(self, parent_path: str | None) -> int:
        """Number of folders whose parentPath equals parent_path."""
        with self._session("count child folders") as db:
            return folder_repository.count_by_parent(db, parent_path)

    def list_folders_under(self, prefix: str) -> list[Folder]:
        """Folders at prefix or below it."""
        with self._session("list folders under prefix") as db:
            return [_folder_from_row(r) for r in folder_repository.list_under(db, prefix)]

    def list_folders(self) -> list[Folder]:
        """List all folders, sorted by path."""
        with self._session("list folders") as db:
            rows = folder_repository.get_all(db)
            return sorted((_folder_from_row(r) for r in rows), key=lambda f: f.path)

    def delete_folder(self, folder_id: str) -> bool:
        """Delete a folder. Returns True if deleted, False if not found."""
        with self._session("delete folder") as db:
            return folder_repository.delete(db, folder_id)

    # File operations
    def insert_file(self, file: File) -> None:
        """Insert a new file record; a duplicate id is reported as StoreUnavailable."""
        try:
            with self._session("insert file") as db:
                file_repository.create(db, _file_to_row(file))
        except IntegrityError as e:
            logger.error(f"File insert rejected for {file.id}: {e}")
            raise StoreUnavailable(f"File insert rejected: {file.id}") from e

    def save_file(self, file: File) -> None:
        """Replace a file record."""
        with self._session("save file") as db:
            row = file_repository.get_by_id(db, file.id)
            if row is None:
                file_repository.create(db, _file_to_row(file))
            else:
                file_repository.update(db, row, _file_to_row(file))

    def get_file(self, file_id: str) -> File | None:
        """Get a file by ID."""
        with self._session("get file") as db:
            row = file_repository.get_by_id(db, file_id)
            return _file_from_row(row) if row else None

    def list_files_in(self, container_path: str) -> list[File]:
        """Files whose containerPath equals container_path."""
        with self._session("list files") as db:
            return [_file_from_row(r) for r in file_repository.list_by_container(db, container_path)]

    def count_files_in(self, container_path: str) -> int:
        """Number of files whose containerPath equals container_path."""
        with self._session("count files") as db:
            return file_repository.count_by_container(db, container_path)

    def list_files_under(self, prefix: str) -> list[File]:
        """Files whose container is prefix or below it."""
        with self._session("list files under prefix") as db:
            return [_file_from_row(r) for r in file_repository.list_under(db, prefix)]

    def list_files(self) -> list[File]:
        """List all files, oldest upload first."""
        with self._session("list all files") as db:
            rows = file_repository.get_all(db)
            return sorted((_file_from_row(r) for r in rows), key=lambda f: f.uploadedAt)

    def delete_file(self, file_id: str) -> bool:
        """Delete a file record. Returns True if deleted, False if not found."""
        with self._session("delete file") as db:
            return file_repository.delete(db, file_id)

    # Utility
    def clear_all(self) -> None:
        """Clear all data (useful for testing)."""
        with self._session("clear") as db:
            file_repository.delete_all(db)
            folder_repository.delete_all(db)
        logger.warning("Cleared all namespace tables")
