"""Thread-safe in-memory namespace store.

Provides storage for:
- Folders (with unique path and parent-path lookups)
- Files (with container-path lookups)

Records are copied on the way in and on the way out so callers never share
mutable state with the store.
"""

import threading

from docspace.components.namespace import paths
from docspace.components.namespace.errors import FolderAlreadyExists
from docspace.components.namespace.models import File, Folder


class NamespaceMemoryStorage:
    """Thread-safe in-memory storage for folders and files.

    Uses a reentrant lock (RLock) to ensure thread safety for all operations.
    Secondary path indexes are kept in step with every write.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._folders: dict[str, Folder] = {}
        self._folder_ids_by_path: dict[str, str] = {}
        self._files: dict[str, File] = {}

    # Folder operations
    def insert_folder(self, folder: Folder) -> None:
        """Insert a new folder; its path must be free."""
        with self._lock:
            if folder.path in self._folder_ids_by_path:
                raise FolderAlreadyExists(folder.path)
            self._folders[folder.id] = folder.model_copy(deep=True)
            self._folder_ids_by_path[folder.path] = folder.id

    def save_folder(self, folder: Folder) -> None:
        """Replace a folder record, moving its path index entry if needed."""
        with self._lock:
            holder = self._folder_ids_by_path.get(folder.path)
            if holder is not None and holder != folder.id:
                raise FolderAlreadyExists(folder.path)
            previous = self._folders.get(folder.id)
            if previous is not None and previous.path != folder.path:
                if self._folder_ids_by_path.get(previous.path) == folder.id:
                    del self._folder_ids_by_path[previous.path]
            self._folders[folder.id] = folder.model_copy(deep=True)
            self._folder_ids_by_path[folder.path] = folder.id

    def get_folder(self, folder_id: str) -> Folder | None:
        """Get a folder by ID."""
        with self._lock:
            folder = self._folders.get(folder_id)
            return folder.model_copy(deep=True) if folder else None

    def get_folder_by_path(self, path: str) -> Folder | None:
        """Get the folder with this exact path."""
        with self._lock:
            folder_id = self._folder_ids_by_path.get(path)
            if folder_id is None:
                return None
            return self.get_folder(folder_id)

    def list_child_folders(self, parent_path: str | None) -> list[Folder]:
        """Folders whose parentPath equals parent_path (roots when None)."""
        with self._lock:
            return [f.model_copy(deep=True) for f in self._folders.values() if f.parentPath == parent_path]

    def count_child_folders(self, parent_path: str | None) -> int:
        """Number of folders whose parentPath equals parent_path."""
        with self._lock:
            return sum(1 for f in self._folders.values() if f.parentPath == parent_path)

    def list_folders_under(self, prefix: str) -> list[Folder]:
        """Folders at prefix or below it."""
        with self._lock:
            return [
                f.model_copy(deep=True)
                for f in self._folders.values()
                if paths.is_descendant(f.path, prefix, inclusive=True)
            ]

    def list_folders(self) -> list[Folder]:
        """List all folders, sorted by path."""
        with self._lock:
            return sorted((f.model_copy(deep=True) for f in self._folders.values()), key=lambda f: f.path)

    def delete_folder(self, folder_id: str) -> bool:
        """Delete a folder. Returns True if deleted, False if not found."""
        with self._lock:
            folder = self._folders.pop(folder_id, None)
            if folder is None:
                return False
            if self._folder_ids_by_path.get(folder.path) == folder_id:
                del self._folder_ids_by_path[folder.path]
            return True

    # File operations
    def insert_file(self, file: File) -> None:
        """Insert a new file record."""
        with self._lock:
            self._files[file.id] = file.model_copy(deep=True)

    def save_file(self, file: File) -> None:
        """Replace a file record."""
        with self._lock:
            self._files[file.id] = file.model_copy(deep=True)

    def get_file(self, file_id: str) -> File | None:
        """Get a file by ID."""
        with self._lock:
            file = self._files.get(file_id)
            return file.model_copy(deep=True) if file else None

    def list_files_in(self, container_path: str) -> list[File]:
        """Files whose containerPath equals container_path."""
        with self._lock:
            return [f.model_copy(deep=True) for f in self._files.values() if f.containerPath == container_path]

    def count_files_in(self, container_path: str) -> int:
        """Number of files whose containerPath equals container_path."""
        with self._lock:
            return sum(1 for f in self._files.values() if f.containerPath == container_path)

    def list_files_under(self, prefix: str) -> list[File]:
        """Files whose container is prefix or below it."""
        with self._lock:
            return [
                f.model_copy(deep=True)
                for f in self._files.values()
                if paths.is_descendant(f.containerPath, prefix, inclusive=True)
            ]

    def list_files(self) -> list[File]:
        """List all files, oldest upload first."""
        with self._lock:
            return sorted((f.model_copy(deep=True) for f in self._files.values()), key=lambda f: f.uploadedAt)

    def delete_file(self, file_id: str) -> bool:
        """Delete a file record. Returns True if deleted, False if not found."""
        with self._lock:
            return self._files.pop(file_id, None) is not None

    # Utility
    def clear_all(self) -> None:
        """Clear all data (useful for testing)."""
        with self._lock:
            self._folders.clear()
            self._folder_ids_by_path.clear()
            self._files.clear()


# Singleton instance
namespace_memory_storage = NamespaceMemoryStorage()
