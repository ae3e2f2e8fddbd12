"""Namespace error taxonomy.

- ValidationError: rejected before any write (bad name, missing parent, cycle)
- NotFound: path or id does not exist
- FolderNotEmpty: delete refused, folder still has files or subfolders
- StoreUnavailable: transient backend failure, retryable for single writes
- PartialCascadeFailure: rename/move stopped partway through a subtree
- MalformedRecord: a stored document failed schema validation on read
"""


class NamespaceError(Exception):
    """Base class for all namespace engine errors."""


class ValidationError(NamespaceError, ValueError):
    """Raised when an operation is rejected before any write."""


class FolderAlreadyExists(ValidationError):
    """Raised when the target folder path is already taken."""

    def __init__(self, path: str):
        super().__init__(f"Folder already exists: {path}")
        self.path = path


class NotFound(NamespaceError, LookupError):
    """Raised when a folder or file cannot be found."""


class FolderNotEmpty(NamespaceError):
    """Raised when deleting a folder that still holds files or subfolders."""

    def __init__(self, path: str, file_count: int, folder_count: int):
        super().__init__(
            f"Folder not empty: {path} ({file_count} files, {folder_count} subfolders)"
        )
        self.path = path
        self.file_count = file_count
        self.folder_count = folder_count


class StoreUnavailable(NamespaceError):
    """Raised when the document or object store fails transiently."""


class MalformedRecord(NamespaceError):
    """Raised when a stored document does not match the record schema."""


class PartialCascadeFailure(NamespaceError):
    """Raised when a rename/move cascade fails after its first write.

    Attributes:
        old_path: Path of the cascade root before the operation
        new_path: Path the cascade root was being moved to
        stopped_at: Path (old prefix) of the subtree whose rewrite failed;
            resume_cascade(old_path, new_path) finishes the job, and
            repair_subtree(stopped_at, actor, old_path, new_path) repairs
            just that subtree
    """

    def __init__(self, old_path: str, new_path: str, stopped_at: str, cause: Exception | None = None):
        super().__init__(
            f"Cascade {old_path!r} -> {new_path!r} stopped at {stopped_at!r}"
            + (f": {cause}" if cause else "")
        )
        self.old_path = old_path
        self.new_path = new_path
        self.stopped_at = stopped_at
        self.cause = cause
