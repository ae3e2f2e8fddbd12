"""Repository layer for database access.

Repositories wrap SQLAlchemy queries for each table; the SQL namespace
store composes them inside one session per operation.

Usage:
    from docspace.repositories import folder_repository

    folder = folder_repository.get_by_path(db, "A/B")
"""

from docspace.repositories.file import FileRepository, file_repository
from docspace.repositories.folder import FolderRepository, folder_repository

__all__ = [
    "FolderRepository",
    "folder_repository",
    "FileRepository",
    "file_repository",
]
