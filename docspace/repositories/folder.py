"""Folder repository for database operations."""

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from docspace.db.models import FolderRecord
from docspace.repositories.base import BaseRepository
from docspace.settings import PATH_SEPARATOR


class FolderRepository(BaseRepository[FolderRecord]):
    """Repository for folder rows."""

    def __init__(self):
        super().__init__(FolderRecord)

    def get_by_path(self, db: Session, path: str) -> FolderRecord | None:
        """Get the folder with this exact path."""
        stmt = select(FolderRecord).where(FolderRecord.path == path)
        return db.execute(stmt).scalar_one_or_none()

    def _parent_clause(self, parent_path: str | None):
        if parent_path is None:
            return FolderRecord.parent_path.is_(None)
        return FolderRecord.parent_path == parent_path

    def list_by_parent(self, db: Session, parent_path: str | None) -> list[FolderRecord]:
        """Direct children of a parent path (roots when None).

        Args:
            db: Database session
            parent_path: Parent folder path, or None for root folders

        Returns:
            Child folders ordered by sort order
        """
        stmt = (
            select(FolderRecord)
            .where(self._parent_clause(parent_path))
            .order_by(FolderRecord.order.asc(), FolderRecord.name.asc())
        )
        return list(db.execute(stmt).scalars().all())

    def count_by_parent(self, db: Session, parent_path: str | None) -> int:
        """Number of direct children of a parent path."""
        return self.count(db, self._parent_clause(parent_path))

    def list_under(self, db: Session, prefix: str) -> list[FolderRecord]:
        """Folders at prefix or anywhere below it."""
        stmt = select(FolderRecord).where(
            or_(
                FolderRecord.path == prefix,
                FolderRecord.path.startswith(prefix + PATH_SEPARATOR, autoescape=True),
            )
        )
        return list(db.execute(stmt).scalars().all())


folder_repository = FolderRepository()
