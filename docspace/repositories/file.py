"""File repository for database operations."""

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from docspace.db.models import FileRecord
from docspace.repositories.base import BaseRepository
from docspace.settings import PATH_SEPARATOR


class FileRepository(BaseRepository[FileRecord]):
    """Repository for file rows."""

    def __init__(self):
        super().__init__(FileRecord)

    def list_by_container(self, db: Session, container_path: str) -> list[FileRecord]:
        """Files held directly by a container path."""
        stmt = (
            select(FileRecord)
            .where(FileRecord.container_path == container_path)
            .order_by(FileRecord.uploaded_at.asc())
        )
        return list(db.execute(stmt).scalars().all())

    def count_by_container(self, db: Session, container_path: str) -> int:
        """Number of files held directly by a container path."""
        return self.count(db, FileRecord.container_path == container_path)

    def list_under(self, db: Session, prefix: str) -> list[FileRecord]:
        """Files whose container is prefix or anywhere below it."""
        stmt = select(FileRecord).where(
            or_(
                FileRecord.container_path == prefix,
                FileRecord.container_path.startswith(prefix + PATH_SEPARATOR, autoescape=True),
            )
        )
        return list(db.execute(stmt).scalars().all())


file_repository = FileRepository()
