"""Generic row access shared by the folder and file repositories.

Repositories flush but never commit; the caller's session scope decides.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from docspace.db.models import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Row-level CRUD for one mapped table."""

    def __init__(self, model: type[ModelType]):
        self.model = model

    def get_by_id(self, db: Session, id: str) -> ModelType | None:
        return db.get(self.model, id)

    def get_all(self, db: Session) -> list[ModelType]:
        return list(db.scalars(select(self.model)))

    def create(self, db: Session, values: dict[str, Any]) -> ModelType:
        """Insert a row built from column values and flush it."""
        row = self.model(**values)
        db.add(row)
        db.flush()
        return row

    def update(self, db: Session, row: ModelType, values: dict[str, Any]) -> ModelType:
        """Copy known columns from values onto row and flush it.

        Keys that are not attributes of the model are ignored.
        """
        for column, value in values.items():
            if hasattr(row, column):
                setattr(row, column, value)
        db.flush()
        return row

    def delete(self, db: Session, id: str) -> bool:
        """Delete by primary key; False when no row matched."""
        result = db.execute(delete(self.model).where(self.model.id == id))
        return result.rowcount > 0

    def count(self, db: Session, *criteria) -> int:
        stmt = select(func.count()).select_from(self.model).where(*criteria)
        return db.scalar(stmt) or 0

    def delete_all(self, db: Session) -> None:
        db.execute(delete(self.model))
