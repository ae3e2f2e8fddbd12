"""SQLAlchemy ORM models for the namespace store.

Tables mirror the flat document records: folders carry their materialized
path and parent path as plain strings, files carry their container path.
There are no foreign keys between them; the namespace engine keeps the
references consistent.
"""

from sqlalchemy import BigInteger, Column, Index, Integer, String

from docspace.settings import MAX_PATH_LENGTH
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class FolderRecord(Base):
    """Folder ("dossier") row."""

    __tablename__ = "ns_folders"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    path = Column(String(MAX_PATH_LENGTH), nullable=False, unique=True)
    depth = Column(Integer, nullable=False)
    parent_path = Column(String(MAX_PATH_LENGTH), nullable=True)
    order = Column("sort_order", Integer, nullable=False, default=0)
    created_at = Column(BigInteger, nullable=False)
    created_by = Column(String(255), nullable=False)
    updated_at = Column(BigInteger, nullable=True)
    updated_by = Column(String(255), nullable=True)

    __table_args__ = (Index("idx_ns_folders_parent_path", "parent_path"),)

    def __repr__(self) -> str:
        return f"<FolderRecord(id={self.id}, path={self.path})>"


class FileRecord(Base):
    """File ("fichier") row."""

    __tablename__ = "ns_files"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    media_type = Column(String(64), nullable=False, default="")
    size_bytes = Column(BigInteger, nullable=False, default=0)
    container_path = Column(String(MAX_PATH_LENGTH), nullable=False)
    storage_key = Column(String(2048), nullable=False)
    url = Column(String(4096), nullable=False, default="")
    uploaded_at = Column(BigInteger, nullable=False)
    uploaded_by = Column(String(255), nullable=False)

    __table_args__ = (
        Index("idx_ns_files_container_path", "container_path"),
        Index("idx_ns_files_uploaded_at", "uploaded_at"),
    )

    def __repr__(self) -> str:
        return f"<FileRecord(id={self.id}, name={self.name})>"
