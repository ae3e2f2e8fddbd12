"""Namespace data models.

Defines the entities of the folder/file tree:
- Folder: flat record carrying a materialized path, parent path, depth and
  sibling order
- File: record attached to a folder by its containerPath
- BreadcrumbItem, Listing, SearchResult, RepairReport: operation results

Records are strict: unknown fields are rejected so malformed documents
coming back from a store fail loudly at the adapter boundary.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class StrictRecord(BaseModel):
    """Base for persisted records."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class Folder(StrictRecord):
    """Folder record.

    path == join(parentPath, name) and depth == depth_of(path) hold for
    every committed folder; a folder caught mid-cascade may briefly carry
    a stale prefix.
    """

    id: str
    name: str = Field(min_length=1)
    path: str = Field(min_length=1)
    depth: int = Field(ge=1)
    parentPath: str | None = None
    order: int = Field(ge=0)
    createdAt: int
    createdBy: str
    updatedAt: int | None = None
    updatedBy: str | None = None


class File(StrictRecord):
    """File record.

    containerPath is the path of the holding folder, or ROOT_CONTAINER for
    files stored at the top level.
    """

    id: str
    name: str = Field(min_length=1)
    mediaType: str = ""  # Lower-cased extension, "" when none
    sizeBytes: int = Field(ge=0)
    containerPath: str = Field(min_length=1)
    storageKey: str
    url: str = ""
    uploadedAt: int
    uploadedBy: str


class FileSortField(str, Enum):
    """Sortable file columns."""

    name = "name"
    mediaType = "mediaType"
    sizeBytes = "sizeBytes"
    uploadedAt = "uploadedAt"


class SortDirection(str, Enum):
    """Sort direction."""

    asc = "asc"
    desc = "desc"


class BreadcrumbItem(BaseModel):
    """One breadcrumb entry; the synthetic root has path ""."""

    name: str
    path: str


class Listing(BaseModel):
    """Direct children of a folder (or of the root)."""

    folders: list[Folder] = Field(default_factory=list)
    files: list[File] = Field(default_factory=list)


class SearchResult(BaseModel):
    """Result of a flat file-name search.

    searching is False for an empty query, which callers render as
    "not searching" rather than "no matches".
    """

    searching: bool
    query: str = ""
    files: list[File] = Field(default_factory=list)


class RepairReport(BaseModel):
    """Writes performed by a reconciliation pass."""

    rootPath: str
    foldersUpdated: int = 0
    filesUpdated: int = 0

    @property
    def writes(self) -> int:
        return self.foldersUpdated + self.filesUpdated


# Request models


class CreateFileRequest(BaseModel):
    """Metadata handed over by the upload collaborator once bytes are stored."""

    containerPath: str | None = None  # None or "" means the root container
    name: str
    sizeBytes: int = Field(ge=0)
    storageKey: str = Field(min_length=1)
    url: str = ""
