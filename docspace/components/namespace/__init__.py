"""Namespace Module.

Folder/file tree engine over stores that have no native directories.

Components:
- paths.py: Materialized path helpers
- models.py: Folder, File and result models
- errors.py: Error taxonomy
- storage.py / redis_storage.py / sql_storage.py: Store adapters
- storage_provider.py: Store selection by settings
- object_storage.py: Object store for file bytes
- service.py: NamespaceService (create, rename/move cascade, delete, listing)
- search.py: SearchIndexView (flat file-name search)

Usage:
    from docspace.components.namespace import (
        NamespaceService,
        SearchIndexView,
    )

    service = NamespaceService()
    a = service.create_folder(None, "A", actor="alice")
    service.create_folder("A", "B", actor="alice")
    service.rename_folder(a, "A2", actor="alice")
    service.list_children("A2")
"""

from docspace.components.namespace.errors import (
    FolderAlreadyExists,
    FolderNotEmpty,
    MalformedRecord,
    NamespaceError,
    NotFound,
    PartialCascadeFailure,
    StoreUnavailable,
    ValidationError,
)
from docspace.components.namespace.models import (
    BreadcrumbItem,
    CreateFileRequest,
    File,
    FileSortField,
    Folder,
    Listing,
    RepairReport,
    SearchResult,
    SortDirection,
)
from docspace.components.namespace.object_storage import (
    MemoryObjectStorage,
    ObjectStorageProtocol,
    S3ObjectStorage,
    get_object_storage,
    reset_object_storage,
)
from docspace.components.namespace.search import SearchIndexView
from docspace.components.namespace.service import (
    NamespaceService,
    build_storage_key,
    get_namespace_service,
    media_type_of,
    reset_namespace_service,
)
from docspace.components.namespace.storage import NamespaceMemoryStorage, namespace_memory_storage
from docspace.components.namespace.storage_provider import (
    NamespaceStorageProtocol,
    get_namespace_storage,
    get_storage_type,
    reset_namespace_storage,
)

__all__ = [
    # Models
    "Folder",
    "File",
    "FileSortField",
    "SortDirection",
    "BreadcrumbItem",
    "Listing",
    "SearchResult",
    "RepairReport",
    "CreateFileRequest",
    # Errors
    "NamespaceError",
    "ValidationError",
    "FolderAlreadyExists",
    "NotFound",
    "FolderNotEmpty",
    "StoreUnavailable",
    "MalformedRecord",
    "PartialCascadeFailure",
    # Storage
    "NamespaceStorageProtocol",
    "NamespaceMemoryStorage",
    "namespace_memory_storage",
    "get_namespace_storage",
    "get_storage_type",
    "reset_namespace_storage",
    # Object storage
    "ObjectStorageProtocol",
    "MemoryObjectStorage",
    "S3ObjectStorage",
    "get_object_storage",
    "reset_object_storage",
    # Service
    "NamespaceService",
    "get_namespace_service",
    "reset_namespace_service",
    "build_storage_key",
    "media_type_of",
    "SearchIndexView",
]
