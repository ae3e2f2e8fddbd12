"""Flat file-name search over a namespace store."""

from docspace.components.namespace.models import SearchResult
from docspace.components.namespace.storage_provider import NamespaceStorageProtocol, get_namespace_storage
from docspace.utils import get_logger

logger = get_logger(__name__)


class SearchIndexView:
    """Case-insensitive substring search across every file name.

    Container paths are ignored: a match anywhere in the tree is returned.
    """

    def __init__(self, storage: NamespaceStorageProtocol | None = None):
        self._storage = storage

    @property
    def storage(self) -> NamespaceStorageProtocol:
        if self._storage is None:
            self._storage = get_namespace_storage()
        return self._storage

    def search_files(self, query: str | None) -> SearchResult:
        """Search file names.

        An empty or whitespace-only query means "not searching", which is
        distinct from a search with no matches.
        """
        needle = (query or "").strip()
        if not needle:
            return SearchResult(searching=False)

        lowered = needle.casefold()
        files = [f for f in self.storage.list_files() if lowered in f.name.casefold()]
        logger.debug(f"Search {needle!r}: {len(files)} matches")
        return SearchResult(searching=True, query=needle, files=files)
