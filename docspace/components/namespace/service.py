"""Namespace engine.

Provides the folder/file tree operations on top of a flat document store:
- Folder management (create, rename/move cascade, delete-when-empty)
- Listing, ordering and breadcrumbs
- File attach/move/detach with the object store
- Cascade resumption and subtree repair

The store offers atomic writes per record only. A rename or move rewrites
the folder's own record first, then walks its subtree one level at a time:
every write of a level is acknowledged before the next level is queried, so
a concurrent reader may see a new parent above old children but never the
reverse.
"""

import os
import re
import unicodedata
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any

from docspace.components.namespace import paths
from docspace.components.namespace.errors import (
    FolderAlreadyExists,
    FolderNotEmpty,
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
    SortDirection,
)
from docspace.components.namespace.object_storage import ObjectStorageProtocol, get_object_storage
from docspace.components.namespace.storage_provider import NamespaceStorageProtocol, get_namespace_storage
from docspace.settings import MAX_PATH_LENGTH, ROOT_CONTAINER, settings
from docspace.utils import get_logger, get_timestamp_ms
from docspace.utils.id_generator import FILE_ID_PREFIX, FOLDER_ID_PREFIX, generate_id

logger = get_logger(__name__)

# Characters kept verbatim in object-storage keys
_UNSAFE_KEY_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def build_storage_key(container_path: str | None, filename: str) -> str:
    """Object-storage key for a new upload.

    Format: files/{container or root}/{epoch_ms}_{sanitized filename}
    """
    sanitized = _UNSAFE_KEY_CHARS.sub("_", filename)
    return f"files/{container_path or ROOT_CONTAINER}/{get_timestamp_ms()}_{sanitized}"


def media_type_of(filename: str) -> str:
    """Lower-cased extension without the dot, "" when there is none."""
    return os.path.splitext(filename)[1][1:].lower()


def _name_sort_key(name: str) -> tuple[str, str]:
    """Case-insensitive collation key: accent-blind first, then accents.

    Accented letters sort next to their base letter (e < é < f).
    """
    folded = name.casefold()
    base = "".join(
        ch for ch in unicodedata.normalize("NFD", folded) if unicodedata.category(ch) != "Mn"
    )
    return base, unicodedata.normalize("NFC", folded)


_FILE_SORT_KEYS: dict[FileSortField, Callable[[File], Any]] = {
    FileSortField.name: lambda f: _name_sort_key(f.name),
    FileSortField.mediaType: lambda f: f.mediaType.casefold(),
    FileSortField.sizeBytes: lambda f: f.sizeBytes,
    FileSortField.uploadedAt: lambda f: f.uploadedAt,
}


class NamespaceService:
    """Folder/file tree operations over a namespace store.

    Every operation re-reads through the store; nothing is cached between
    calls.
    """

    def __init__(
        self,
        storage: NamespaceStorageProtocol | None = None,
        object_storage: ObjectStorageProtocol | None = None,
        max_workers: int | None = None,
    ):
        """
        Args:
            storage: Store adapter (default: configured by settings)
            object_storage: Object store for file bytes (default: configured by settings)
            max_workers: Concurrent writes per cascade level (default: settings.cascade_max_workers)
        """
        self._storage = storage
        self._object_storage = object_storage
        self.max_workers = max_workers or settings.cascade_max_workers

    @property
    def storage(self) -> NamespaceStorageProtocol:
        if self._storage is None:
            self._storage = get_namespace_storage()
        return self._storage

    @property
    def object_storage(self) -> ObjectStorageProtocol:
        if self._object_storage is None:
            self._object_storage = get_object_storage()
        return self._object_storage

    # ==================== Validation ====================

    def _validate_name(self, name: str, root_level: bool) -> str:
        try:
            cleaned = paths.validate_segment(name, max_length=settings.max_name_length)
        except paths.PathContractError as e:
            raise ValidationError(str(e)) from e
        if root_level and cleaned == ROOT_CONTAINER:
            raise ValidationError(f"{ROOT_CONTAINER!r} is reserved at the top level")
        return cleaned

    def _require_parent(self, parent_path: str | None) -> None:
        if parent_path and self.storage.get_folder_by_path(parent_path) is None:
            raise ValidationError(f"Parent folder does not exist: {parent_path}")

    def _require_container(self, container_path: str) -> None:
        if container_path != ROOT_CONTAINER and self.storage.get_folder_by_path(container_path) is None:
            raise ValidationError(f"Container folder does not exist: {container_path}")

    def _check_path_length(self, path: str, longest: int) -> None:
        """longest is the longest path the operation would write at or below path."""
        if longest > MAX_PATH_LENGTH:
            raise ValidationError(
                f"Path {path!r} would produce paths of {longest} characters, limit is {MAX_PATH_LENGTH}"
            )

    # ==================== Lookups ====================

    def get_folder(self, folder_id: str) -> Folder:
        """Get a folder by ID."""
        folder = self.storage.get_folder(folder_id)
        if folder is None:
            raise NotFound(f"Folder not found: {folder_id}")
        return folder

    def get_folder_by_path(self, path: str) -> Folder:
        """Get a folder by exact path."""
        folder = self.storage.get_folder_by_path(path) if path else None
        if folder is None:
            raise NotFound(f"Folder not found: {path!r}")
        return folder

    def get_file(self, file_id: str) -> File:
        """Get a file by ID."""
        file = self.storage.get_file(file_id)
        if file is None:
            raise NotFound(f"File not found: {file_id}")
        return file

    # ==================== Folder creation / deletion ====================

    def create_folder(self, parent_path: str | None, name: str, actor: str) -> Folder:
        """Create a folder under parent_path (top level when empty).

        Args:
            parent_path: Path of an existing folder, or None/"" for the top level
            name: Folder name (one path segment)
            actor: Identity recorded as creator

        Returns:
            The created folder

        Raises:
            ValidationError: Invalid name or missing parent
            FolderAlreadyExists: The resulting path is taken
        """
        parent_path = parent_path or None
        name = self._validate_name(name, root_level=parent_path is None)
        self._require_parent(parent_path)

        path = paths.join(parent_path, name)
        self._check_path_length(path, len(path))
        if self.storage.get_folder_by_path(path) is not None:
            raise FolderAlreadyExists(path)

        # Read-then-write; concurrent creates may share an order value
        order = self.storage.count_child_folders(parent_path) + 1

        folder = Folder(
            id=generate_id(FOLDER_ID_PREFIX),
            name=name,
            path=path,
            depth=paths.depth_of(path),
            parentPath=parent_path,
            order=order,
            createdAt=get_timestamp_ms(),
            createdBy=actor,
        )
        self.storage.insert_folder(folder)
        logger.info(f"Created folder {folder.id} at {path!r} (order={order}) by {actor}")
        return folder

    def delete_folder(self, folder: Folder) -> None:
        """Delete an empty folder.

        Raises:
            NotFound: The folder record no longer exists
            FolderNotEmpty: The folder still holds files or subfolders
        """
        current = self.get_folder(folder.id)
        file_count = self.storage.count_files_in(current.path)
        folder_count = self.storage.count_child_folders(current.path)
        if file_count or folder_count:
            raise FolderNotEmpty(current.path, file_count, folder_count)
        if not self.storage.delete_folder(current.id):
            raise NotFound(f"Folder not found: {current.id}")
        logger.info(f"Deleted folder {current.id} at {current.path!r}")

    # ==================== Rename / move cascade ====================

    def rename_folder(self, folder: Folder, new_name: str, actor: str) -> Folder:
        """Rename a folder in place, rewriting its whole subtree."""
        current = self.get_folder(folder.id)
        updated, _, _ = self._relocate(current, current.parentPath, new_name, actor)
        return updated

    def move_folder(
        self,
        folder: Folder,
        new_parent_path: str | None,
        actor: str,
        new_name: str | None = None,
    ) -> Folder:
        """Move a folder under another parent (top level when empty).

        Raises:
            ValidationError: Missing destination, invalid name, or the
                destination lies inside the moved subtree
            FolderAlreadyExists: The destination path is taken
            PartialCascadeFailure: The subtree rewrite stopped partway
        """
        current = self.get_folder(folder.id)
        new_parent_path = new_parent_path or None
        if new_parent_path and paths.is_descendant(new_parent_path, current.path, inclusive=True):
            raise ValidationError(f"Cannot move {current.path!r} into its own subtree {new_parent_path!r}")
        updated, _, _ = self._relocate(current, new_parent_path, new_name or current.name, actor)
        return updated

    def _relocate(
        self, folder: Folder, new_parent_path: str | None, new_name: str, actor: str
    ) -> tuple[Folder, int, int]:
        """Validate, write the root record, then cascade below it.

        Returns:
            (updated folder, descendant folders written, files written)
        """
        name = self._validate_name(new_name, root_level=new_parent_path is None)
        self._require_parent(new_parent_path)

        old_path = folder.path
        new_path = paths.join(new_parent_path, name)
        if new_path == old_path:
            return folder, 0, 0
        if self.storage.get_folder_by_path(new_path) is not None:
            raise FolderAlreadyExists(new_path)
        deepest = max((len(f.path) for f in self.storage.list_folders_under(old_path)), default=len(old_path))
        self._check_path_length(new_path, deepest - len(old_path) + len(new_path))

        updated = folder.model_copy(
            update={
                "name": name,
                "path": new_path,
                "parentPath": new_parent_path,
                "depth": paths.depth_of(new_path),
                "updatedAt": get_timestamp_ms(),
                "updatedBy": actor,
            }
        )

        logger.info(f"Cascade start: {old_path!r} -> {new_path!r} by {actor}")
        # Nothing has been written yet if this fails
        self.storage.save_folder(updated)

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            folders_written, files_written = self._cascade(pool, old_path, new_path, actor)

        logger.info(
            f"Cascade complete: {old_path!r} -> {new_path!r}, "
            f"{folders_written + 1} folders and {files_written} files rewritten"
        )
        return updated, folders_written, files_written

    def _gather(self, pool: ThreadPoolExecutor, tasks: list[tuple[str, Callable[[], Any]]]):
        """Run tasks concurrently and wait for all of them.

        Args:
            tasks: (subtree path, callable) pairs

        Returns:
            (results, failure) where failure is the first (path, error) in
            submission order, or None
        """
        futures = [(path, pool.submit(fn)) for path, fn in tasks]
        results = []
        failure = None
        for path, future in futures:
            try:
                results.append(future.result())
            except NamespaceError as e:
                results.append(None)
                if failure is None:
                    failure = (path, e)
        return results, failure

    def _partial_failure(
        self, old_path: str, new_path: str, failure: tuple[str, Exception]
    ) -> PartialCascadeFailure:
        stopped_at, cause = failure
        logger.error(f"Cascade {old_path!r} -> {new_path!r} stopped at {stopped_at!r}: {cause}")
        return PartialCascadeFailure(old_path, new_path, stopped_at, cause)

    def _level_entries(self, container_path: str) -> tuple[list[Folder], list[File]]:
        return self.storage.list_child_folders(container_path), self.storage.list_files_in(container_path)

    def _cascade(self, pool: ThreadPoolExecutor, old_path: str, new_path: str, actor: str) -> tuple[int, int]:
        """Rewrite everything below a root whose own record is already written."""
        folders_written = 0
        files_written = 0
        frontier = [(old_path, new_path)]
        level = 0

        while frontier:
            level += 1
            lookups = [(old, partial(self._level_entries, old)) for old, _ in frontier]
            entries, failure = self._gather(pool, lookups)
            if failure:
                raise self._partial_failure(old_path, new_path, failure)

            now = get_timestamp_ms()
            writes: list[tuple[str, Callable[[], Any]]] = []
            next_frontier: list[tuple[str, str]] = []
            level_files = 0
            for (old, new), (children, files) in zip(frontier, entries):
                for child in children:
                    if paths.is_descendant(child.path, old):
                        child_new = paths.rewrite_prefix(child.path, old, new)
                    else:
                        child_new = paths.join(new, child.name)
                    updated = child.model_copy(
                        update={
                            "path": child_new,
                            "parentPath": new,
                            "depth": paths.depth_of(child_new),
                            "updatedAt": now,
                            "updatedBy": actor,
                        }
                    )
                    writes.append((child.path, partial(self.storage.save_folder, updated)))
                    next_frontier.append((child.path, child_new))
                for file in files:
                    moved = file.model_copy(update={"containerPath": new})
                    writes.append((old, partial(self.storage.save_file, moved)))
                    level_files += 1

            _, failure = self._gather(pool, writes)
            if failure:
                raise self._partial_failure(old_path, new_path, failure)

            folders_written += len(next_frontier)
            files_written += level_files
            logger.debug(
                f"Cascade {old_path!r} -> {new_path!r} level {level}: "
                f"{len(next_frontier)} folders, {level_files} files"
            )
            frontier = next_frontier

        return folders_written, files_written

    def resume_cascade(self, old_path: str, new_path: str, actor: str) -> RepairReport:
        """Finish a rename/move that raised PartialCascadeFailure.

        If the root still carries old_path the ordinary cascade runs.
        Otherwise every folder still under old_path and every file whose
        container is still under old_path is rewritten onto new_path.
        Running it again after success performs no writes.
        """
        if not old_path or not new_path:
            raise ValidationError("Both old and new paths are required")
        if old_path == new_path:
            return RepairReport(rootPath=new_path)
        if paths.is_descendant(new_path, old_path):
            raise ValidationError(f"{new_path!r} lies inside {old_path!r}")

        root = self.storage.get_folder_by_path(old_path)
        if root is not None:
            _, folders_written, files_written = self._relocate(
                root, paths.parent_of(new_path), paths.name_of(new_path), actor
            )
            return RepairReport(rootPath=new_path, foldersUpdated=folders_written + 1, filesUpdated=files_written)

        if self.storage.get_folder_by_path(new_path) is None:
            raise NotFound(f"Neither {old_path!r} nor {new_path!r} exists")

        logger.info(f"Resuming cascade {old_path!r} -> {new_path!r} by {actor}")
        stale_folders = sorted(self.storage.list_folders_under(old_path), key=lambda f: f.depth)
        stale_files = self.storage.list_files_under(old_path)

        by_depth: dict[int, list[Folder]] = {}
        for folder in stale_folders:
            by_depth.setdefault(folder.depth, []).append(folder)

        now = get_timestamp_ms()
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            for depth in sorted(by_depth):
                writes = []
                for folder in by_depth[depth]:
                    rewritten = paths.rewrite_prefix(folder.path, old_path, new_path)
                    updated = folder.model_copy(
                        update={
                            "path": rewritten,
                            "parentPath": paths.parent_of(rewritten),
                            "depth": paths.depth_of(rewritten),
                            "updatedAt": now,
                            "updatedBy": actor,
                        }
                    )
                    writes.append((folder.path, partial(self.storage.save_folder, updated)))
                _, failure = self._gather(pool, writes)
                if failure:
                    raise self._partial_failure(old_path, new_path, failure)

            writes = []
            for file in stale_files:
                moved = file.model_copy(
                    update={"containerPath": paths.rewrite_prefix(file.containerPath, old_path, new_path)}
                )
                writes.append((file.containerPath, partial(self.storage.save_file, moved)))
            _, failure = self._gather(pool, writes)
            if failure:
                raise self._partial_failure(old_path, new_path, failure)

        report = RepairReport(rootPath=new_path, foldersUpdated=len(stale_folders), filesUpdated=len(stale_files))
        logger.info(f"Resumed cascade {old_path!r} -> {new_path!r}: {report.writes} writes")
        return report

    def repair_subtree(
        self,
        folder_or_path: Folder | str,
        actor: str,
        old_prefix: str | None = None,
        new_prefix: str | None = None,
    ) -> RepairReport:
        """Recompute path, parentPath and depth below a folder.

        Walks top-down from the folder following parentPath links. A folder
        whose record still carries a stale path has its children looked up
        under both paths, and files left in the stale container are
        re-pointed. A consistent subtree yields zero writes.

        The root's own path is trusted unless (old_prefix, new_prefix) is
        given, as carried by PartialCascadeFailure. Then a root still under
        old_prefix is moved onto new_prefix, and records still filed under
        the old counterpart of any visited folder are picked up too.

        Raises:
            NotFound: The folder does not exist
            ValidationError: Only one prefix given, or the root's parent does
                not exist (a cascade left it behind; pass the prefixes or
                call resume_cascade)
            FolderAlreadyExists: The repaired root path is held by another folder
        """
        if (old_prefix is None) != (new_prefix is None):
            raise ValidationError("old_prefix and new_prefix must be given together")
        if isinstance(folder_or_path, Folder):
            root = self.get_folder(folder_or_path.id)
        else:
            root = self.get_folder_by_path(folder_or_path)

        def stale_counterpart(path: str) -> str | None:
            if old_prefix is None or old_prefix == new_prefix:
                return None
            if paths.is_descendant(path, new_prefix, inclusive=True):
                return paths.rewrite_prefix(path, new_prefix, old_prefix)
            return None

        root_path = root.path
        if old_prefix is not None and paths.is_descendant(root_path, old_prefix, inclusive=True):
            root_path = paths.rewrite_prefix(root_path, old_prefix, new_prefix)

        root_parent = paths.parent_of(root_path)
        if root_parent is not None and self.storage.get_folder_by_path(root_parent) is None:
            raise ValidationError(
                f"Parent {root_parent!r} of {root_path!r} does not exist; "
                "repair with the cascade's old and new prefixes or call resume_cascade"
            )
        holder = self.storage.get_folder_by_path(root_path)
        if holder is not None and holder.id != root.id:
            raise FolderAlreadyExists(root_path)

        report = RepairReport(rootPath=root_path)
        now = get_timestamp_ms()
        provenance = {"updatedAt": now, "updatedBy": actor}

        expected_root = {
            "name": paths.name_of(root_path),
            "path": root_path,
            "parentPath": root_parent,
            "depth": paths.depth_of(root_path),
        }
        if any(getattr(root, k) != v for k, v in expected_root.items()):
            self.storage.save_folder(root.model_copy(update={**expected_root, **provenance}))
            report.foldersUpdated += 1

        # (folder id, recorded path, expected path)
        frontier = [(root.id, root.path, root_path)]
        visited = {root.id}
        while frontier:
            next_frontier = []
            for folder_id, recorded, expected in frontier:
                lookup_paths = [expected]
                if recorded != expected:
                    lookup_paths.append(recorded)
                counterpart = stale_counterpart(expected)
                if counterpart is not None and counterpart not in lookup_paths:
                    occupant = self.storage.get_folder_by_path(counterpart)
                    if occupant is None or occupant.id == folder_id:
                        lookup_paths.append(counterpart)

                for container in lookup_paths[1:]:
                    for file in self.storage.list_files_in(container):
                        self.storage.save_file(file.model_copy(update={"containerPath": expected}))
                        report.filesUpdated += 1

                children: dict[str, Folder] = {}
                for parent in lookup_paths:
                    for child in self.storage.list_child_folders(parent):
                        if child.id not in visited:
                            children[child.id] = child

                for child in children.values():
                    visited.add(child.id)
                    child_path = paths.join(expected, child.name)
                    wanted = {"path": child_path, "parentPath": expected, "depth": paths.depth_of(child_path)}
                    if any(getattr(child, k) != v for k, v in wanted.items()):
                        self.storage.save_folder(child.model_copy(update={**wanted, **provenance}))
                        report.foldersUpdated += 1
                    next_frontier.append((child.id, child.path, child_path))
            frontier = next_frontier

        logger.info(
            f"Repaired subtree {root_path!r}: {report.foldersUpdated} folders, {report.filesUpdated} files"
        )
        return report

    # ==================== Listing / navigation ====================

    def list_children(
        self,
        parent_path: str | None = None,
        sort_field: FileSortField | str = FileSortField.name,
        direction: SortDirection | str = SortDirection.asc,
    ) -> Listing:
        """Direct subfolders and files of a folder (or of the top level).

        Folders come in sibling order, ties broken by case-insensitive name.
        Files are sorted by sort_field in the given direction; equal keys
        keep upload order.

        Raises:
            NotFound: parent_path names a folder that does not exist
            ValidationError: Unknown sort field or direction
        """
        try:
            sort_field = FileSortField(sort_field)
            direction = SortDirection(direction)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        if parent_path:
            self.get_folder_by_path(parent_path)
            folders = self.storage.list_child_folders(parent_path)
            files = self.storage.list_files_in(parent_path)
        else:
            folders = self.storage.list_child_folders(None)
            files = self.storage.list_files_in(ROOT_CONTAINER)

        folders.sort(key=lambda f: (f.order, _name_sort_key(f.name)))

        files.sort(key=lambda f: (f.uploadedAt, f.id))
        files.sort(key=_FILE_SORT_KEYS[sort_field], reverse=direction == SortDirection.desc)
        return Listing(folders=folders, files=files)

    def resolve_breadcrumb(self, path: str | None) -> list[BreadcrumbItem]:
        """Breadcrumb from the top level down to path.

        A prefix with no folder record shows its raw segment instead of
        failing the whole breadcrumb.
        """
        crumbs = [BreadcrumbItem(name=settings.breadcrumb_root_label, path="")]
        if not path:
            return crumbs
        try:
            parts = paths.segments(path)
        except paths.PathContractError as e:
            raise ValidationError(str(e)) from e

        prefix = None
        for part in parts:
            prefix = paths.join(prefix, part)
            folder = self.storage.get_folder_by_path(prefix)
            crumbs.append(BreadcrumbItem(name=folder.name if folder else part, path=prefix))
        return crumbs

    def navigate_up(self, path: str | None) -> str:
        """Parent path of path, or "" at the top level."""
        if not path:
            return ""
        try:
            return paths.parent_of(path) or ""
        except paths.PathContractError as e:
            raise ValidationError(str(e)) from e

    # ==================== Files ====================

    def create_file(self, request: CreateFileRequest, actor: str) -> File:
        """Record a file whose bytes are already in the object store.

        Raises:
            ValidationError: Missing container, invalid name or file too large
        """
        container = request.containerPath or ROOT_CONTAINER
        name = self._validate_name(request.name, root_level=False)
        if request.sizeBytes > settings.max_upload_bytes:
            raise ValidationError(
                f"File {name!r} is {request.sizeBytes} bytes, limit is {settings.max_upload_bytes}"
            )
        self._require_container(container)

        file = File(
            id=generate_id(FILE_ID_PREFIX),
            name=name,
            mediaType=media_type_of(name),
            sizeBytes=request.sizeBytes,
            containerPath=container,
            storageKey=request.storageKey,
            url=request.url,
            uploadedAt=get_timestamp_ms(),
            uploadedBy=actor,
        )
        self.storage.insert_file(file)
        logger.info(f"Created file {file.id} {name!r} in {container!r} by {actor}")
        return file

    def upload_file(
        self,
        container_path: str | None,
        filename: str,
        data: bytes,
        actor: str,
        content_type: str | None = None,
    ) -> File:
        """Store bytes in the object store, then record the file.

        Limits are checked before any bytes are sent.
        """
        container = container_path or ROOT_CONTAINER
        self._validate_name(filename, root_level=False)
        if len(data) > settings.max_upload_bytes:
            raise ValidationError(f"File {filename!r} exceeds {settings.max_upload_bytes} bytes")
        self._require_container(container)

        key = build_storage_key(container, filename)
        size = self.object_storage.put_object(key, data, content_type)
        try:
            url = self.object_storage.get_url(key)
            request = CreateFileRequest(
                containerPath=container, name=filename, sizeBytes=size, storageKey=key, url=url
            )
            return self.create_file(request, actor)
        except NamespaceError:
            logger.error(f"Recording upload {key} failed, removing the object")
            self.object_storage.delete_object(key)
            raise

    def move_file(self, file: File, target_container_path: str | None, actor: str) -> File:
        """Re-point a file at another folder (top level when empty)."""
        current = self.get_file(file.id)
        target = target_container_path or ROOT_CONTAINER
        self._require_container(target)
        if current.containerPath == target:
            return current
        moved = current.model_copy(update={"containerPath": target})
        self.storage.save_file(moved)
        logger.info(f"Moved file {current.id} {current.containerPath!r} -> {target!r} by {actor}")
        return moved

    def delete_file(self, file: File) -> None:
        """Delete a file's object, then its record.

        The record is kept when the object cannot be deleted.

        Raises:
            NotFound: The file record no longer exists
            StoreUnavailable: The object store refused the delete
        """
        current = self.get_file(file.id)
        try:
            self.object_storage.delete_object(current.storageKey)
        except StoreUnavailable:
            logger.error(f"Kept record of file {current.id}: object {current.storageKey} not deleted")
            raise
        self.storage.delete_file(current.id)
        logger.info(f"Deleted file {current.id} ({current.storageKey})")


# Singleton instance (lazy initialized)
_namespace_service: NamespaceService | None = None


def get_namespace_service() -> NamespaceService:
    """Get singleton instance of NamespaceService."""
    global _namespace_service
    if _namespace_service is None:
        _namespace_service = NamespaceService()
    return _namespace_service


def reset_namespace_service() -> None:
    """Reset the service singleton (for testing)."""
    global _namespace_service
    _namespace_service = None
