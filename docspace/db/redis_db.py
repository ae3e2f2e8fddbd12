"""
Redis Key Prefix Strategy (Single DB + Key Prefix Pattern)

All namespace data lives in db=0 and is isolated by key prefix, which keeps
the layout Redis Cluster compatible and lets one MULTI/EXEC cover every key
touched by a single-document write.

Key layout:
    docspace:ns:folder:{folder_id}          Folder document (String/JSON)
    docspace:ns:file:{file_id}              File document (String/JSON)
    docspace:ns:folder_path:{path}          path -> folder_id (String)
    docspace:ns:children:{parent_path}      child folder ids (Set)
    docspace:ns:container:{container_path}  file ids (Set)
    docspace:ns:index:folders               all folder ids (Set)
    docspace:ns:index:files                 all file ids (Set)
    docspace:ns:index:folder_paths          all folder paths (Sorted Set, lex)
    docspace:ns:index:containers            container paths holding files (Sorted Set, lex)

Root folders have no parent path; their children set uses the separator
itself as the parent marker since no real path can be "/".
"""

from enum import Enum

from docspace.settings import PATH_SEPARATOR

ROOT_PARENT_MARKER = PATH_SEPARATOR


class RedisKeyPrefix(str, Enum):
    """Redis key prefixes for the namespace store.

    Every key starts with 'docspace:' to avoid clashes with other apps.
    """

    NS_FOLDER = "docspace:ns:folder"
    NS_FILE = "docspace:ns:file"
    NS_FOLDER_PATH = "docspace:ns:folder_path"
    NS_CHILDREN = "docspace:ns:children"
    NS_CONTAINER = "docspace:ns:container"
    NS_INDEX = "docspace:ns:index"

    # ==================== Helpers ====================

    @classmethod
    def folder_key(cls, folder_id: str) -> str:
        """Folder document key"""
        return f"{cls.NS_FOLDER.value}:{folder_id}"

    @classmethod
    def file_key(cls, file_id: str) -> str:
        """File document key"""
        return f"{cls.NS_FILE.value}:{file_id}"

    @classmethod
    def folder_path_key(cls, path: str) -> str:
        """Unique path -> folder id key"""
        return f"{cls.NS_FOLDER_PATH.value}:{path}"

    @classmethod
    def children_key(cls, parent_path: str | None) -> str:
        """Child folder id set for a parent path (None for roots)"""
        return f"{cls.NS_CHILDREN.value}:{parent_path or ROOT_PARENT_MARKER}"

    @classmethod
    def container_key(cls, container_path: str) -> str:
        """File id set for a container path"""
        return f"{cls.NS_CONTAINER.value}:{container_path}"

    @classmethod
    def folder_index_key(cls) -> str:
        return f"{cls.NS_INDEX.value}:folders"

    @classmethod
    def file_index_key(cls) -> str:
        return f"{cls.NS_INDEX.value}:files"

    @classmethod
    def folder_paths_index_key(cls) -> str:
        return f"{cls.NS_INDEX.value}:folder_paths"

    @classmethod
    def containers_index_key(cls) -> str:
        return f"{cls.NS_INDEX.value}:containers"

    @classmethod
    def get_description(cls, prefix: "RedisKeyPrefix") -> str:
        """Describe what a key prefix stores."""
        descriptions = {
            cls.NS_FOLDER: "Folder documents",
            cls.NS_FILE: "File documents",
            cls.NS_FOLDER_PATH: "Unique folder path index",
            cls.NS_CHILDREN: "Child folders per parent path",
            cls.NS_CONTAINER: "Files per container path",
            cls.NS_INDEX: "Entity and path indexes",
        }
        return descriptions.get(prefix, "undefined")

    @classmethod
    def list_all(cls) -> dict:
        """List every key prefix with its description."""
        return {member.name: {"prefix": member.value, "description": cls.get_description(member)} for member in cls}
