"""
Storage abstraction for path-based file operations.

Backends implement the verbs that need genuine backend-specific behaviour.
Stream variants, copy, the single-field metadata accessors and the
visibility stubs have default implementations here.
"""

import io
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, List, Mapping, Optional, Union

from .exceptions import UnsupportedOperationError
from .normalize import StoredObject

Contents = Union[bytes, str]
WriteConfig = Optional[Mapping[str, Any]]


class StorageBackend(ABC):
    """Abstract base class for storage backends.

    Paths are ``/``-separated and relative to the backend root.
    Per-call ``config`` mappings may carry:

    - ``headers``: extra request headers
    - ``mimetype``: explicit content-type for the stored object

    Example:
        ```python
        storage = CloudFilesAdapter(username, api_key)
        storage.set_container_name("assets").object_store_service("cloudFiles", "DFW")

        storage.write("notes/todo.txt", b"buy milk")
        if storage.has("notes/todo.txt"):
            content = storage.read("notes/todo.txt")
        ```
    """

    @abstractmethod
    def write(self, path: str, contents: Contents, config: WriteConfig = None) -> Optional[StoredObject]:
        """Write a new file.

        Args:
            path: Logical file path
            contents: File content
            config: Optional per-call settings

        Returns:
            Metadata of the stored file, or None if the write failed
        """
        pass

    @abstractmethod
    def update(self, path: str, contents: Contents, config: WriteConfig = None) -> Optional[StoredObject]:
        """Overwrite an existing file.

        Returns:
            Metadata of the stored file, or None if the update failed
        """
        pass

    @abstractmethod
    def read(self, path: str) -> Optional[bytes]:
        """Read file content.

        Returns:
            File content, or None if the backend could not be reached

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        pass

    @abstractmethod
    def rename(self, path: str, new_path: str) -> bool:
        """Move a file to ``new_path``.

        Returns:
            True if the file now lives at ``new_path`` only
        """
        pass

    @abstractmethod
    def delete(self, path: str) -> bool:
        """Delete a file.

        Returns:
            True if the delete succeeded, False otherwise
        """
        pass

    @abstractmethod
    def delete_dir(self, dirname: str) -> bool:
        """Delete a directory.

        Returns:
            True if the delete succeeded, False otherwise
        """
        pass

    @abstractmethod
    def create_dir(self, dirname: str, config: WriteConfig = None) -> Optional[StoredObject]:
        """Create a directory.

        Returns:
            Metadata of the directory, or None if creation failed
        """
        pass

    @abstractmethod
    def has(self, path: str) -> bool:
        """Check whether a file exists.

        Never raises; any failure is reported as False.
        """
        pass

    @abstractmethod
    def list_contents(self, directory: str = "", recursive: bool = True) -> List[StoredObject]:
        """List files and directories below ``directory``.

        Args:
            directory: Directory to list, ``""`` for the root
            recursive: Include nested entries, not only direct children

        Returns:
            Entries sorted by path
        """
        pass

    @abstractmethod
    def get_metadata(self, path: str) -> Optional[StoredObject]:
        """Get all metadata for a file.

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        pass

    def write_stream(self, path: str, resource: BinaryIO, config: WriteConfig = None) -> Optional[StoredObject]:
        """Write a new file from a readable binary stream."""
        return self.write(path, resource.read(), config)

    def update_stream(self, path: str, resource: BinaryIO, config: WriteConfig = None) -> Optional[StoredObject]:
        """Overwrite a file from a readable binary stream."""
        return self.update(path, resource.read(), config)

    def read_stream(self, path: str) -> Optional[BinaryIO]:
        """Open a file for reading as a binary stream."""
        contents = self.read(path)
        if contents is None:
            return None
        return io.BytesIO(contents)

    def copy(self, path: str, new_path: str) -> bool:
        """Copy a file.

        Default implementation streams the content through the caller:
        read_stream + write_stream. Backends may override for a native copy.

        Returns:
            True if the copy succeeded, False otherwise

        Raises:
            FileNotFoundError: If the source file doesn't exist
        """
        stream = self.read_stream(path)
        if stream is None:
            return False
        return self.write_stream(new_path, stream) is not None

    def get_size(self, path: str) -> Optional[int]:
        """Get file size in bytes."""
        metadata = self.get_metadata(path)
        return metadata.size if metadata else None

    def get_mimetype(self, path: str) -> Optional[str]:
        """Get the file's media type."""
        metadata = self.get_metadata(path)
        return metadata.mimetype if metadata else None

    def get_timestamp(self, path: str) -> Optional[int]:
        """Get the file's last-modified time as a Unix timestamp."""
        metadata = self.get_metadata(path)
        return metadata.timestamp if metadata else None

    def get_visibility(self, path: str) -> str:
        raise UnsupportedOperationError(f"{type(self).__name__} does not support visibility controls")

    def set_visibility(self, path: str, visibility: str) -> bool:
        raise UnsupportedOperationError(f"{type(self).__name__} does not support visibility controls")
