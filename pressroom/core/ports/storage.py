"""
Object storage port (used by the image gate's caller after compression).
"""

from __future__ import annotations

from typing import Protocol


class StoragePort(Protocol):
    """Blob storage that hands out public URLs."""

    def store(self, data: bytes, path: str, metadata: dict[str, str]) -> str:
        """
        Store bytes under path.

        Returns:
            Public URL of the stored object

        Raises:
            StorageError: If the object cannot be written
        """
        ...

    def delete(self, url: str) -> bool:
        """
        Delete an object by its public URL.

        Returns:
            True if deleted, False if it did not exist or could not be removed
        """
        ...


class StorageError(Exception):
    """Base class for storage errors."""


class PathExistsError(StorageError):
    """Raised when attempting to write to an existing path."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Path already exists: {path}")
