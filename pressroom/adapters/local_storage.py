"""
Local Filesystem Storage Adapter.

Implements the StoragePort interface using the local filesystem, for
development and single-server deployments. Objects are written once;
an existing path is never overwritten.
"""

from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path

from pressroom.core.ports.storage import PathExistsError, StorageError


class LocalFileStorage:
    """
    Local filesystem implementation of StoragePort.

    Stores objects as files with an accompanying metadata JSON and maps
    them to public URLs under base_url.

    Example path: "uploads/profile_1700000000000_ab12cd34.jpg"
        -> {base_path}/uploads/profile_1700000000000_ab12cd34.jpg + .meta.json
        -> {base_url}/uploads/profile_1700000000000_ab12cd34.jpg
    """

    def __init__(
        self,
        base_path: str | Path,
        base_url: str = "/media",
        *,
        create_dirs: bool = True,
    ) -> None:
        """
        Initialize local file storage.

        Args:
            base_path: Root directory for storage
            base_url: Public URL prefix that serves base_path
            create_dirs: Whether to create directories if they don't exist
        """
        self.base_path = Path(base_path)
        self.base_url = base_url.rstrip("/")

        if create_dirs:
            self.base_path.mkdir(parents=True, exist_ok=True)

    def _path_to_files(self, path: str) -> tuple[Path, Path]:
        """Convert a storage path to file paths (data and metadata)."""
        # Sanitize path to prevent directory traversal
        safe_path = path.replace("..", "").lstrip("/")
        data_path = self.base_path / safe_path
        meta_path = data_path.with_name(data_path.name + ".meta.json")
        return data_path, meta_path

    def _url_to_path(self, url: str) -> str | None:
        prefix = self.base_url + "/"
        if not url.startswith(prefix):
            return None
        return url[len(prefix) :]

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def store(self, data: bytes, path: str, metadata: dict[str, str]) -> str:
        """
        Store bytes under path and return the public URL.

        Raises PathExistsError if the path is already taken.
        """
        data_path, meta_path = self._path_to_files(path)

        if data_path.exists():
            raise PathExistsError(path)

        try:
            data_path.parent.mkdir(parents=True, exist_ok=True)

            with open(data_path, "wb") as f:
                f.write(data)

            with open(meta_path, "w") as f:
                json.dump(
                    {
                        **metadata,
                        "path": path,
                        "size_bytes": len(data),
                        "sha256": hashlib.sha256(data).hexdigest(),
                    },
                    f,
                )
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e

        return self.public_url(path)

    def delete(self, url: str) -> bool:
        """Delete object by public URL."""
        path = self._url_to_path(url)
        if path is None:
            return False

        data_path, meta_path = self._path_to_files(path)

        if not data_path.exists():
            return False

        data_path.unlink()
        if meta_path.exists():
            meta_path.unlink()

        return True

    def read(self, url: str) -> bytes | None:
        """Read stored bytes back by public URL."""
        path = self._url_to_path(url)
        if path is None:
            return None
        data_path, _ = self._path_to_files(path)
        if not data_path.exists():
            return None
        return data_path.read_bytes()

    def get_metadata(self, url: str) -> dict[str, object] | None:
        """Get stored metadata without fetching bytes."""
        path = self._url_to_path(url)
        if path is None:
            return None
        _, meta_path = self._path_to_files(path)
        if not meta_path.exists():
            return None
        with open(meta_path) as f:
            return json.load(f)


def create_local_storage(
    base_path: str | Path | None = None,
    base_url: str = "/media",
    *,
    env_var: str = "PRESSROOM_DATA_DIR",
    default_path: str = "./data",
) -> LocalFileStorage:
    """
    Factory function to create LocalFileStorage from config.

    Args:
        base_path: Explicit base path (overrides env var)
        base_url: Public URL prefix
        env_var: Environment variable name for the data directory
        default_path: Default path if not configured

    Returns:
        Configured LocalFileStorage instance
    """
    if base_path is None:
        base_path = os.environ.get(env_var, default_path)

    return LocalFileStorage(base_path, base_url)
