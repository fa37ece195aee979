# src/storage/local_blob_store.py — v2
"""Local filesystem blob store (default backend)."""

from __future__ import annotations

from pathlib import Path

from mediaref.storage.base_blob_store import BaseBlobStore


class LocalBlobStore(BaseBlobStore):
    """Store blobs on the local filesystem."""

    def __init__(self, base_path: str | None = None) -> None:
        """Initialize with optional base path.

        Args:
            base_path: Root directory for all paths. If None, paths are used as given.
        """
        self._base = Path(base_path).expanduser() if base_path else None

    def _resolve(self, path: str) -> Path:
        """Resolve a path relative to base_path."""
        if self._base is not None:
            return self._base / path
        return Path(path).expanduser()

    async def exists(self, path: str) -> bool:
        """Check if a local path exists."""
        return self._resolve(path).exists()

    async def read(self, path: str) -> bytes:
        """Read content from a local file path."""
        return self._resolve(path).read_bytes()

    async def write(self, path: str, content: bytes | str) -> None:
        """Write content to a local file path."""
        p = self._resolve(path)
        if isinstance(content, bytes):
            p.write_bytes(content)
        else:
            p.write_text(content, encoding="utf-8")

    async def mkdir(self, path: str) -> None:
        """Create a local directory with its parents."""
        self._resolve(path).mkdir(parents=True, exist_ok=True)

    async def remove(self, path: str) -> None:
        """Remove a local file."""
        self._resolve(path).unlink()
