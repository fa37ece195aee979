# src/storage/base_blob_store.py — v1
"""Abstract blob storage interface used for the cache file."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseBlobStore(ABC):
    """Unified interface for blob storage backends."""

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check if path exists."""

    @abstractmethod
    async def read(self, path: str) -> bytes:
        """Read content from the given path."""

    @abstractmethod
    async def write(self, path: str, content: bytes | str) -> None:
        """Write content to the given path."""

    @abstractmethod
    async def mkdir(self, path: str) -> None:
        """Create a directory (and missing parents)."""

    @abstractmethod
    async def remove(self, path: str) -> None:
        """Remove the file at path."""
