# src/corpus/base_document_store.py — v1
"""Abstract document store interface for the scanned corpus."""

from __future__ import annotations

from abc import ABC, abstractmethod

from mediaref.core.models import DocumentHandle


class BaseDocumentStore(ABC):
    """Read-only access to the documents being scanned for references."""

    @abstractmethod
    async def is_container(self, path: str) -> bool:
        """True if path exists and can hold documents (a directory)."""

    @abstractmethod
    async def list_documents(
        self, path: str, recursive: bool, extensions: list[str],
    ) -> list[DocumentHandle]:
        """List documents under path whose extension is in ``extensions``."""

    @abstractmethod
    async def read(self, document: DocumentHandle) -> str:
        """Return the full text of a document."""

    @abstractmethod
    async def mod_time(self, document: DocumentHandle) -> float:
        """Return the document's current modification time (epoch seconds)."""
