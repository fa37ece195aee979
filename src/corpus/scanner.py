# src/corpus/scanner.py — v1
"""Corpus scanner: document discovery, batched reading and fingerprinting.

Reading is cooperative. After every ``read_batch_size`` documents the scanner
yields to the event loop so a long scan does not starve other tasks sharing
the loop; reads are never parallel.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, Sequence

from mediaref.cache.fingerprint import compute_corpus_fingerprint
from mediaref.core.errors import ConfigError, DocumentReadError
from mediaref.core.models import DocumentContent, DocumentHandle, ScanProgress

if TYPE_CHECKING:
    from mediaref.config.settings import Settings
    from mediaref.corpus.base_document_store import BaseDocumentStore

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ScanProgress], None]


class CorpusScanner:
    """Enumerate and read the text documents of the configured scan path."""

    def __init__(self, store: BaseDocumentStore, settings: Settings) -> None:
        self._store = store
        self._settings = settings

    def update_settings(self, settings: Settings) -> None:
        self._settings = settings

    async def validate_path(self, scan_path: str | None = None) -> bool:
        """True only if the scan path resolves to an existing directory."""
        path = self._settings.scan_path if scan_path is None else scan_path
        try:
            return await self._store.is_container(path)
        except OSError:
            logger.warning("Could not inspect scan path %s", path, exc_info=True)
            return False

    async def list_documents(
        self,
        scan_path: str | None = None,
        include_subfolders: bool | None = None,
    ) -> list[DocumentHandle]:
        """Discover text documents under the scan path.

        Args:
            scan_path: Directory to scan. Defaults to the configured path.
            include_subfolders: Recurse into nested directories. Defaults to
                the configured value.

        Returns:
            Document handles, in storage order.

        Raises:
            ConfigError: If the path is missing or not a directory.
        """
        path = self._settings.scan_path if scan_path is None else scan_path
        recursive = (
            self._settings.include_subfolders
            if include_subfolders is None
            else include_subfolders
        )

        if not await self.validate_path(path):
            raise ConfigError(path, "missing or not a directory")

        documents = await self._store.list_documents(
            path, recursive, self._settings.document_extensions_list,
        )
        logger.info(
            "Scanned %s: found %d documents (recursive=%s)",
            path, len(documents), recursive,
        )
        return documents

    async def read_all(
        self,
        documents: Sequence[DocumentHandle],
        on_progress: ProgressCallback | None = None,
    ) -> list[DocumentContent]:
        """Read every document's full text, skipping unreadable ones."""
        batch_size = self._settings.read_batch_size
        results: list[DocumentContent] = []
        skipped = 0

        for index, document in enumerate(documents, start=1):
            try:
                content = await self._read_one(document)
            except DocumentReadError as e:
                skipped += 1
                logger.warning("Skipping document: %s", e)
            else:
                results.append(DocumentContent(path=document.path, content=content))

            if on_progress is not None:
                on_progress(
                    ScanProgress(total_documents=len(documents), read_documents=index)
                )

            if index % batch_size == 0:
                await asyncio.sleep(0)

        if skipped:
            logger.info("Read %d documents, skipped %d", len(results), skipped)
        return results

    def compute_fingerprint(
        self,
        documents: Sequence[DocumentHandle],
        settings: Settings | None = None,
    ) -> str:
        """Digest of (path, mtime) for every document plus the active settings."""
        active = self._settings if settings is None else settings
        return compute_corpus_fingerprint(documents, active.snapshot())

    async def current_fingerprint(self) -> str:
        """List the corpus and fingerprint it under the current settings.

        Raises:
            ConfigError: If the scan path is invalid.
        """
        return self.compute_fingerprint(await self.list_documents())

    async def _read_one(self, document: DocumentHandle) -> str:
        try:
            return await self._store.read(document)
        except Exception as e:
            raise DocumentReadError(document.path, e) from e
