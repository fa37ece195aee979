# src/manager/reference_manager.py — v1
"""Reference manager: serve cached reference status, rescan when needed.

Usage:
    from mediaref.manager.reference_manager import ReferenceManager
    manager = ReferenceManager(settings)
    status = await manager.get_status(items)   # never waits for a scan
    fresh = await manager.force_scan(items)    # waits, then rescans

At most one scan runs at a time. The manager owns a ScanState whose
``in_flight`` task is the joinable handle of the running scan: background
triggers are no-ops while it is set, and ``force_scan`` waits on it before
starting its own scan. No public method raises; failures degrade to an
all-false map or ``False``.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import TYPE_CHECKING, Iterable

from mediaref.cache.reference_cache import ReferenceCacheStore
from mediaref.core.errors import ConfigError
from mediaref.core.models import (
    ReferenceMap,
    ScanPhase,
    ScanState,
    all_false,
)
from mediaref.corpus.local_store import LocalDocumentStore
from mediaref.corpus.scanner import CorpusScanner
from mediaref.detection.detector import ReferenceDetector
from mediaref.logging.context import set_scan_context
from mediaref.storage.local_blob_store import LocalBlobStore

if TYPE_CHECKING:
    from mediaref.cache.models import CacheStats
    from mediaref.config.settings import Settings
    from mediaref.core.models import MediaItem
    from mediaref.corpus.base_document_store import BaseDocumentStore
    from mediaref.storage.base_blob_store import BaseBlobStore

logger = logging.getLogger(__name__)


class ReferenceManager:
    """Orchestrate corpus scanning, detection and the reference cache."""

    def __init__(
        self,
        settings: Settings,
        document_store: BaseDocumentStore | None = None,
        blob_store: BaseBlobStore | None = None,
        cache_store: ReferenceCacheStore | None = None,
    ) -> None:
        """Wire the manager's collaborators.

        Args:
            settings: Active settings.
            document_store: Corpus backend. Defaults to the local filesystem.
            blob_store: Cache file backend. Defaults to the local filesystem.
                Ignored when ``cache_store`` is given.
            cache_store: Pre-built cache store (tests inject a fake clock here).
                Its path stays fixed when settings change.
        """
        self._settings = settings
        self._scanner = CorpusScanner(document_store or LocalDocumentStore(), settings)
        self._detector = ReferenceDetector(settings)
        self._blobs = blob_store or LocalBlobStore()
        self._owns_cache = cache_store is None
        self._cache = cache_store or self._build_cache(settings)
        self._state = ScanState()

    # --- Introspection ---

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def cache(self) -> ReferenceCacheStore:
        return self._cache

    @property
    def is_scanning(self) -> bool:
        return self._state.is_scanning

    def is_enabled(self) -> bool:
        return self._detector.is_enabled()

    # --- Public API ---

    async def initialize(self) -> None:
        """Pre-load the persisted cache so stats are available immediately."""
        if not self.is_enabled():
            logger.info("Reference detection is disabled")
            return
        await self._cache.load()

    async def get_status(self, items: Iterable[MediaItem]) -> ReferenceMap:
        """Return reference status without ever waiting for a scan.

        Cache hit: the cached status of each item (unknown ids are False).
        Cache miss: schedule a background scan unless one is running and
        return an all-false map right away.
        """
        items = list(items)
        if not self.is_enabled():
            return all_false(items)

        try:
            cached = await self._cached_references(items)
        except Exception:
            logger.exception("Reference cache lookup failed")
            cached = None

        if cached is not None:
            return cached

        self._trigger_background_scan(items)
        return all_false(items)

    async def force_scan(self, items: Iterable[MediaItem]) -> ReferenceMap:
        """Rescan now, regardless of cache freshness, and return fresh results.

        Waits for any in-flight scan first; scans never overlap.
        """
        items = list(items)
        try:
            await self.wait_for_scan()
            logger.info("Force scanning for %d media items", len(items))
            result = await self._dispatch(items, trigger="forced")
        except Exception:
            logger.exception("Force scan failed")
            return all_false(items)

        return result if result is not None else all_false(items)

    async def wait_for_scan(self) -> None:
        """Block until no scan is in flight."""
        while self._state.in_flight is not None:
            logger.info("Waiting for in-flight scan to complete")
            await asyncio.wait({self._state.in_flight})

    async def clear_cache(self) -> bool:
        logger.info("Clearing reference cache")
        try:
            return await self._cache.clear()
        except Exception:
            logger.exception("Failed to clear reference cache")
            return False

    async def get_stats(self) -> CacheStats:
        """Cache statistics; loads the persisted cache if nothing is in memory."""
        if self._cache.snapshot is None:
            await self._cache.load()
        return self._cache.stats()

    def update_settings(self, settings: Settings) -> None:
        """Switch to new settings.

        A cached snapshot taken under different settings no longer validates.
        A changed ``cache_path`` moves the manager-built cache store to the new
        file; an injected cache store keeps its own path.
        """
        if settings.cache_path != self._settings.cache_path:
            if self._owns_cache:
                logger.info("Reference cache moved to %s", settings.cache_path)
                self._cache = self._build_cache(settings)
            else:
                logger.warning(
                    "cache_path changed but the cache store was injected; "
                    "keeping %s", self._cache.path,
                )

        self._settings = settings
        self._scanner.update_settings(settings)
        self._detector.update_settings(settings)

    def _build_cache(self, settings: Settings) -> ReferenceCacheStore:
        return ReferenceCacheStore(
            self._blobs, str(settings.cache_path.expanduser()),
        )

    # --- Scan orchestration ---

    async def _cached_references(
        self, items: list[MediaItem],
    ) -> ReferenceMap | None:
        snapshot = await self._cache.load()
        if snapshot is None:
            logger.debug("No reference cache available")
            return None

        if self._cache.is_expired(snapshot, self._settings):
            return None

        try:
            fingerprint = await self._scanner.current_fingerprint()
        except ConfigError as e:
            logger.error("Cannot validate reference cache: %s", e)
            return None

        if self._cache.is_stale(snapshot, fingerprint):
            return None

        logger.debug("Using cached references for %d media items", len(items))
        return {item.id: snapshot.references.get(item.id, False) for item in items}

    def _trigger_background_scan(self, items: list[MediaItem]) -> None:
        if self._state.is_scanning:
            logger.debug("Scan already in progress, not starting another")
            return
        logger.info("Starting background reference scan")
        self._dispatch(items, trigger="background")

    def _dispatch(
        self, items: list[MediaItem], trigger: str,
    ) -> asyncio.Task[ReferenceMap | None]:
        """Enter the Scanning phase and start the scan task."""
        task = asyncio.create_task(self._run_scan(items, trigger))
        self._state.phase = ScanPhase.SCANNING
        self._state.in_flight = task
        return task

    async def _run_scan(
        self, items: list[MediaItem], trigger: str,
    ) -> ReferenceMap | None:
        set_scan_context(uuid.uuid4().hex[:8], trigger)
        try:
            return await self._perform_scan(items)
        except ConfigError as e:
            logger.error("Scan aborted: %s", e)
            return None
        except Exception:
            logger.exception("Reference scan failed")
            return None
        finally:
            if self._state.in_flight is asyncio.current_task():
                self._state.in_flight = None
                self._state.phase = ScanPhase.IDLE

    async def _perform_scan(self, items: list[MediaItem]) -> ReferenceMap:
        """Scan the corpus, detect references and persist a new snapshot.

        Every step uses the settings and cache store captured when the scan
        starts. A failed save leaves the previous cache file in place; the
        fresh results are returned either way.

        Raises:
            ConfigError: If the scan path is invalid. The cache is untouched.
        """
        settings = self._settings
        cache = self._cache
        if not await self._scanner.validate_path(settings.scan_path):
            raise ConfigError(settings.scan_path)

        documents = await self._scanner.list_documents(
            settings.scan_path, settings.include_subfolders,
        )
        contents = await self._scanner.read_all(documents)
        references = ReferenceDetector(settings).detect_across_corpus(contents, items)

        fingerprint = self._scanner.compute_fingerprint(documents, settings)
        snapshot = cache.create_snapshot(
            settings.snapshot(), fingerprint, references,
        )
        if not await cache.save(snapshot):
            logger.warning(
                "Scan results not cached; the next status request will rescan",
            )

        logger.info(
            "Scan completed: %d/%d media items referenced across %d documents",
            sum(1 for v in references.values() if v), len(items), len(contents),
        )
        return references
