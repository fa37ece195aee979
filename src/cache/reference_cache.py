# src/cache/reference_cache.py — v1
"""JSON file-based reference cache.

Holds a single snapshot of the last scan in one JSON blob. Loading is
all-or-nothing: an unreadable blob or a schema version other than
``SCHEMA_VERSION`` is treated exactly like a missing cache.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import PurePath
from typing import TYPE_CHECKING, Callable, Mapping

from pydantic import ValidationError

from mediaref.cache.models import CacheSnapshot, CacheStats, SettingsSnapshot
from mediaref.core.errors import CacheCorruptError, PersistError

if TYPE_CHECKING:
    from mediaref.config.settings import Settings
    from mediaref.storage.base_blob_store import BaseBlobStore

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0.0"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReferenceCacheStore:
    """Load, validate and persist the reference cache snapshot."""

    def __init__(
        self,
        blob_store: BaseBlobStore,
        cache_path: str,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._blobs = blob_store
        self._path = str(cache_path)
        self._clock = clock
        self._snapshot: CacheSnapshot | None = None

    @property
    def path(self) -> str:
        return self._path

    @property
    def snapshot(self) -> CacheSnapshot | None:
        """In-memory copy of the last loaded or saved snapshot."""
        return self._snapshot

    # --- Persistence ---

    async def load(self) -> CacheSnapshot | None:
        """Read the persisted snapshot.

        Returns None when the blob is absent, unreadable, malformed or written
        by a different schema version. The in-memory copy is dropped in that
        case too.
        """
        try:
            if not await self._blobs.exists(self._path):
                logger.debug("Cache file does not exist: %s", self._path)
                self._snapshot = None
                return None
            raw = await self._blobs.read(self._path)
            snapshot = self._parse(raw)
        except CacheCorruptError as e:
            logger.warning("Discarding reference cache %s: %s", self._path, e)
            self._snapshot = None
            return None
        except Exception as e:
            logger.warning("Failed to read reference cache %s: %s", self._path, e)
            self._snapshot = None
            return None

        self._snapshot = snapshot
        logger.debug(
            "Loaded reference cache with %d entries", len(snapshot.references),
        )
        return snapshot

    async def save(self, snapshot: CacheSnapshot) -> bool:
        """Persist a snapshot, creating the parent directory if needed.

        Returns False on failure; never raises.
        """
        try:
            await self._write(snapshot)
        except PersistError as e:
            logger.error("Failed to save reference cache: %s", e)
            return False

        self._snapshot = snapshot
        logger.info(
            "Saved reference cache with %d entries", len(snapshot.references),
        )
        return True

    async def clear(self) -> bool:
        """Delete the persisted blob and drop the in-memory copy."""
        try:
            if await self._blobs.exists(self._path):
                await self._blobs.remove(self._path)
                logger.info("Reference cache cleared: %s", self._path)
        except Exception as e:
            logger.error("Failed to clear reference cache %s: %s", self._path, e)
            return False

        self._snapshot = None
        return True

    # --- Snapshot construction ---

    def create_snapshot(
        self,
        settings: SettingsSnapshot,
        fingerprint: str,
        references: Mapping[str, bool] | None = None,
    ) -> CacheSnapshot:
        """Build a fresh snapshot stamped with the current time."""
        return CacheSnapshot(
            schema_version=SCHEMA_VERSION,
            last_scan_timestamp=self._clock(),
            settings_snapshot=settings,
            corpus_fingerprint=fingerprint,
            references=dict(references or {}),
        )

    def merge_references(
        self, existing: CacheSnapshot, updates: Mapping[str, bool],
    ) -> CacheSnapshot:
        """Shallow union where ``updates`` win; timestamp refreshed to now."""
        return existing.model_copy(
            update={
                "references": {**existing.references, **updates},
                "last_scan_timestamp": self._clock(),
            }
        )

    async def update_references(self, updates: Mapping[str, bool]) -> bool:
        """Merge updates into the loaded snapshot and persist it."""
        if self._snapshot is None:
            logger.error("No reference cache loaded, cannot update references")
            return False
        return await self.save(self.merge_references(self._snapshot, updates))

    # --- Validity ---

    def is_expired(self, snapshot: CacheSnapshot, settings: Settings) -> bool:
        """True when older than the TTL or captured under different settings."""
        age = self._clock() - snapshot.last_scan_timestamp
        time_expired = age > timedelta(seconds=settings.cache_ttl_seconds)
        settings_changed = snapshot.settings_snapshot != settings.snapshot()

        if time_expired or settings_changed:
            logger.info(
                "Reference cache expired (time_expired=%s, settings_changed=%s, "
                "last_scan=%s, ttl_minutes=%s)",
                time_expired, settings_changed,
                snapshot.last_scan_timestamp.isoformat(),
                settings.cache_ttl_minutes,
            )
            return True
        return False

    def is_stale(self, snapshot: CacheSnapshot, fresh_fingerprint: str) -> bool:
        """True when the corpus changed since the snapshot was taken."""
        stale = snapshot.corpus_fingerprint != fresh_fingerprint
        if stale:
            logger.info(
                "Corpus changed since last scan (cached=%s, current=%s)",
                snapshot.corpus_fingerprint[:12], fresh_fingerprint[:12],
            )
        return stale

    # --- Introspection ---

    def reference_status(self, item_id: str) -> bool:
        if self._snapshot is None:
            return False
        return self._snapshot.references.get(item_id, False)

    def all_references(self) -> dict[str, bool]:
        if self._snapshot is None:
            return {}
        return dict(self._snapshot.references)

    def stats(self) -> CacheStats:
        """Entry counts and approximate serialized size of the in-memory copy."""
        if self._snapshot is None:
            return CacheStats()

        references = self._snapshot.references
        return CacheStats(
            total_entries=len(references),
            referenced_count=sum(1 for v in references.values() if v),
            last_scan=self._snapshot.last_scan_timestamp,
            approx_size_bytes=len(self._snapshot.to_json().encode("utf-8")),
        )

    # --- Internals ---

    def _parse(self, raw: bytes) -> CacheSnapshot:
        try:
            snapshot = CacheSnapshot.model_validate_json(raw)
        except (ValidationError, ValueError) as e:
            raise CacheCorruptError(f"malformed cache blob: {e}") from e

        if snapshot.schema_version != SCHEMA_VERSION:
            raise CacheCorruptError(
                f"schema version {snapshot.schema_version!r} != {SCHEMA_VERSION!r}"
            )
        if snapshot.last_scan_timestamp.tzinfo is None:
            snapshot = snapshot.model_copy(
                update={
                    "last_scan_timestamp": snapshot.last_scan_timestamp.replace(
                        tzinfo=timezone.utc
                    )
                }
            )
        return snapshot

    async def _write(self, snapshot: CacheSnapshot) -> None:
        parent = str(PurePath(self._path).parent)
        try:
            if parent and not await self._blobs.exists(parent):
                await self._blobs.mkdir(parent)
            await self._blobs.write(self._path, snapshot.to_json())
        except Exception as e:
            raise PersistError(str(e)) from e
