# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides settings pointing at temp directories, a small note corpus,
sample catalog items and a controllable clock. No network access.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from mediaref.cache.reference_cache import ReferenceCacheStore
from mediaref.config.settings import Settings
from mediaref.core.models import MediaItem
from mediaref.storage.local_blob_store import LocalBlobStore


class FakeClock:
    """Manually advanced UTC clock for TTL tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def _write_note(root: Path, relative: str, text: str) -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


# === FIXTURES: Sample data ===


@pytest.fixture
def sunset() -> MediaItem:
    return MediaItem(
        id="9F3C2A71-5B1D-4E0A-8C4B-111111111111/L0/001",
        filename="sunset.jpg",
        mediaType="photo",
    )


@pytest.fixture
def sunrise() -> MediaItem:
    return MediaItem(
        id="D41E7B02-0C6A-4B7F-9E2D-222222222222/L0/001",
        filename="sunrise.jpg",
        mediaType="photo",
    )


@pytest.fixture
def clip() -> MediaItem:
    return MediaItem(
        id="77AB90CD-1E2F-4A3B-8C5D-333333333333/L0/001",
        filename="beach-clip.mov",
        mediaType="video",
    )


@pytest.fixture
def catalog(sunset: MediaItem, sunrise: MediaItem, clip: MediaItem) -> list[MediaItem]:
    return [sunset, sunrise, clip]


# === FIXTURES: Corpus and settings ===


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    """Note corpus: one referencing note, one unrelated note, one nested note."""
    root = tmp_path / "vault"
    _write_note(root, "notes/trip.md", "# Trip\n\n![[sunset.jpg]]\n")
    _write_note(root, "notes/todo.md", "- buy milk\n")
    _write_note(root, "notes/archive/old.md", "Clip: ![[beach-clip.mov]]\n")
    _write_note(root, "notes/image.png", "not a note")
    return root


@pytest.fixture
def settings(tmp_path: Path, vault: Path) -> Settings:
    return Settings(
        _env_file=None,
        scan_path=str(vault / "notes"),
        include_subfolders=True,
        cache_path=tmp_path / "cache" / "references-cache.json",
        cache_ttl_minutes=30,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_store(settings: Settings, clock: FakeClock) -> ReferenceCacheStore:
    return ReferenceCacheStore(
        LocalBlobStore(), str(settings.cache_path), clock=clock,
    )
