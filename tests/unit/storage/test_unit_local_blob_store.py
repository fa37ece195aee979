# tests/unit/storage/test_unit_local_blob_store.py — v1
"""Tests for storage/local_blob_store.py — filesystem blob backend."""

from __future__ import annotations

from pathlib import Path

import pytest

from mediaref.storage.base_blob_store import BaseBlobStore
from mediaref.storage.local_blob_store import LocalBlobStore


class TestLocalBlobStore:

    def test_is_blob_store(self):
        assert isinstance(LocalBlobStore(), BaseBlobStore)

    @pytest.mark.asyncio
    async def test_write_read_text(self, tmp_path: Path):
        store = LocalBlobStore(str(tmp_path))
        await store.write("cache.json", '{"a": 1}')
        assert await store.exists("cache.json") is True
        assert await store.read("cache.json") == b'{"a": 1}'

    @pytest.mark.asyncio
    async def test_write_bytes(self, tmp_path: Path):
        store = LocalBlobStore(str(tmp_path))
        await store.write("b.bin", b"\x00\x01")
        assert (tmp_path / "b.bin").read_bytes() == b"\x00\x01"

    @pytest.mark.asyncio
    async def test_mkdir_nested(self, tmp_path: Path):
        store = LocalBlobStore(str(tmp_path))
        await store.mkdir("a/b/c")
        await store.mkdir("a/b/c")  # idempotent
        assert (tmp_path / "a" / "b" / "c").is_dir()

    @pytest.mark.asyncio
    async def test_remove(self, tmp_path: Path):
        store = LocalBlobStore(str(tmp_path))
        await store.write("x.json", "{}")
        await store.remove("x.json")
        assert await store.exists("x.json") is False

    @pytest.mark.asyncio
    async def test_remove_missing_raises(self, tmp_path: Path):
        store = LocalBlobStore(str(tmp_path))
        with pytest.raises(FileNotFoundError):
            await store.remove("missing.json")

    @pytest.mark.asyncio
    async def test_absolute_paths_without_base(self, tmp_path: Path):
        store = LocalBlobStore()
        target = tmp_path / "abs.json"
        await store.write(str(target), "{}")
        assert target.exists()
