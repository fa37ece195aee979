# tests/unit/config/test_settings.py — v1
"""Tests for config/settings.py — typed Settings and validation rules."""

from __future__ import annotations

import pytest

from mediaref.cache.models import SettingsSnapshot
from mediaref.config.settings import ConfigurationError, Settings, load_settings


class TestSettingsDefaults:
    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.detection_enabled is True
        assert s.include_subfolders is True
        assert s.external_domain is None
        assert s.read_batch_size == 10
        assert s.cache_ttl_minutes == 30

    def test_document_extensions_list(self):
        s = Settings(_env_file=None, document_extensions=" .MD, txt ,,")
        assert s.document_extensions_list == ["md", "txt"]

    def test_ttl_seconds(self):
        s = Settings(_env_file=None, cache_ttl_minutes=2)
        assert s.cache_ttl_seconds == 120


class TestExternalDomain:
    def test_blank_is_none(self):
        s = Settings(_env_file=None, external_domain="   ")
        assert s.external_domain is None

    def test_trailing_slash_stripped(self):
        s = Settings(_env_file=None, external_domain="https://cdn.example.com/")
        assert s.external_domain == "https://cdn.example.com"


class TestSettingsValidation:
    def test_ttl_must_be_positive(self):
        with pytest.raises(ConfigurationError, match="CACHE_TTL_MINUTES"):
            Settings(_env_file=None, cache_ttl_minutes=0)

    def test_batch_size_must_be_positive(self):
        with pytest.raises(ConfigurationError, match="READ_BATCH_SIZE"):
            Settings(_env_file=None, read_batch_size=0)

    def test_extensions_required(self):
        with pytest.raises(ConfigurationError, match="DOCUMENT_EXTENSIONS"):
            Settings(_env_file=None, document_extensions=" , ")


class TestSnapshot:
    def test_snapshot_fields(self):
        s = Settings(
            _env_file=None, scan_path="notes", include_subfolders=False,
            external_domain="https://cdn.example.com",
        )
        assert s.snapshot() == SettingsSnapshot(
            scan_path="notes", include_subfolders=False,
            external_domain="https://cdn.example.com",
        )

    def test_ttl_not_part_of_snapshot(self):
        a = Settings(_env_file=None, cache_ttl_minutes=5)
        b = Settings(_env_file=None, cache_ttl_minutes=50)
        assert a.snapshot() == b.snapshot()


class TestLoadSettings:
    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("SCAN_PATH", "/vault/notes")
        monkeypatch.setenv("INCLUDE_SUBFOLDERS", "false")
        s = Settings(_env_file=None)
        assert s.scan_path == "/vault/notes"
        assert s.include_subfolders is False

    def test_load_with_overrides(self):
        s = load_settings(_env_file=None, scan_path="elsewhere")
        assert s.scan_path == "elsewhere"
