# src/cache/models.py — v1
"""Cache domain models: SettingsSnapshot, CacheSnapshot, CacheStats.

Persisted field names are camelCase so the cache file stays readable by the
other tools sharing it; Python code uses the snake_case attributes.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SettingsSnapshot(_CamelModel):
    """Settings a cached scan depends on. Compared field by field."""

    scan_path: str
    include_subfolders: bool
    external_domain: str | None = None


class CacheSnapshot(_CamelModel):
    """One persisted scan result."""

    schema_version: str
    last_scan_timestamp: datetime
    settings_snapshot: SettingsSnapshot
    corpus_fingerprint: str
    references: dict[str, bool] = Field(default_factory=dict)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


class CacheStats(BaseModel):
    """Read-only cache introspection."""

    total_entries: int = 0
    referenced_count: int = 0
    last_scan: datetime | None = None
    approx_size_bytes: int = 0
