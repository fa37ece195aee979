# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings. Only
``scan_path``, ``include_subfolders`` and ``external_domain`` take part in
cache validity; they are captured in every persisted snapshot.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from mediaref.cache.models import SettingsSnapshot


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Corpus ===
    scan_path: str = "."
    include_subfolders: bool = True
    document_extensions: str = "md"
    read_batch_size: int = 10

    # === Detection ===
    detection_enabled: bool = True
    external_domain: str | None = None

    # === Cache ===
    cache_path: Path = Path("~/.mediaref/references-cache.json")
    cache_ttl_minutes: float = 30.0

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("external_domain", mode="before")
    @classmethod
    def normalize_external_domain(cls, v: object) -> object:
        """Blank domain means "not configured"; trailing slashes are dropped."""
        if v is None:
            return None
        if isinstance(v, str):
            v = v.strip().rstrip("/")
            return v or None
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate numeric bounds and the extension list."""
        errors: list[str] = []

        if self.cache_ttl_minutes <= 0:
            errors.append("CACHE_TTL_MINUTES must be > 0")

        if self.read_batch_size < 1:
            errors.append("READ_BATCH_SIZE must be >= 1")

        if not self.document_extensions_list:
            errors.append("DOCUMENT_EXTENSIONS must list at least one extension")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def document_extensions_list(self) -> list[str]:
        """Parse comma-separated extensions, lower-cased and without dots."""
        return [
            e.strip().lstrip(".").lower()
            for e in self.document_extensions.split(",")
            if e.strip().lstrip(".")
        ]

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_minutes * 60.0

    def snapshot(self) -> SettingsSnapshot:
        """Return the subset of settings that a cached scan depends on."""
        from mediaref.cache.models import SettingsSnapshot

        return SettingsSnapshot(
            scan_path=self.scan_path,
            include_subfolders=self.include_subfolders,
            external_domain=self.external_domain,
        )


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-call config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
