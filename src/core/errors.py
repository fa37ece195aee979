# src/core/errors.py — v1
"""Error taxonomy for reference detection.

None of these escape the public ReferenceManager surface: the manager and
the cache store catch them, log them, and fall back to a safe default.
"""

from __future__ import annotations


class MediarefError(Exception):
    """Base class for all reference-detection errors."""


class ConfigError(MediarefError):
    """Scan path is missing or is not a directory. Aborts a scan before any I/O."""

    def __init__(self, scan_path: str, reason: str = "not a directory") -> None:
        self.scan_path = scan_path
        self.reason = reason
        super().__init__(f"Invalid scan path {scan_path!r}: {reason}")


class DocumentReadError(MediarefError):
    """A single document could not be read. The document is skipped."""

    def __init__(self, path: str, cause: BaseException | None = None) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to read document {path!r}: {cause}")


class CacheCorruptError(MediarefError):
    """Persisted cache is unparsable or carries a different schema version."""


class PersistError(MediarefError):
    """Cache snapshot could not be written after a successful scan."""
