# src/cache/fingerprint.py — v2
"""Corpus fingerprinting for cache validation.

The fingerprint summarizes which documents were scanned, when each was last
modified, and the settings the scan ran under. Any change to the file set,
to a single modification time, or to a relevant setting yields a new value.
"""

from __future__ import annotations

import hashlib
import json
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from mediaref.cache.models import SettingsSnapshot
    from mediaref.core.models import DocumentHandle


def compute_corpus_fingerprint(
    documents: Iterable[DocumentHandle],
    settings: SettingsSnapshot,
) -> str:
    """Compute a deterministic corpus fingerprint.

    Args:
        documents: Scanned document handles, in any order.
        settings: Settings snapshot the scan ran under.

    Returns:
        Hex SHA-256 digest.
    """
    entries = _sorted_entries(documents)
    payload = json.dumps(entries, separators=(",", ":"), ensure_ascii=False)
    settings_payload = settings.model_dump_json(by_alias=True)
    return _sha256(payload + settings_payload)


def _sorted_entries(documents: Iterable[DocumentHandle]) -> list[list[object]]:
    """(path, mtime) pairs sorted by path; listing order varies across filesystems."""
    return [[d.path, d.mtime] for d in sorted(documents, key=lambda d: d.path)]


def _sha256(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
