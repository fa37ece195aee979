# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Item id -> "referenced somewhere in the corpus".
ReferenceMap = dict[str, bool]

MediaKind = Literal["image", "video"]

# Default file extension per media kind, used by the auto-generated
# filename template and the id-based patterns.
DEFAULT_EXTENSIONS: dict[str, str] = {
    "image": "jpg",
    "video": "mov",
}


# === CATALOG ===


class MediaItem(BaseModel):
    """A catalog entry supplied by the caller. Read-only for the core."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str
    filename: str | None = None
    media_kind: MediaKind = Field(default="image", alias="mediaType")
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("media_kind", mode="before")
    @classmethod
    def normalize_kind(cls, v: Any) -> str:
        """Catalogs report photos as 'photo'; anything not a video is an image."""
        if isinstance(v, str) and v.strip().lower() == "video":
            return "video"
        return "image"

    @property
    def extension(self) -> str:
        return DEFAULT_EXTENSIONS[self.media_kind]


# === CORPUS ===


class DocumentHandle(BaseModel):
    """A candidate document found by the corpus scanner."""

    model_config = ConfigDict(frozen=True)

    path: str
    mtime: float


class DocumentContent(BaseModel):
    """Full text of one document read during a scan."""

    path: str
    content: str


class ScanProgress(BaseModel):
    """Progress snapshot reported while documents are being read."""

    total_documents: int
    read_documents: int


# === SCAN STATE ===


class ScanPhase(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"


@dataclass
class ScanState:
    """Single-flight scan state owned by one ReferenceManager.

    ``in_flight`` is set whenever ``phase`` is SCANNING and is the task any
    caller can await to join the running scan.
    """

    phase: ScanPhase = ScanPhase.IDLE
    in_flight: asyncio.Task[ReferenceMap | None] | None = None

    @property
    def is_scanning(self) -> bool:
        return self.phase is ScanPhase.SCANNING


def all_false(items: list[MediaItem]) -> ReferenceMap:
    """Conservative default map: nothing referenced."""
    return {item.id: False for item in items}
