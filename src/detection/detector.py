# src/detection/detector.py — v1
"""Reference detector: decide per media item whether a note references it.

``detect`` is a pure function of (content, items, settings).
``detect_across_corpus`` ORs the per-document maps together, so the result
does not depend on document order and a match can never be undone by a
later document.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Sequence

from mediaref.core.models import ReferenceMap, all_false
from mediaref.detection.patterns import PatternSpec, evaluate, generate_patterns

if TYPE_CHECKING:
    from mediaref.config.settings import Settings
    from mediaref.core.models import DocumentContent, MediaItem

logger = logging.getLogger(__name__)


class ReferenceDetector:
    """Match catalog items against document text."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def update_settings(self, settings: Settings) -> None:
        self._settings = settings

    def is_enabled(self) -> bool:
        return self._settings.detection_enabled

    def generate_patterns(self, item: MediaItem) -> list[PatternSpec]:
        return generate_patterns(item, self._settings)

    def detect(self, content: str, items: Sequence[MediaItem]) -> ReferenceMap:
        """Map each item id to whether any of its patterns occurs in content."""
        return self._detect(content, items, self._patterns_for(items))

    def detect_across_corpus(
        self,
        documents: Iterable[DocumentContent],
        items: Sequence[MediaItem],
    ) -> ReferenceMap:
        """OR-reduce per-document detection over the whole corpus."""
        patterns = self._patterns_for(items)
        aggregated = all_false(list(items))

        for document in documents:
            pending = [item for item in items if not aggregated[item.id]]
            if not pending:
                break
            found = self._detect(document.content, pending, patterns)
            for item_id, referenced in found.items():
                if referenced:
                    aggregated[item_id] = True

        referenced_count = sum(1 for v in aggregated.values() if v)
        logger.info(
            "Detection complete: %d/%d media items referenced",
            referenced_count, len(aggregated),
        )
        return aggregated

    def _patterns_for(
        self, items: Sequence[MediaItem],
    ) -> dict[str, list[PatternSpec]]:
        return {item.id: generate_patterns(item, self._settings) for item in items}

    def _detect(
        self,
        content: str,
        items: Sequence[MediaItem],
        patterns: dict[str, list[PatternSpec]],
    ) -> ReferenceMap:
        results = all_false(list(items))
        for item in items:
            for spec in patterns[item.id]:
                if evaluate(spec, content):
                    results[item.id] = True
                    logger.debug(
                        "Found reference for %s (%s) via %s",
                        item.id, item.filename, spec.kind,
                    )
                    break
        return results
