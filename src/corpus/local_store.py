# src/corpus/local_store.py — v1
"""Local filesystem document store (default backend)."""

from __future__ import annotations

from pathlib import Path

from mediaref.core.models import DocumentHandle
from mediaref.corpus.base_document_store import BaseDocumentStore


class LocalDocumentStore(BaseDocumentStore):
    """Serve corpus documents from a directory tree.

    Document paths are POSIX-style and relative to ``base_path`` when one is
    given, so fingerprints survive moving the whole tree.
    """

    def __init__(self, base_path: str | None = None) -> None:
        self._base = Path(base_path).expanduser() if base_path else None

    def _resolve(self, path: str) -> Path:
        if self._base is not None:
            return self._base / path
        return Path(path).expanduser()

    def _relative(self, path: Path) -> str:
        if self._base is not None:
            return path.relative_to(self._base).as_posix()
        return path.as_posix()

    async def is_container(self, path: str) -> bool:
        return self._resolve(path).is_dir()

    async def list_documents(
        self, path: str, recursive: bool, extensions: list[str],
    ) -> list[DocumentHandle]:
        root = self._resolve(path)
        allowed = {f".{e.lower()}" for e in extensions}

        pattern_fn = root.rglob if recursive else root.glob
        documents: list[DocumentHandle] = []
        for p in pattern_fn("*"):
            if not p.is_file() or p.suffix.lower() not in allowed:
                continue
            documents.append(
                DocumentHandle(path=self._relative(p), mtime=p.stat().st_mtime)
            )
        return documents

    async def read(self, document: DocumentHandle) -> str:
        return self._resolve(document.path).read_text(encoding="utf-8")

    async def mod_time(self, document: DocumentHandle) -> float:
        return self._resolve(document.path).stat().st_mtime
