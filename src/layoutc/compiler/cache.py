"""Build Cache - decides which documents need recompiling.

Directory structure:
    <project>/
      .layoutc_cache/
        last_updated.txt     # ISO timestamp of the last build that compiled anything
        dependencies.json    # document -> {compiled_at, partials, styles}
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ValidationError

from layoutc.ast.parser import DocumentStore
from layoutc.compiler.tracker import DependencyRecord
from layoutc.fileio import atomic_write

log = logging.getLogger(__name__)


def _utc(ts: float) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)


class CacheEntry(BaseModel):
    """Last successful compile of one top-level document."""

    compiled_at: datetime
    partials: list[str] = []
    styles: list[str] = []

    @property
    def dependencies(self) -> DependencyRecord:
        return DependencyRecord(partials=self.partials, styles=self.styles)


class CacheState(BaseModel):
    documents: Dict[str, CacheEntry] = {}


class BuildCache:
    """Filesystem-backed per-document compile records."""

    LAST_UPDATED_FILE = "last_updated.txt"
    DEPENDENCIES_FILE = "dependencies.json"

    def __init__(self, cache_dir: Path, store: DocumentStore):
        """Initialize the cache.

        Args:
            cache_dir: Directory holding the persisted state.
            store: Used to map recorded identifiers back to files.
        """
        self.cache_dir = Path(cache_dir)
        self.store = store
        self._lock = threading.Lock()

    @property
    def dependencies_path(self) -> Path:
        return self.cache_dir / self.DEPENDENCIES_FILE

    @property
    def last_updated_path(self) -> Path:
        return self.cache_dir / self.LAST_UPDATED_FILE

    def _load(self) -> CacheState:
        path = self.dependencies_path
        if not path.exists():
            return CacheState()
        try:
            return CacheState.model_validate_json(path.read_text(encoding="utf-8"))
        except (ValidationError, ValueError) as e:
            log.warning(f"Ignoring unreadable build cache {path}: {e}")
            return CacheState()

    def _save(self, state: CacheState) -> None:
        atomic_write(self.dependencies_path, state.model_dump_json(indent=2) + "\n")

    def get(self, document_id: str) -> Optional[CacheEntry]:
        return self._load().documents.get(document_id)

    def entries(self) -> Dict[str, CacheEntry]:
        return self._load().documents

    def needs_rebuild(self, document_id: str, mtime: Optional[float] = None) -> bool:
        """Decide whether a document must be recompiled.

        Args:
            document_id: Top-level document identifier.
            mtime: The document's current modification time. Read from
                disk when omitted.

        Returns:
            True if there is no entry, if the document or any recorded
            partial or style changed after the last compile, or if a
            recorded dependency can no longer be found.
        """
        entry = self.get(document_id)
        if entry is None:
            log.debug(f"{document_id}: no cache entry")
            return True

        if mtime is None:
            path = self.store.document_path(document_id)
            if not path.exists():
                return True
            mtime = path.stat().st_mtime

        if _utc(mtime) > entry.compiled_at:
            log.debug(f"{document_id}: document modified since {entry.compiled_at}")
            return True

        for kind, identifier in entry.dependencies.identifiers():
            if kind == "partial":
                dep_path = self.store.partial_path(identifier)
            else:
                dep_path = self.store.style_path(identifier)

            if dep_path is None or not dep_path.exists():
                log.debug(f"{document_id}: {kind} {identifier} no longer found")
                return True
            if _utc(dep_path.stat().st_mtime) > entry.compiled_at:
                log.debug(f"{document_id}: {kind} {identifier} modified")
                return True

        return False

    def commit(
        self,
        document_id: str,
        record: DependencyRecord,
        compiled_at: Optional[datetime] = None,
    ) -> CacheEntry:
        """Replace the entry of one document after it compiled successfully.

        Args:
            document_id: Top-level document identifier.
            record: Dependencies touched by the compile.
            compiled_at: When the compile started. Defaults to now.
        """
        compiled_at = compiled_at or datetime.now(timezone.utc)
        if compiled_at.tzinfo is None:
            compiled_at = compiled_at.replace(tzinfo=timezone.utc)
        entry = CacheEntry(
            compiled_at=compiled_at,
            partials=list(record.partials),
            styles=list(record.styles),
        )
        with self._lock:
            state = self._load()
            state.documents[document_id] = entry
            self._save(state)
        log.debug(f"{document_id}: cache entry committed")
        return entry

    def invalidate(self, document_id: str) -> None:
        with self._lock:
            state = self._load()
            if state.documents.pop(document_id, None) is not None:
                self._save(state)

    def clear(self) -> None:
        """Drop every entry so the next build compiles everything."""
        with self._lock:
            for path in (self.dependencies_path, self.last_updated_path):
                if path.exists():
                    path.unlink()
        log.info("Build cache cleared")

    def last_build(self) -> Optional[datetime]:
        path = self.last_updated_path
        if not path.exists():
            return None
        try:
            return datetime.fromisoformat(path.read_text(encoding="utf-8").strip())
        except ValueError:
            log.warning(f"Ignoring unreadable timestamp in {path}")
            return None

    def mark_build(self, timestamp: Optional[datetime] = None) -> None:
        timestamp = timestamp or datetime.now(timezone.utc)
        with self._lock:
            atomic_write(self.last_updated_path, timestamp.isoformat() + "\n")
