"""Dependency Tracker - records partials and styles touched by one document."""

from __future__ import annotations

import logging
from typing import Set

from pydantic import BaseModel

log = logging.getLogger(__name__)


class DependencyRecord(BaseModel):
    """Partials and styles one top-level document transitively loaded."""

    partials: list[str] = []
    styles: list[str] = []

    def identifiers(self) -> list[tuple[str, str]]:
        """(kind, identifier) pairs, partials first."""
        return [("partial", p) for p in self.partials] + [
            ("style", s) for s in self.styles
        ]


class DependencyTracker:
    """Side channel filled in while one document is resolved.

    One instance per top-level document compile; never shared between
    workers.
    """

    def __init__(self, document_id: str):
        self.document_id = document_id
        self._partials: Set[str] = set()
        self._styles: Set[str] = set()

    def record_partial(self, name: str) -> None:
        if name not in self._partials:
            log.debug(f"{self.document_id}: depends on partial {name}")
        self._partials.add(name)

    def record_style(self, name: str) -> None:
        if name not in self._styles:
            log.debug(f"{self.document_id}: depends on style {name}")
        self._styles.add(name)

    def record(self) -> DependencyRecord:
        return DependencyRecord(
            partials=sorted(self._partials), styles=sorted(self._styles)
        )
