"""layoutc Exceptions

Errors raised while compiling layout documents. Everything except
InvalidAttributeError is fatal for the document being compiled, never for
the whole batch.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class LayoutError(Exception):
    """Base exception for all layoutc errors."""

    pass


class NotFoundError(LayoutError):
    """Raised when a document, partial or style cannot be located."""

    def __init__(
        self,
        identifier: str,
        what: str = "document",
        candidates: Sequence[Path] = (),
        referenced_by: str | None = None,
    ):
        self.identifier = identifier
        self.what = what
        self.candidates = [Path(c) for c in candidates]
        self.referenced_by = referenced_by

        message = f"{what.capitalize()} not found: {identifier}"
        if referenced_by:
            message += f" (referenced by {referenced_by})"
        if self.candidates:
            tried = ", ".join(str(c) for c in self.candidates)
            message += f"; tried {tried}"
        super().__init__(message)


class ParseError(LayoutError):
    """Raised when a document is not valid JSON."""

    def __init__(self, path: Path | str, detail: str, offset: int | None = None):
        self.path = Path(path)
        self.detail = detail
        self.offset = offset
        where = f"{self.path}" if offset is None else f"{self.path} at byte {offset}"
        super().__init__(f"Malformed document {where}: {detail}")


class CyclicIncludeError(LayoutError):
    """Raised when a partial transitively includes itself."""

    def __init__(self, chain: Sequence[Path]):
        self.chain = [Path(p) for p in chain]
        cycle = " -> ".join(p.name for p in self.chain)
        super().__init__(f"Cyclic include: {cycle}")


class InvalidAttributeError(LayoutError):
    """An attribute that could not be interpreted.

    Not fatal: collected as a warning and the attribute is ignored.
    """

    def __init__(self, attribute: str, node_path: str, reason: str):
        self.attribute = attribute
        self.node_path = node_path
        self.reason = reason
        super().__init__(f"Invalid attribute '{attribute}' at {node_path}: {reason}")


class WriteFailureError(LayoutError):
    """Raised when a generated artifact cannot be written."""

    def __init__(self, path: Path | str, cause: BaseException | str):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to write {self.path}: {cause}")
