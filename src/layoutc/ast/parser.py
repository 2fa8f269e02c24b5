"""Document Store - locates and parses layout, partial and style documents."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, List, Optional

import msgspec

from layoutc.ast.node import LayoutNode
from layoutc.exceptions import NotFoundError, ParseError

log = logging.getLogger(__name__)

DOCUMENT_SUFFIX = ".json"

_BYTE_OFFSET = re.compile(r"\(byte (\d+)\)")


def read_file(path: Path) -> str:
    """Read a document as UTF-8 text."""
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(path, f"not valid UTF-8: {e.reason}", e.start) from e


def parse_json(text: str, path: Path) -> Any:
    """Decode JSON text, reporting the byte offset of malformed input.

    Raises:
        ParseError: If the text is not valid JSON.
    """
    try:
        return msgspec.json.decode(text.encode("utf-8"))
    except msgspec.DecodeError as e:
        detail = str(e)
        m = _BYTE_OFFSET.search(detail)
        offset = int(m.group(1)) if m else None
        raise ParseError(path, detail, offset) from e


def _strip_suffix(name: str) -> str:
    return name[: -len(DOCUMENT_SUFFIX)] if name.endswith(DOCUMENT_SUFFIX) else name


class DocumentStore:
    """Reads documents from a project's layout and style directories.

    Pure: every call goes to the filesystem, nothing is cached.
    """

    def __init__(self, layouts_dir: Path, styles_dir: Path, partial_prefix: str = "_"):
        self.layouts_dir = Path(layouts_dir)
        self.styles_dir = Path(styles_dir)
        self.partial_prefix = partial_prefix

    # Top-level documents

    def document_path(self, identifier: str) -> Path:
        return self.layouts_dir / f"{_strip_suffix(identifier)}{DOCUMENT_SUFFIX}"

    def load(self, identifier: str) -> LayoutNode:
        """Load and parse a top-level layout document.

        Args:
            identifier: Path of the document relative to the layouts
                directory, without the .json suffix.

        Returns:
            The parsed, unresolved tree.

        Raises:
            NotFoundError: If no file matches.
            ParseError: If the file is malformed.
        """
        path = self.document_path(identifier)
        if not path.is_file():
            raise NotFoundError(identifier, "document", [path])
        return self.parse_node(read_file(path), path, identifier)

    def discover(self) -> List[str]:
        """List top-level document identifiers, partials excluded."""
        if not self.layouts_dir.is_dir():
            return []

        styles_dir = self.styles_dir.resolve()
        found = []
        for path in self.layouts_dir.rglob(f"*{DOCUMENT_SUFFIX}"):
            if self.partial_prefix and path.name.startswith(self.partial_prefix):
                continue
            if path.resolve().is_relative_to(styles_dir):
                continue
            rel = path.relative_to(self.layouts_dir).with_suffix("")
            found.append(rel.as_posix())
        return sorted(found)

    # Partials

    def partial_candidates(self, name: str) -> List[Path]:
        """Paths tried for a partial, in lookup order."""
        name = _strip_suffix(name)
        directory, _, base = name.rpartition("/")
        folder = self.layouts_dir / directory if directory else self.layouts_dir
        candidates = []
        if self.partial_prefix:
            candidates.append(folder / f"{self.partial_prefix}{base}{DOCUMENT_SUFFIX}")
        candidates.append(folder / f"{base}{DOCUMENT_SUFFIX}")
        return candidates

    def partial_path(self, name: str) -> Optional[Path]:
        for candidate in self.partial_candidates(name):
            if candidate.is_file():
                return candidate
        return None

    def find_partial(self, name: str, referenced_by: Optional[str] = None) -> Path:
        """Resolve a partial name to its file.

        Raises:
            NotFoundError: Naming every candidate tried.
        """
        path = self.partial_path(name)
        if path is None:
            raise NotFoundError(
                name, "partial", self.partial_candidates(name), referenced_by
            )
        log.debug(f"Partial {name} -> {path}")
        return path

    # Styles

    def style_path(self, name: str) -> Path:
        return self.styles_dir / f"{_strip_suffix(name)}{DOCUMENT_SUFFIX}"

    def load_style(self, name: str, referenced_by: Optional[str] = None) -> dict:
        """Load a style document as a raw attribute mapping.

        Raises:
            NotFoundError: If the style file does not exist.
            ParseError: If it is malformed or not a JSON object.
        """
        path = self.style_path(name)
        if not path.is_file():
            raise NotFoundError(name, "style", [path], referenced_by)
        data = parse_json(read_file(path), path)
        if not isinstance(data, dict):
            raise ParseError(path, "style document must be a JSON object")
        return data

    # Parsing

    def parse(self, text: str, path: Path) -> Any:
        return parse_json(text, path)

    def parse_node(self, text: str, path: Path, source: Optional[str] = None) -> LayoutNode:
        return self.node_from_data(parse_json(text, path), path, source)

    def node_from_data(self, data: Any, path: Path, source: Optional[str] = None) -> LayoutNode:
        try:
            return LayoutNode.from_dict(data, source)
        except TypeError as e:
            raise ParseError(path, str(e)) from e
