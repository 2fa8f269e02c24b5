"""Shared fixtures: throwaway projects under tmp_path."""

import json
import os
from pathlib import Path

import pytest

from layoutc.ast.parser import DocumentStore
from layoutc.config import ProjectConfig


class Project:
    """A project directory with helpers to write documents."""

    def __init__(self, root: Path):
        self.root = root
        self.config = ProjectConfig()
        self.paths = self.config.paths(root)
        self.paths.layouts.mkdir(parents=True)
        self.paths.styles.mkdir(parents=True)

    def _write(self, path: Path, data) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        text = data if isinstance(data, str) else json.dumps(data, indent=2)
        path.write_text(text)
        return path

    def layout(self, name: str, data) -> Path:
        return self._write(self.paths.layouts / f"{name}.json", data)

    def style(self, name: str, data) -> Path:
        return self._write(self.paths.styles / f"{name}.json", data)

    def store(self) -> DocumentStore:
        return DocumentStore(self.paths.layouts, self.paths.styles, "_")


def touch_later(path: Path, seconds: float = 100) -> None:
    """Move a file's mtime into the future."""
    stat = path.stat()
    os.utime(path, (stat.st_atime, stat.st_mtime + seconds))


@pytest.fixture
def project(tmp_path: Path) -> Project:
    return Project(tmp_path)
