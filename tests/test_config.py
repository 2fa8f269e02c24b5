"""Tests for configuration, logging setup and atomic writes."""

import logging
import os
from pathlib import Path

import pytest
from rich.logging import RichHandler

from layoutc import fileio
from layoutc.config import ProjectConfig
from layoutc.exceptions import WriteFailureError
from layoutc.fileio import atomic_write, atomic_write_all
from layoutc.logs import setup_logging


def test_defaults_without_file(tmp_path):
    config = ProjectConfig.load(tmp_path)

    assert config.layouts_directory == "Layouts"
    assert config.substitution == "tree"
    assert config.strict_bindings is True
    assert "onClick" in config.event_attributes


def test_load_yaml(tmp_path):
    (tmp_path / "layoutc.yaml").write_text(
        "layouts_directory: ui/layouts\nsubstitution: text\nworkers: 3\n"
    )

    config = ProjectConfig.load(tmp_path)
    paths = config.paths(tmp_path)

    assert config.substitution == "text"
    assert config.workers == 3
    assert paths.layouts == tmp_path.resolve() / "ui" / "layouts"


def test_invalid_yaml_shape(tmp_path):
    (tmp_path / "layoutc.yaml").write_text("- just\n- a list\n")

    with pytest.raises(ValueError):
        ProjectConfig.load(tmp_path)


def test_invalid_substitution_rejected(tmp_path):
    (tmp_path / "layoutc.yaml").write_text("substitution: regex\n")

    with pytest.raises(ValueError):
        ProjectConfig.load(tmp_path)


def test_setup_logging_levels(monkeypatch):
    monkeypatch.delenv("LAYOUTC_DEBUG", raising=False)
    logger = logging.getLogger("layoutc")

    try:
        setup_logging()
        assert logger.level == logging.WARNING
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.propagate is False

        setup_logging(verbose=True)
        assert logger.level == logging.INFO

        monkeypatch.setenv("LAYOUTC_DEBUG", "1")
        setup_logging()
        assert logger.level == logging.DEBUG
    finally:
        logger.handlers = []
        logger.setLevel(logging.NOTSET)
        logger.propagate = True


def test_atomic_write_replaces_content(tmp_path):
    target = tmp_path / "out" / "file.txt"

    atomic_write(target, "one")
    atomic_write(target, "two")

    assert target.read_text() == "two"
    assert [p.name for p in target.parent.iterdir()] == ["file.txt"]


def test_atomic_write_all_is_all_or_nothing(tmp_path):
    first = tmp_path / "a.txt"
    first.write_text("old")
    blocker = tmp_path / "blocked"
    blocker.write_text("")

    with pytest.raises(WriteFailureError) as exc:
        atomic_write_all([(first, "new"), (blocker / "b.txt", "new")])

    assert exc.value.path == blocker / "b.txt"
    assert first.read_text() == "old"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["a.txt", "blocked"]


def test_atomic_write_all_rolls_back_replaced_files(tmp_path, monkeypatch):
    first = tmp_path / "a.txt"
    first.write_text("old a")
    last = tmp_path / "b.txt"
    last.write_text("old b")
    created = tmp_path / "c.txt"
    real_replace = os.replace

    def failing_replace(src, dst):
        if Path(dst) == last and str(src).endswith(".tmp"):
            raise OSError("disk full")
        return real_replace(src, dst)

    monkeypatch.setattr(fileio.os, "replace", failing_replace)

    with pytest.raises(WriteFailureError) as exc:
        atomic_write_all([(first, "new a"), (created, "new c"), (last, "new b")])

    assert exc.value.path == last
    assert first.read_text() == "old a"
    assert last.read_text() == "old b"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["a.txt", "b.txt"]
