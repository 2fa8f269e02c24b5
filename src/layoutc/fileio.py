"""Crash-safe file writes.

Content goes to a temp file in the target's directory, is fsync'd, and only
then replaces the target, so readers see either the old or the new file.
A group of files is written all or nothing.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from layoutc.exceptions import WriteFailureError


def _stage(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=str(path.parent),
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as f:
        tmp_path = Path(f.name)
        try:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        except BaseException:
            f.close()
            _discard(tmp_path)
            raise
    return tmp_path


def _discard(tmp_path: Path) -> None:
    with contextlib.suppress(FileNotFoundError):
        tmp_path.unlink()

def _backup(path: Path) -> Optional[Path]:
    if not path.exists():
        return None
    fd, name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".bak")
    os.close(fd)
    backup = Path(name)
    shutil.copy2(path, backup)
    return backup


def _rollback(replaced: List[Path], backups: Dict[Path, Optional[Path]]) -> None:
    for path in reversed(replaced):
        backup = backups[path]
        if backup is None:
            _discard(path)
        else:
            os.replace(backup, path)


def atomic_write(path: Path, content: str) -> None:
    """Write `content` to `path` atomically.

    Raises:
        WriteFailureError: If the file cannot be written. The previous
            content of `path`, if any, is left untouched.
    """
    atomic_write_all([(path, content)])


def atomic_write_all(files: Iterable[Tuple[Path, str]]) -> None:
    """Write several files as one unit.

    Every file is staged and every existing target backed up before the
    first target is replaced. If a later replace fails, the targets already
    replaced are restored from their backups (or removed when they did not
    exist before).

    Raises:
        WriteFailureError: If any file cannot be staged or replaced. All
            targets keep their previous content in that case.
    """
    staged: List[Tuple[Path, Path]] = []
    backups: Dict[Path, Optional[Path]] = {}
    try:
        for path, content in files:
            path = Path(path)
            try:
                staged.append((_stage(path, content), path))
                backups[path] = _backup(path)
            except OSError as e:
                raise WriteFailureError(path, e) from e

        replaced: List[Path] = []
        for tmp_path, path in staged:
            try:
                os.replace(tmp_path, path)
            except OSError as e:
                _rollback(replaced, backups)
                raise WriteFailureError(path, e) from e
            replaced.append(path)
    finally:
        for tmp_path, _ in staged:
            if tmp_path.exists():
                _discard(tmp_path)
        for backup in backups.values():
            if backup is not None and backup.exists():
                _discard(backup)
