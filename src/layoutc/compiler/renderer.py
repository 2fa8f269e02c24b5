"""Code Emitter - renders and writes the Swift artifacts of one document."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import List, Optional

from layoutc.compiler.extensions import get_swift_jinja_env, is_swift_identifier, pascal_case
from layoutc.compiler.spec import Artifact, Bindings, Fragment, GeneratedArtifact
from layoutc.fileio import atomic_write_all

log = logging.getLogger(__name__)


def view_name(document_id: str, partial_prefix: str = "_") -> str:
    """Swift type prefix for a document: settings/user_profile -> UserProfile"""
    base = PurePosixPath(document_id).name
    if partial_prefix and base.startswith(partial_prefix):
        base = base[len(partial_prefix):]
    return pascal_case(base)


class CodeEmitter:
    """Renders a converted tree plus its bindings to files.

    Directory structure:
        <view_dir>/<sub dirs>/<Name>View.swift
        <data_dir>/<sub dirs>/<Name>Data.swift
    """

    def __init__(
        self,
        view_dir: Path,
        data_dir: Path,
        view_group: str = "View",
        data_group: str = "Data",
        partial_prefix: str = "_",
    ):
        self.view_dir = Path(view_dir)
        self.data_dir = Path(data_dir)
        self.view_group = view_group
        self.data_group = data_group
        self.partial_prefix = partial_prefix
        self.env = get_swift_jinja_env()

    def _target(self, base: Path, document_id: str, file_name: str) -> Path:
        parent = PurePosixPath(document_id).parent
        return base.joinpath(*parent.parts, file_name)

    def render(
        self,
        document_id: str,
        fragment: Fragment,
        bindings: Bindings,
        source: Optional[str] = None,
    ) -> List[Artifact]:
        """Render the view and data artifacts without touching disk.

        Args:
            document_id: Top-level document identifier.
            fragment: Converted root node.
            bindings: Extracted data slots and actions.
            source: Name shown in the generated header.

        Returns:
            [view artifact, data artifact]
        """
        name = view_name(document_id, self.partial_prefix)
        source = source or f"{document_id}.json"

        handlers: List[str] = []
        for action in bindings.actions:
            if is_swift_identifier(action.handler) and action.handler not in handlers:
                handlers.append(action.handler)

        view = self.env.get_template("view.swift.j2").render(
            name=name,
            source=source,
            body="\n".join(fragment.indented(level=2)),
            handlers=handlers,
        )
        data = self.env.get_template("data.swift.j2").render(
            name=name,
            source=source,
            slots=bindings.declarations,
        )

        return [
            Artifact(
                path=self._target(self.view_dir, document_id, f"{name}View.swift"),
                group=self.view_group,
                content=view,
            ),
            Artifact(
                path=self._target(self.data_dir, document_id, f"{name}Data.swift"),
                group=self.data_group,
                content=data,
            ),
        ]

    def write(self, artifacts: List[Artifact]) -> List[GeneratedArtifact]:
        """Write artifacts all-or-nothing.

        Raises:
            WriteFailureError: If any artifact cannot be written. Files
                from the previous build stay as they were.
        """
        atomic_write_all((a.path, a.content) for a in artifacts)
        for a in artifacts:
            log.debug(f"Wrote {a.path}")
        return [GeneratedArtifact(path=a.path, group=a.group) for a in artifacts]

    def emit(
        self,
        document_id: str,
        fragment: Fragment,
        bindings: Bindings,
        source: Optional[str] = None,
    ) -> List[GeneratedArtifact]:
        return self.write(self.render(document_id, fragment, bindings, source))
