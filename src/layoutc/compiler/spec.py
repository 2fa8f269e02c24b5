"""Compiler IR - what the pipeline hands from one stage to the next."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Tuple

from layoutc.ast.node import LayoutNode
from layoutc.exceptions import InvalidAttributeError


class Strategy(str, Enum):
    """How a container composes its children."""

    SEQUENTIAL = "sequential"
    WEIGHTED = "weighted"
    RELATIVE = "relative"
    LAYERED = "layered"


class Axis(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass
class LayoutPlan:
    """Output of the layout strategy selector for one container."""

    strategy: Strategy
    axis: Optional[Axis] = None
    children: List[LayoutNode] = field(default_factory=list)
    leading_filler: bool = False
    trailing_filler: bool = False
    fillers_between: bool = False
    # stack alignment across the primary axis, or the layered anchor
    alignment: str = "topLeading"
    weights: List[float] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class IncludeDirective:
    """A reference to a partial plus its variable map."""

    name: str
    variables: Tuple[Tuple[str, Any], ...] = ()

    @property
    def variable_map(self) -> dict:
        return dict(self.variables)


@dataclass
class BindingDeclaration:
    """A typed data slot of the generated data artifact."""

    name: str
    value_kind: str = "String"
    default: Any = None
    has_default: bool = False
    source_path: str = "root"


@dataclass
class ActionBinding:
    """(triggering node, event, handler expression)"""

    node_id: str
    event: str
    handler: str


@dataclass
class Bindings:
    declarations: List[BindingDeclaration] = field(default_factory=list)
    actions: List[ActionBinding] = field(default_factory=list)
    warnings: List[InvalidAttributeError] = field(default_factory=list)

    def declaration(self, name: str) -> Optional[BindingDeclaration]:
        for d in self.declarations:
            if d.name == name:
                return d
        return None


@dataclass
class Fragment:
    """Generated code for one node, one entry per line, unindented."""

    lines: List[str] = field(default_factory=list)

    def indented(self, level: int = 1, width: int = 4) -> List[str]:
        pad = " " * (level * width)
        return [pad + line if line else line for line in self.lines]

    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass
class Artifact:
    """One generated file, rendered but not yet written."""

    path: Path
    group: str
    content: str


@dataclass
class GeneratedArtifact:
    """A written file as reported to the project-manifest collaborator."""

    path: Path
    group: str
