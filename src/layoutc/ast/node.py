"""Layout document tree.

Nodes are immutable values: resolution steps build new nodes instead of
rewriting shared ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

KIND_KEYS = ("kind", "type")
CHILD_KEY = "child"
CHILDREN_KEY = "children"


@dataclass(frozen=True)
class LayoutNode:
    """One widget in a layout document."""

    kind: Optional[str] = None
    attributes: Dict[str, Any] = field(default_factory=dict)
    children: Tuple["LayoutNode", ...] = ()
    single_child: bool = False
    scope: Dict[str, Any] = field(default_factory=dict, compare=False)
    source: Optional[str] = field(default=None, compare=False)

    @classmethod
    def from_dict(cls, d: Any, source: Optional[str] = None) -> "LayoutNode":
        if not isinstance(d, dict):
            raise TypeError(
                f"Layout node must be a mapping, got {type(d).__name__}"
            )

        kind = None
        for key in KIND_KEYS:
            if key in d:
                kind = d[key]
                break
        if kind is not None and not isinstance(kind, str):
            raise TypeError(f"Layout node 'kind' must be a string, got {kind!r}")

        raw_children = d.get(CHILD_KEY, d.get(CHILDREN_KEY))
        single = False
        if raw_children is None:
            children: Tuple[LayoutNode, ...] = ()
        elif isinstance(raw_children, dict):
            single = True
            children = (cls.from_dict(raw_children, source),)
        elif isinstance(raw_children, list):
            children = tuple(cls.from_dict(c, source) for c in raw_children)
        else:
            raise TypeError("Layout node 'child' must be a mapping or a list")

        attributes = {
            k: v
            for k, v in d.items()
            if k not in KIND_KEYS and k not in (CHILD_KEY, CHILDREN_KEY)
        }
        return cls(
            kind=kind,
            attributes=attributes,
            children=children,
            single_child=single,
            source=source,
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        if self.kind is not None:
            d["kind"] = self.kind
        d.update(self.attributes)
        if self.children:
            if self.single_child and len(self.children) == 1:
                d[CHILD_KEY] = self.children[0].to_dict()
            else:
                d[CHILD_KEY] = [c.to_dict() for c in self.children]
        return d

    @property
    def child(self) -> Optional["LayoutNode"]:
        """The single child, when the document declared one object."""
        if self.single_child and self.children:
            return self.children[0]
        return None

    @property
    def is_renderable(self) -> bool:
        """Data holder nodes (no kind) are walked for bindings only."""
        return self.kind is not None

    def get(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def with_attributes(self, attributes: Dict[str, Any]) -> "LayoutNode":
        return replace(self, attributes=attributes)

    def with_children(self, children: Tuple["LayoutNode", ...]) -> "LayoutNode":
        return replace(self, children=tuple(children))

    def with_scope(self, scope: Dict[str, Any]) -> "LayoutNode":
        """Return a copy of this subtree carrying `scope`."""
        return replace(
            self,
            scope=dict(scope),
            children=tuple(c.with_scope(scope) for c in self.children),
        )

    def walk(self, path: str = "root"):
        """Yield (node_path, node) pairs depth-first."""
        yield path, self
        for i, c in enumerate(self.children):
            yield from c.walk(child_path(path, i))


def child_path(path: str, index: int) -> str:
    return f"{path}.child[{index}]"
