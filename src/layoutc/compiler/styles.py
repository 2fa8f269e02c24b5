"""Style Resolver - merges named style documents under node attributes."""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Mapping, Optional

from layoutc.ast.node import CHILD_KEY, CHILDREN_KEY, KIND_KEYS, LayoutNode
from layoutc.ast.parser import DocumentStore
from layoutc.compiler.tracker import DependencyTracker
from layoutc.exceptions import InvalidAttributeError, NotFoundError

log = logging.getLogger(__name__)

STYLE_KEY = "style"


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge `override` on top of `base`.

    Nested mappings merge with the same rule; any other value, lists
    included, replaces the base value wholesale.
    """
    merged: Dict[str, Any] = {k: copy.deepcopy(v) for k, v in base.items()}
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class StyleResolver:
    """Applies a node's `style` reference.

    Only the node itself is resolved; the resolution driver walks the tree.
    """

    def __init__(self, store: DocumentStore, tracker: Optional[DependencyTracker] = None):
        self.store = store
        self.tracker = tracker
        self.warnings: List[InvalidAttributeError] = []

    def resolve(self, node: LayoutNode, node_path: str = "root") -> LayoutNode:
        """Return `node` with its style merged in and the reference removed.

        Args:
            node: The node to resolve. Returned unchanged without a style.
            node_path: Location of the node, used in error messages.

        Raises:
            NotFoundError: If the named style does not exist.
        """
        if STYLE_KEY not in node.attributes:
            return node

        name = node.attributes[STYLE_KEY]
        if not isinstance(name, str) or not name:
            warning = InvalidAttributeError(
                STYLE_KEY, node_path, "style name must be a non-empty string"
            )
            log.warning(str(warning))
            self.warnings.append(warning)
            return node.with_attributes(
                {k: v for k, v in node.attributes.items() if k != STYLE_KEY}
            )

        where = f"{node.source or '<document>'} at {node_path}"
        try:
            style = self.store.load_style(name, referenced_by=where)
        except NotFoundError:
            log.error(f"Missing style {name} ({where})")
            raise
        if self.tracker is not None:
            self.tracker.record_style(name)

        style_attributes = {
            k: v
            for k, v in style.items()
            if k not in KIND_KEYS and k not in (CHILD_KEY, CHILDREN_KEY, STYLE_KEY)
        }
        own = {k: v for k, v in node.attributes.items() if k != STYLE_KEY}
        attributes = deep_merge(style_attributes, own)

        kind = node.kind
        if kind is None:
            for key in KIND_KEYS:
                if isinstance(style.get(key), str):
                    kind = style[key]
                    break

        children = node.children
        single = node.single_child
        if not children and (CHILD_KEY in style or CHILDREN_KEY in style):
            styled = self.store.node_from_data(
                {CHILD_KEY: style.get(CHILD_KEY, style.get(CHILDREN_KEY))},
                self.store.style_path(name),
                node.source,
            )
            children, single = styled.children, styled.single_child

        return LayoutNode(
            kind=kind,
            attributes=attributes,
            children=children,
            single_child=single,
            scope=node.scope,
            source=node.source,
        )
