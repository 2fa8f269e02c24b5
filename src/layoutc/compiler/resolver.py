"""Resolver - turns a raw layout document into a tree free of styles and includes.

Style resolution and include expansion interleave per node: an expanded
partial is resolved again because it may carry styles or further includes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Literal, Optional, Sequence, Tuple

from layoutc.ast.node import LayoutNode, child_path
from layoutc.ast.parser import DocumentStore
from layoutc.compiler.includes import INCLUDE_KEY, IncludeExpander
from layoutc.compiler.styles import STYLE_KEY, StyleResolver
from layoutc.compiler.tracker import DependencyTracker
from layoutc.exceptions import InvalidAttributeError

log = logging.getLogger(__name__)


class Resolver:
    """Resolves one top-level document at a time."""

    def __init__(
        self,
        store: DocumentStore,
        tracker: Optional[DependencyTracker] = None,
        substitution: Literal["tree", "text"] = "tree",
    ):
        self.store = store
        self.tracker = tracker
        self.styles = StyleResolver(store, tracker)
        self.includes = IncludeExpander(store, tracker, substitution)

    @property
    def warnings(self) -> List[InvalidAttributeError]:
        return self.styles.warnings + self.includes.warnings

    def resolve(self, document_id: str) -> LayoutNode:
        """Load and fully resolve a top-level document.

        Raises:
            NotFoundError: Missing document, partial or style.
            ParseError: Malformed document, partial or style.
            CyclicIncludeError: A partial includes itself.
        """
        root = self.store.load(document_id)
        path = self.store.document_path(document_id).resolve()
        return self.resolve_node(root, chain=(path,))

    def resolve_node(
        self,
        node: LayoutNode,
        chain: Sequence[Path] = (),
        node_path: str = "root",
    ) -> LayoutNode:
        node, chain = self._expand(node, tuple(chain), node_path)
        node = self.styles.resolve(node, node_path)

        # a style may bring an include back in
        if INCLUDE_KEY in node.attributes:
            return self.resolve_node(node, chain, node_path)

        children = tuple(
            self.resolve_node(c, chain, child_path(node_path, i))
            for i, c in enumerate(node.children)
        )
        return node.with_children(children)

    def _expand(
        self, node: LayoutNode, chain: Tuple[Path, ...], node_path: str
    ) -> Tuple[LayoutNode, Tuple[Path, ...]]:
        while INCLUDE_KEY in node.attributes:
            node, path = self.includes.expand(node, node.scope, chain, node_path)
            if path is not None:
                chain = chain + (path,)
        return node, chain


def is_resolved(node: LayoutNode) -> bool:
    """True when no node of the tree carries a style or include reference."""
    return all(
        STYLE_KEY not in n.attributes and INCLUDE_KEY not in n.attributes
        for _, n in node.walk()
    )
