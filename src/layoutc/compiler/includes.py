"""Include Expander - replaces `include` nodes with their partial documents.

Variables reach the partial in one of two ways:

- tree (default): the partial is parsed first, then every string leaf that
  equals a variable name is replaced by the variable's value, keeping its
  JSON type. Marker keys (``@@NAME@@``) are also replaced inside longer
  strings. Object keys and ``data`` declarations are never rewritten.
- text: the raw source is rewritten before parsing. Marker keys are
  replaced verbatim wherever they occur; other keys only where they appear
  as a whole quoted token ``"key"`` that is not a declared ``"name"``.
"""

from __future__ import annotations

import copy
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple

from layoutc.ast.node import LayoutNode
from layoutc.ast.parser import DocumentStore, read_file
from layoutc.compiler.spec import IncludeDirective
from layoutc.compiler.tracker import DependencyTracker
from layoutc.exceptions import CyclicIncludeError, InvalidAttributeError

log = logging.getLogger(__name__)

INCLUDE_KEY = "include"
VARIABLES_KEY = "variables"
DATA_KEY = "data"

_MARKER = re.compile(r"^@@.+@@$")
_DECLARED_NAME = r'("name"\s*:\s*)?'


def is_marker(key: str) -> bool:
    """Whether `key` is a global marker such as ``@@TITLE@@``."""
    return bool(_MARKER.match(key))


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)


def substitute_text(source: str, variables: Dict[str, Any]) -> str:
    """Literal replacement on raw partial source.

    A quoted token that is the value of a ``"name"`` key is left alone so
    data declarations keep the slot names the variables target.
    """
    # longest first so a key never clobbers a longer key containing it
    for key in sorted(variables, key=len, reverse=True):
        value = variables[key]
        if is_marker(key):
            source = source.replace(key, _as_text(value))
            continue

        token = re.compile(_DECLARED_NAME + re.escape(json.dumps(key)))
        replacement = json.dumps(value)
        source = token.sub(
            lambda m: m.group(0) if m.group(1) else replacement, source
        )
    return source


def substitute_tree(data: Any, variables: Dict[str, Any]) -> Any:
    """Whole-value replacement on a parsed partial."""
    if not variables:
        return data

    markers = sorted((k for k in variables if is_marker(k)), key=len, reverse=True)

    def visit(value: Any) -> Any:
        if isinstance(value, str):
            if value in variables:
                return copy.deepcopy(variables[value])
            for marker in markers:
                if marker in value:
                    value = value.replace(marker, _as_text(variables[marker]))
            return value
        if isinstance(value, dict):
            return {
                k: (v if k == DATA_KEY and isinstance(v, list) else visit(v))
                for k, v in value.items()
            }
        if isinstance(value, list):
            return [visit(v) for v in value]
        return value

    return visit(data)


class IncludeExpander:
    """Loads partials for `include` nodes and hands back the replacement."""

    def __init__(
        self,
        store: DocumentStore,
        tracker: Optional[DependencyTracker] = None,
        substitution: Literal["tree", "text"] = "tree",
    ):
        self.store = store
        self.tracker = tracker
        self.substitution = substitution
        self.warnings: List[InvalidAttributeError] = []

    def directive(
        self, node: LayoutNode, node_path: str = "root"
    ) -> Optional[IncludeDirective]:
        name = node.attributes.get(INCLUDE_KEY)
        if not isinstance(name, str) or not name:
            self._warn(INCLUDE_KEY, node_path, "include name must be a non-empty string")
            return None

        variables = node.attributes.get(VARIABLES_KEY) or {}
        if not isinstance(variables, dict):
            self._warn(VARIABLES_KEY, node_path, "variables must be an object")
            variables = {}
        return IncludeDirective(name=name, variables=tuple(variables.items()))

    def expand(
        self,
        node: LayoutNode,
        scope_vars: Dict[str, Any],
        chain: Sequence[Path] = (),
        node_path: str = "root",
    ) -> Tuple[LayoutNode, Optional[Path]]:
        """Replace an include node with its partial.

        The result still needs resolving: the partial may reference
        styles or further partials.

        Args:
            node: Node carrying an `include` attribute.
            scope_vars: Variables of the enclosing scope.
            chain: Resolved paths of the documents currently being
                expanded, outermost first.
            node_path: Location of the node, used in messages.

        Returns:
            (replacement subtree, resolved partial path). An include whose
            name is not a string is dropped with a warning and the node is
            returned without it, paired with None.

        Raises:
            NotFoundError: If neither partial candidate exists.
            CyclicIncludeError: If the partial is already in `chain`.
            ParseError: If the partial is malformed.
        """
        directive = self.directive(node, node_path)
        if directive is None:
            return self._strip(node), None

        where = f"{node.source or '<document>'} at {node_path}"
        path = self.store.find_partial(directive.name, referenced_by=where).resolve()

        if path in chain:
            cycle = list(chain[list(chain).index(path):]) + [path]
            raise CyclicIncludeError(cycle)

        if self.tracker is not None:
            self.tracker.record_partial(directive.name)

        variables = dict(scope_vars)
        variables.update(directive.variable_map)

        source = read_file(path)
        if self.substitution == "text":
            data = self.store.parse(substitute_text(source, variables), path)
        else:
            data = substitute_tree(self.store.parse(source, path), variables)

        partial = self.store.node_from_data(data, path, directive.name)

        # the include node's own attributes override the partial root's
        overrides = {
            k: v
            for k, v in node.attributes.items()
            if k not in (INCLUDE_KEY, VARIABLES_KEY)
        }
        attributes = dict(partial.attributes)
        attributes.update(overrides)
        log.debug(f"Expanded {directive.name} at {node_path} from {path}")

        return partial.with_attributes(attributes).with_scope(variables), path

    def _strip(self, node: LayoutNode) -> LayoutNode:
        return node.with_attributes(
            {
                k: v
                for k, v in node.attributes.items()
                if k not in (INCLUDE_KEY, VARIABLES_KEY)
            }
        )

    def _warn(self, attribute: str, node_path: str, reason: str) -> None:
        warning = InvalidAttributeError(attribute, node_path, reason)
        log.warning(str(warning))
        self.warnings.append(warning)
