"""Binding Extractor - data slots and action handlers of a resolved tree."""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Optional

from layoutc.ast.node import LayoutNode
from layoutc.compiler.extensions import is_swift_identifier
from layoutc.compiler.spec import ActionBinding, BindingDeclaration, Bindings
from layoutc.config import DEFAULT_EVENT_ATTRIBUTES
from layoutc.exceptions import InvalidAttributeError

log = logging.getLogger(__name__)

DATA_KEY = "data"

_BINDING = re.compile(r"^@\{(.*)\}$", re.DOTALL)


def binding_expression(value: Any) -> Optional[str]:
    """The expression inside an ``@{...}`` string, or None.

    An empty wrapper yields ``""`` so callers can tell it apart from a
    plain string.
    """
    if not isinstance(value, str):
        return None
    m = _BINDING.match(value.strip())
    if m is None:
        return None
    return m.group(1).strip()


class BindingExtractor:
    """Walks a resolved tree once, collecting bindings.

    Args:
        event_attributes: Attribute names treated as events.
        strict: Report malformed entries as InvalidAttributeError
            warnings. When False they are dropped silently.
    """

    def __init__(self, event_attributes: Optional[Iterable[str]] = None, strict: bool = True):
        self.event_attributes = list(event_attributes or DEFAULT_EVENT_ATTRIBUTES)
        self.strict = strict

    def extract(self, root: LayoutNode) -> Bindings:
        bindings = Bindings()
        seen: set = set()

        for path, node in root.walk():
            self._declarations(node, path, bindings, seen)
            self._actions(node, path, bindings)

        log.debug(
            f"Extracted {len(bindings.declarations)} data slots, "
            f"{len(bindings.actions)} actions"
        )
        return bindings

    def _declarations(self, node: LayoutNode, path: str, bindings: Bindings, seen: set) -> None:
        entries = node.get(DATA_KEY)
        if entries is None:
            return
        if not isinstance(entries, list):
            self._invalid(bindings, DATA_KEY, path, "data must be an array")
            return

        for entry in entries:
            declaration = self._declaration(entry, node, path, bindings)
            if declaration is None:
                continue
            if declaration.name in seen:
                log.debug(f"Data slot {declaration.name} at {path} already declared")
                continue
            seen.add(declaration.name)
            bindings.declarations.append(declaration)

    def _declaration(
        self, entry: Any, node: LayoutNode, path: str, bindings: Bindings
    ) -> Optional[BindingDeclaration]:
        if isinstance(entry, str):
            entry = {"name": entry}
        if not isinstance(entry, dict):
            self._invalid(bindings, DATA_KEY, path, f"data entry {entry!r} is not an object")
            return None

        name = entry.get("name")
        if not isinstance(name, str) or not name:
            self._invalid(bindings, DATA_KEY, path, "data entry without a name")
            return None
        if not is_swift_identifier(name):
            self._invalid(
                bindings, f"{DATA_KEY}.{name}", path, "name is not a usable Swift identifier"
            )
            return None

        value_kind = entry.get("class", "String")
        if not isinstance(value_kind, str) or not value_kind:
            self._invalid(bindings, f"{DATA_KEY}.{name}.class", path, "class must be a string")
            value_kind = "String"

        # a value supplied by the including scope overrides the partial's default
        if name in node.scope:
            default, has_default = node.scope[name], True
        elif "defaultValue" in entry:
            default, has_default = entry["defaultValue"], True
        else:
            default, has_default = None, False

        return BindingDeclaration(
            name=name,
            value_kind=value_kind,
            default=default,
            has_default=has_default and default is not None,
            source_path=path,
        )

    def _actions(self, node: LayoutNode, path: str, bindings: Bindings) -> None:
        node_id = node.get("id")
        if not isinstance(node_id, str) or not node_id:
            node_id = path

        for event in self.event_attributes:
            if event not in node.attributes:
                continue
            value = node.attributes[event]
            if not isinstance(value, str):
                self._invalid(bindings, event, path, "handler must be a binding string")
                continue

            handler = binding_expression(value)
            if handler is None:
                log.debug(f"{event} at {path} is not a binding expression, ignored")
                continue
            if not handler:
                self._invalid(bindings, event, path, "empty binding expression")
                continue

            bindings.actions.append(ActionBinding(node_id=node_id, event=event, handler=handler))

    def _invalid(self, bindings: Bindings, attribute: str, path: str, reason: str) -> None:
        if not self.strict:
            return
        warning = InvalidAttributeError(attribute, path, reason)
        log.warning(str(warning))
        bindings.warnings.append(warning)
