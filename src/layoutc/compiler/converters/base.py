"""Converter base class and SwiftUI value helpers."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

from layoutc.ast.node import LayoutNode
from layoutc.compiler.bindings import binding_expression
from layoutc.compiler.layout import LayoutStrategySelector
from layoutc.compiler.spec import Fragment

if TYPE_CHECKING:
    from layoutc.compiler.converters import ConverterRegistry

INDENT = "    "

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass
class ConversionContext:
    """What a converter needs besides the node itself."""

    registry: "ConverterRegistry"
    selector: LayoutStrategySelector = field(default_factory=LayoutStrategySelector)
    model: str = "viewModel"


def data_ref(expression: str, model: str = "viewModel") -> str:
    return f"{model}.data.{expression}"


def swift_string(value: Any, model: str = "viewModel") -> str:
    """A Swift string expression: a data reference or a quoted literal."""
    expression = binding_expression(value)
    if expression:
        return data_ref(expression, model)
    text = str(value)
    text = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{text}"'


def swift_number(value: Any, model: str = "viewModel") -> Optional[str]:
    expression = binding_expression(value)
    if expression:
        return f"CGFloat({data_ref(expression, model)})"
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def swift_size(value: Any, model: str = "viewModel") -> Optional[str]:
    """Frame dimension; None for wrapContent or anything unusable."""
    if value == "matchParent":
        return ".infinity"
    if value == "wrapContent":
        return None
    return swift_number(value, model)


def swift_color(value: Any, model: str = "viewModel") -> Optional[str]:
    expression = binding_expression(value)
    if expression:
        return data_ref(expression, model)
    if not isinstance(value, str) or not value:
        return None
    if _HEX_COLOR.match(value):
        return f'Color(hex: "{value}")'
    return f'Color("{value}")'


def handler_call(expression: str, model: str = "viewModel") -> str:
    if _IDENTIFIER.match(expression):
        return f"{model}.{expression}()"
    return f"{model}.{expression}"


class Converter(ABC):
    """Turns one node into SwiftUI code.

    Subclasses build the view expression in `body`; the common modifiers
    (frame, padding, background, gestures, ...) are appended here. Names
    listed in `consumes` are handled by the subclass and skipped by the
    common modifiers.
    """

    consumes: tuple = ()

    def convert(self, node: LayoutNode, ctx: ConversionContext) -> Fragment:
        lines = self.body(node, ctx)
        lines.extend(INDENT + m for m in self.modifiers(node, ctx))
        return Fragment(lines)

    @abstractmethod
    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        pass

    def modifiers(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        a = node.attributes
        m = ctx.model
        out: List[str] = []

        width = swift_size(a.get("width"), m)
        height = swift_size(a.get("height"), m)
        if width or height:
            out.append(_frame(width, height))

        out.extend(_edge_insets(a.get("padding", a.get("paddings")), m))
        out.extend(_sides(a, "padding{}", ("Left", "Right", "Top", "Bottom"), m))

        background = swift_color(a.get("background"), m)
        if background:
            out.append(f".background({background})")

        radius = swift_number(a.get("cornerRadius"), m)
        if radius:
            out.append(f".cornerRadius({radius})")

        border_width = swift_number(a.get("borderWidth"), m)
        border_color = swift_color(a.get("borderColor"), m)
        if border_width and border_color:
            out.append(
                f".overlay(RoundedRectangle(cornerRadius: {radius or 0})"
                f".stroke({border_color}, lineWidth: {border_width}))"
            )

        out.extend(_edge_insets(a.get("margin", a.get("margins")), m))
        out.extend(_sides(a, "{}Margin", ("left", "right", "top", "bottom"), m))

        opacity = swift_number(a.get("opacity", a.get("alpha")), m)
        if opacity is not None:
            out.append(f".opacity({opacity})")

        if a.get("hidden") is True or a.get("visibility") in ("invisible", "gone"):
            out.append(".hidden()")
        if a.get("enabled") is False:
            out.append(".disabled(true)")

        out.extend(self._gestures(node, ctx))
        return out

    def _gestures(self, node: LayoutNode, ctx: ConversionContext) -> Iterable[str]:
        gestures = (("onClick", ".onTapGesture"), ("onLongPress", ".onLongPressGesture"))
        for attribute, modifier in gestures:
            if attribute in self.consumes:
                continue
            expression = binding_expression(node.get(attribute))
            if expression:
                yield f"{modifier} {{ {handler_call(expression, ctx.model)} }}"


def _frame(width: Optional[str], height: Optional[str]) -> str:
    if ".infinity" not in (width, height):
        parts = [f"width: {width}" if width else "", f"height: {height}" if height else ""]
        return f".frame({', '.join(p for p in parts if p)})"

    # flexible frames cannot mix with fixed width/height arguments
    parts = []
    for name, value in (("Width", width), ("Height", height)):
        if value == ".infinity":
            parts.append(f"max{name}: .infinity")
        elif value:
            parts.append(f"min{name}: {value}, max{name}: {value}")
    return f".frame({', '.join(parts)})"


def _edge_insets(value: Any, model: str = "viewModel") -> List[str]:
    if value is None:
        return []
    if isinstance(value, list):
        values = [swift_number(v, model) for v in value]
        if None in values:
            return []
        if len(values) == 1:
            return [f".padding({values[0]})"]
        if len(values) == 2:
            return [f".padding(.vertical, {values[0]})", f".padding(.horizontal, {values[1]})"]
        if len(values) == 4:
            top, right, bottom, left = values
            return [
                f".padding(.top, {top})",
                f".padding(.trailing, {right})",
                f".padding(.bottom, {bottom})",
                f".padding(.leading, {left})",
            ]
        return []
    number = swift_number(value, model)
    return [f".padding({number})"] if number is not None else []


_EDGES = {"left": ".leading", "right": ".trailing", "top": ".top", "bottom": ".bottom"}


def _sides(
    attributes: dict, pattern: str, names: Iterable[str], model: str = "viewModel"
) -> List[str]:
    out = []
    for name in names:
        number = swift_number(attributes.get(pattern.format(name)), model)
        if number is not None:
            out.append(f".padding({_EDGES[name.lower()]}, {number})")
    return out
