"""Leaf widget converters."""

from __future__ import annotations

from typing import List

from layoutc.ast.node import LayoutNode
from layoutc.compiler.bindings import binding_expression
from layoutc.compiler.converters.base import (
    INDENT,
    ConversionContext,
    Converter,
    handler_call,
    swift_color,
    swift_number,
    swift_string,
)

_TEXT_ALIGN = {"left": ".leading", "center": ".center", "right": ".trailing"}
_TOGGLE_STYLES = {
    "switch": "SwitchToggleStyle()",
    "button": "ButtonToggleStyle()",
    "checkbox": "CheckboxToggleStyle()",
}
_CONTENT_MODE = {
    "aspectFit": ".fit",
    "fit": ".fit",
    "aspectFill": ".fill",
    "fill": ".fill",
}


def text_style(node: LayoutNode, ctx: ConversionContext) -> List[str]:
    out = []
    size = swift_number(node.get("fontSize"), ctx.model)
    font = node.get("font")
    if font == "bold":
        if size:
            out.append(f".font(.system(size: {size}))")
        out.append(".fontWeight(.bold)")
    elif isinstance(font, str) and font:
        out.append(f'.font(.custom("{font}", size: {size or 17}))')
    elif size:
        out.append(f".font(.system(size: {size}))")

    color = swift_color(node.get("fontColor"), ctx.model)
    if color:
        out.append(f".foregroundColor({color})")

    lines = node.get("lines")
    if isinstance(lines, int) and not isinstance(lines, bool):
        out.append(f".lineLimit({lines if lines > 0 else 'nil'})")

    align = _TEXT_ALIGN.get(node.get("textAlign"))
    if align:
        out.append(f".multilineTextAlignment({align})")
    return out


def two_way(value, ctx: ConversionContext, fallback: str) -> str:
    """A SwiftUI Binding for `value`: `$model.data.x` or a constant."""
    expression = binding_expression(value)
    if expression:
        return f"${ctx.model}.data.{expression}"
    return f".constant({fallback})"


class LabelConverter(Converter):
    """Label / Text"""

    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        text = swift_string(node.get("text", ""), ctx.model)
        return [f"Text({text})"] + [INDENT + m for m in text_style(node, ctx)]


class ButtonConverter(Converter):
    consumes = ("onClick",)

    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        expression = binding_expression(node.get("onClick"))
        action = f"{{ {handler_call(expression, ctx.model)} }}" if expression else "{}"
        text = swift_string(node.get("text", "Button"), ctx.model)

        lines = [f"Button(action: {action}) {{"]
        lines.append(INDENT + f"Text({text})")
        lines.extend(INDENT * 2 + m for m in text_style(node, ctx))
        lines.append("}")
        return lines


class ImageConverter(Converter):
    """Image / CircleImage"""

    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        src = node.get("src", node.get("image", ""))
        expression = binding_expression(src)
        name = f"{ctx.model}.data.{expression}" if expression else swift_string(src)
        lines = [f"Image({name})", INDENT + ".resizable()"]

        mode = _CONTENT_MODE.get(node.get("contentMode"), ".fit")
        lines.append(INDENT + f".aspectRatio(contentMode: {mode})")
        if node.kind == "CircleImage":
            lines.append(INDENT + ".clipShape(Circle())")
        return lines


class NetworkImageConverter(Converter):
    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        url = swift_string(node.get("url", node.get("src", "")), ctx.model)
        mode = _CONTENT_MODE.get(node.get("contentMode"), ".fit")
        return [
            f"AsyncImage(url: URL(string: {url})) {{ image in",
            INDENT + "image",
            INDENT * 2 + ".resizable()",
            INDENT * 2 + f".aspectRatio(contentMode: {mode})",
            "} placeholder: {",
            INDENT + "ProgressView()",
            "}",
        ]


class TextFieldConverter(Converter):
    consumes = ("onSubmit",)

    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        hint = swift_string(node.get("hint", node.get("placeholder", "")), ctx.model)
        text = two_way(node.get("text"), ctx, '""')
        field = "SecureField" if node.get("secure") is True else "TextField"

        lines = [f"{field}({hint}, text: {text})"]
        lines.extend(INDENT + m for m in text_style(node, ctx))
        expression = binding_expression(node.get("onSubmit"))
        if expression:
            lines.append(INDENT + f".onSubmit {{ {handler_call(expression, ctx.model)} }}")
        return lines


class ToggleConverter(Converter):
    """Toggle / Switch / Check / Checkbox"""

    consumes = ("onValueChange",)

    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        checked = node.get("isOn", node.get("checked", False))
        is_on = two_way(checked, ctx, "true" if checked is True else "false")
        label = node.get("text")
        lines = [f"Toggle({swift_string(label or '', ctx.model)}, isOn: {is_on})"]
        if not label:
            lines.append(INDENT + ".labelsHidden()")

        style = _TOGGLE_STYLES.get(node.get("toggleStyle"))
        if style:
            lines.append(INDENT + f".toggleStyle({style})")

        expression = binding_expression(node.get("onValueChange"))
        source = binding_expression(checked)
        if expression and source:
            lines.append(
                INDENT
                + f".onChange(of: {ctx.model}.data.{source}) {{ _ in "
                + f"{handler_call(expression, ctx.model)} }}"
            )
        return lines


class SpacerConverter(Converter):
    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        return ["Spacer()"]


class PlaceholderConverter(Converter):
    """Stand-in for kinds nothing is registered for."""

    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        kind = node.kind or "<none>"
        return [
            f"Text({swift_string(f'Unsupported component: {kind}')})",
            INDENT + ".foregroundColor(.red)",
        ]

    def modifiers(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        return []


class IconLabelConverter(Converter):
    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        text = swift_string(node.get("text", ""), ctx.model)
        system = node.get("systemIcon")
        icon = node.get("icon", node.get("src"))
        if isinstance(system, str) and system:
            head = f"Label({text}, systemImage: {swift_string(system)})"
        elif icon is not None:
            head = f"Label({text}, image: {swift_string(icon, ctx.model)})"
        else:
            head = f"Text({text})"
        return [head] + [INDENT + m for m in text_style(node, ctx)]


class TextViewConverter(Converter):
    """Multi-line text input."""

    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        text = two_way(node.get("text"), ctx, '""')
        lines = [f"TextEditor(text: {text})"]
        lines.extend(INDENT + m for m in text_style(node, ctx))

        hint = node.get("hint")
        expression = binding_expression(node.get("text"))
        if isinstance(hint, str) and hint and expression:
            color = swift_color(node.get("hintColor"), ctx.model) or ".gray"
            lines += [
                INDENT + ".overlay(alignment: .topLeading) {",
                INDENT * 2 + f"if {ctx.model}.data.{expression}.isEmpty {{",
                INDENT * 3 + f"Text({swift_string(hint)})",
                INDENT * 4 + f".foregroundColor({color})",
                INDENT * 4 + ".allowsHitTesting(false)",
                INDENT * 2 + "}",
                INDENT + "}",
            ]
        return lines


def _on_change(node: LayoutNode, source_attribute: str, ctx: ConversionContext) -> List[str]:
    expression = binding_expression(node.get("onValueChange"))
    source = binding_expression(node.get(source_attribute))
    if not (expression and source):
        return []
    return [
        INDENT
        + f".onChange(of: {ctx.model}.data.{source}) {{ _ in "
        + f"{handler_call(expression, ctx.model)} }}"
    ]


class SliderConverter(Converter):
    consumes = ("onValueChange",)

    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        low = node.get("minimumValue", 0)
        high = node.get("maximumValue", 1)
        bounds = node.get("range")
        if isinstance(bounds, list) and len(bounds) == 2:
            low, high = bounds
        low = swift_number(low, ctx.model) or "0"
        high = swift_number(high, ctx.model) or "1"

        value = two_way(node.get("value"), ctx, swift_number(node.get("value")) or low)
        lines = [f"Slider(value: {value}, in: {low}...{high})"]

        tint = swift_color(node.get("tintColor"), ctx.model)
        if tint:
            lines.append(INDENT + f".accentColor({tint})")
        lines.extend(_on_change(node, "value", ctx))
        return lines


class ProgressConverter(Converter):
    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        progress = node.get("progress", 0)
        expression = binding_expression(progress)
        if expression:
            value = f"{ctx.model}.data.{expression}"
        else:
            value = swift_number(progress) or "0"
        lines = [f"ProgressView(value: {value})"]

        tint = swift_color(node.get("progressTintColor"), ctx.model)
        if tint:
            lines.append(INDENT + f".tint({tint})")
        track = swift_color(node.get("trackTintColor"), ctx.model)
        if track:
            lines.append(INDENT + f".background({track})")
        return lines


class IndicatorConverter(Converter):
    """Activity indicator."""

    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        if node.get("isAnimating") is False and node.get("hidesWhenStopped") is not False:
            return ["EmptyView()"]

        lines = ["ProgressView()", INDENT + ".progressViewStyle(.circular)"]
        tint = swift_color(
            node.get("color", node.get("tintColor", node.get("tint"))), ctx.model
        )
        if tint:
            lines.append(INDENT + f".tint({tint})")
        return lines


def _items(node: LayoutNode) -> List[str]:
    items = node.get("items")
    if not isinstance(items, list):
        return []
    return [str(item) for item in items]


class SegmentConverter(Converter):
    consumes = ("onValueChange",)

    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        selected = node.get("selectedIndex", node.get("selectedTabIndex", 0))
        selection = two_way(selected, ctx, swift_number(selected) or "0")

        lines = [f'Picker("", selection: {selection}) {{']
        for index, item in enumerate(_items(node)):
            lines.append(INDENT + f"Text({swift_string(item)}).tag({index})")
        lines.append("}")
        lines.append(INDENT + ".pickerStyle(.segmented)")
        lines.extend(_on_change(node, "selectedIndex", ctx))
        return lines


class RadioConverter(Converter):
    """One option of a radio group.

    `group` binds the group's selected value; tapping the option stores
    the option's `id` there.
    """

    consumes = ("onClick",)

    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        option = node.get("value", node.get("id", "radio"))
        option = swift_string(str(option))
        group = binding_expression(node.get("group"))

        actions = []
        if group:
            selected = f"{ctx.model}.data.{group} == {option}"
            actions.append(f"{ctx.model}.data.{group} = {option}")
            icon = f'{selected} ? "largecircle.fill.circle" : "circle"'
        else:
            icon = '"circle"'
        handler = binding_expression(node.get("onClick"))
        if handler:
            actions.append(handler_call(handler, ctx.model))

        action = f"{{ {'; '.join(actions)} }}" if actions else "{}"
        lines = [f"Button(action: {action}) {{", INDENT + "HStack {"]
        lines.append(INDENT * 2 + f"Image(systemName: {icon})")
        text = node.get("text")
        if text:
            lines.append(INDENT * 2 + f"Text({swift_string(text, ctx.model)})")
            lines.extend(INDENT * 3 + m for m in text_style(node, ctx))
        lines.append(INDENT + "}")
        lines.append("}")
        lines.append(INDENT + ".buttonStyle(.plain)")
        return lines


class SelectBoxConverter(Converter):
    """Menu picker, or a date picker for selectItemType Date."""

    consumes = ("onValueChange",)

    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        prompt = swift_string(node.get("prompt", ""), ctx.model)

        if node.get("selectItemType") == "Date":
            selection = two_way(node.get("selectedDate"), ctx, "Date()")
            components = {"time": "[.hourAndMinute]", "datetime": "[.date, .hourAndMinute]"}
            shown = components.get(node.get("datePickerMode"), "[.date]")
            lines = [f"DatePicker({prompt}, selection: {selection}, displayedComponents: {shown})"]
            lines.extend(_on_change(node, "selectedDate", ctx))
            return lines

        selection = two_way(node.get("selectedItem"), ctx, '""')
        lines = [f"Picker({prompt}, selection: {selection}) {{"]
        for item in _items(node):
            literal = swift_string(item)
            lines.append(INDENT + f"Text({literal}).tag({literal})")
        lines.append("}")
        lines.append(INDENT + ".pickerStyle(.menu)")
        lines.extend(_on_change(node, "selectedItem", ctx))
        return lines


class WebConverter(Converter):
    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        url = swift_string(node.get("url", ""), ctx.model)
        return [f"WebView(url: URL(string: {url}))"]
