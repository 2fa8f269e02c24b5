"""Container converters - stacks chosen by the layout strategy selector."""

from __future__ import annotations

from typing import List

from layoutc.ast.node import LayoutNode
from layoutc.compiler.converters.base import (
    INDENT,
    ConversionContext,
    Converter,
    swift_color,
    swift_number,
)
from layoutc.compiler.layout import parent_anchors, sibling_anchors
from layoutc.compiler.spec import Axis, LayoutPlan, Strategy

_PARENT_EDGE = {
    ("vertical", "top"): ".parent(.top)",
    ("vertical", "bottom"): ".parent(.bottom)",
    ("vertical", "center"): ".parent(.centerVertical)",
    ("horizontal", "left"): ".parent(.leading)",
    ("horizontal", "right"): ".parent(.trailing)",
    ("horizontal", "center"): ".parent(.centerHorizontal)",
}


def _weight(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


class ContainerConverter(Converter):
    """View / SafeAreaView"""

    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        children = [c for c in node.children if c.is_renderable]
        if not children:
            return ["Color.clear"]
        plan = ctx.selector.plan(node, children)
        return self.stack(node, plan, ctx)

    def stack(self, node: LayoutNode, plan: LayoutPlan, ctx: ConversionContext) -> List[str]:
        spacing = swift_number(node.get("spacing"), ctx.model) or "0"

        if plan.strategy is Strategy.LAYERED:
            head = f"ZStack(alignment: .{plan.alignment}) {{"
        elif plan.strategy is Strategy.RELATIVE:
            head = f"RelativePositionContainer(alignment: .{plan.alignment}) {{"
        else:
            prefix = "Weighted" if plan.strategy is Strategy.WEIGHTED else ""
            stack = "VStack" if plan.axis is Axis.VERTICAL else "HStack"
            head = f"{prefix}{stack}(alignment: .{plan.alignment}, spacing: {spacing}) {{"

        lines = [head]
        if plan.leading_filler:
            lines.append(INDENT + "Spacer(minLength: 0)")

        for index, child in enumerate(plan.children):
            if index and plan.fillers_between:
                lines.append(INDENT + "Spacer(minLength: 0)")
            fragment = ctx.registry.convert(child, ctx)
            lines.extend(fragment.indented())
            lines.extend(
                INDENT * 2 + m for m in self.placement(child, index, plan)
            )

        if plan.trailing_filler:
            lines.append(INDENT + "Spacer(minLength: 0)")
        lines.append("}")
        return lines

    def placement(self, child: LayoutNode, index: int, plan: LayoutPlan) -> List[str]:
        """Modifiers positioning `child` inside the container."""
        if plan.strategy is Strategy.LAYERED:
            return [f".zIndex({index})"]

        if plan.strategy is Strategy.WEIGHTED:
            weight = plan.weights[index]
            return [f".weight({_weight(weight)})"] if weight > 0 else []

        if plan.strategy is Strategy.RELATIVE:
            anchors = [_PARENT_EDGE[pin] for pin in sorted(parent_anchors(child))]
            anchors += [
                f'.{relation}("{other}")'
                for relation, other in sorted(sibling_anchors(child).items())
            ]
            ident = child.get("id")
            if not anchors and not isinstance(ident, str):
                return []
            ident_arg = f'"{ident}"' if isinstance(ident, str) else "nil"
            return [f".relativePosition(id: {ident_arg}, anchors: [{', '.join(anchors)}])"]

        return []


class ScrollConverter(ContainerConverter):
    """Scroll / ScrollView"""

    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        axis = ".horizontal" if node.get("orientation") == "horizontal" else ".vertical"
        args = axis
        if node.get("showsIndicators") is False:
            args += ", showsIndicators: false"

        children = [c for c in node.children if c.is_renderable]
        lines = [f"ScrollView({args}) {{"]
        if len(children) == 1:
            lines.extend(ctx.registry.convert(children[0], ctx).indented())
        elif children:
            content = LayoutNode(
                kind="View",
                attributes={"orientation": axis.lstrip(".")},
                children=tuple(children),
            )
            plan = ctx.selector.plan(content, children)
            lines.extend(INDENT + line for line in self.stack(content, plan, ctx))
        lines.append("}")
        return lines


_GRADIENT_POINTS = {
    "Horizontal": "startPoint: .leading, endPoint: .trailing",
    "Oblique": "startPoint: .topLeading, endPoint: .bottomTrailing",
}


class GradientViewConverter(ContainerConverter):
    """Container drawn over a linear gradient."""

    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        lines = super().body(node, ctx)
        stops = node.get("gradient")
        if not isinstance(stops, list):
            return lines
        colors = [c for c in (swift_color(s, ctx.model) for s in stops) if c]
        if colors:
            points = _GRADIENT_POINTS.get(
                node.get("gradientDirection"), "startPoint: .top, endPoint: .bottom"
            )
            lines.append(
                INDENT + f".background(LinearGradient(colors: [{', '.join(colors)}], {points}))"
            )
        return lines


class BlurConverter(ContainerConverter):
    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        lines = super().body(node, ctx)
        lines.append(INDENT + ".background(.ultraThinMaterial)")
        scheme = node.get("style")
        if scheme in ("dark", "light"):
            lines.append(INDENT + f".environment(\\.colorScheme, .{scheme})")
        return lines


class TableConverter(Converter):
    """Static rows in a plain list."""

    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        lines = ["List {"]
        for child in node.children:
            if child.is_renderable:
                lines.extend(ctx.registry.convert(child, ctx).indented())
        lines.append("}")
        lines.append(INDENT + ".listStyle(.plain)")
        return lines


class CollectionConverter(Converter):
    """Static cells in a grid; one column falls back to a table."""

    def body(self, node: LayoutNode, ctx: ConversionContext) -> List[str]:
        columns = node.get("columns", 2)
        if not isinstance(columns, int) or isinstance(columns, bool) or columns < 1:
            columns = 2
        if columns == 1:
            return TableConverter().body(node, ctx)

        spacing = swift_number(node.get("itemSpacing"), ctx.model) or "10"
        grid = (
            f"LazyVGrid(columns: Array(repeating: GridItem(.flexible(), spacing: {spacing}), "
            f"count: {columns}), spacing: {spacing}) {{"
        )
        lines = ["ScrollView {", INDENT + grid]
        for child in node.children:
            if child.is_renderable:
                lines.extend(ctx.registry.convert(child, ctx).indented(2))
        lines.append(INDENT + "}")
        lines.append("}")
        return lines
