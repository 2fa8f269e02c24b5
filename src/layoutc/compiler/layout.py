"""Layout strategy selection.

Deterministic rules deciding how a container composes its children,
checked in priority order:
1. Relative - children carry anchors and the container has no axis, or
   the anchors conflict (sibling anchors, or opposite parent edges)
2. Weighted - axis container with a weighted child
3. Sequential - any other axis container
4. Layered - no axis

Selection never fails. Values it cannot interpret are reported as
warnings and replaced by neutral defaults; an unrecognized orientation
falls back to Layered with a top-leading anchor.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from layoutc.ast.node import LayoutNode
from layoutc.compiler.spec import Axis, LayoutPlan, Strategy

log = logging.getLogger(__name__)

DEFAULT_ANCHOR = "topLeading"

# anchor attribute -> (axis it pins, edge)
PARENT_ANCHORS: Dict[str, Tuple[str, str]] = {
    "alignTop": ("vertical", "top"),
    "alignBottom": ("vertical", "bottom"),
    "centerVertical": ("vertical", "center"),
    "alignLeft": ("horizontal", "left"),
    "alignRight": ("horizontal", "right"),
    "centerHorizontal": ("horizontal", "center"),
}
CENTER_IN_PARENT = "centerInParent"

# anchor attribute -> relation to the referenced sibling
SIBLING_ANCHORS: Dict[str, str] = {
    "alignTopOfView": "above",
    "alignBottomOfView": "below",
    "alignLeftOfView": "leftOf",
    "alignRightOfView": "rightOf",
    "alignTopView": "alignTop",
    "alignBottomView": "alignBottom",
    "alignLeftView": "alignLeading",
    "alignRightView": "alignTrailing",
}

# relations that cannot hold in both directions at once
_DIRECTIONAL = {"above", "below", "leftOf", "rightOf"}

_REVERSING_DIRECTION = {Axis.VERTICAL: "bottomToTop", Axis.HORIZONTAL: "rightToLeft"}
_FORWARD_DIRECTION = {Axis.VERTICAL: "topToBottom", Axis.HORIZONTAL: "leftToRight"}

_TOKEN_SPLIT = re.compile(r"[|,\s]+")
_VERTICAL_TOKENS = {"top": "top", "bottom": "bottom", "centerVertical": "center"}
_HORIZONTAL_TOKENS = {
    "left": "leading",
    "leading": "leading",
    "start": "leading",
    "right": "trailing",
    "trailing": "trailing",
    "end": "trailing",
    "centerHorizontal": "center",
}


def _truthy(value: Any) -> bool:
    return value is True or (isinstance(value, str) and value.lower() == "true")


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def node_label(node: LayoutNode, index: int) -> str:
    ident = node.get("id")
    return ident if isinstance(ident, str) else f"#{index}"


def parent_anchors(node: LayoutNode) -> Set[Tuple[str, str]]:
    """(axis, edge) pairs a child pins itself to inside its parent."""
    pins = {pin for attr, pin in PARENT_ANCHORS.items() if _truthy(node.get(attr))}
    if _truthy(node.get(CENTER_IN_PARENT)):
        pins.add(("vertical", "center"))
        pins.add(("horizontal", "center"))
    return pins


def sibling_anchors(node: LayoutNode) -> Dict[str, str]:
    """relation -> sibling id"""
    return {
        relation: node.get(attr)
        for attr, relation in SIBLING_ANCHORS.items()
        if isinstance(node.get(attr), str) and node.get(attr)
    }


def has_anchor(node: LayoutNode) -> bool:
    return bool(parent_anchors(node) or sibling_anchors(node))


class LayoutStrategySelector:
    """Chooses a Strategy for each container and plans its children."""

    def select(self, container: LayoutNode, children: Sequence[LayoutNode]) -> Strategy:
        return self.plan(container, children).strategy

    def plan(self, container: LayoutNode, children: Sequence[LayoutNode]) -> LayoutPlan:
        """Build the full layout plan of one container.

        Args:
            container: The container node.
            children: Its resolved children. Data holders are dropped.

        Returns:
            The plan, including any warnings about values that were
            ignored.
        """
        children = [c for c in children if c.is_renderable]
        warnings: List[str] = []

        orientation = container.get("orientation")
        axis: Optional[Axis] = None
        if orientation is not None:
            try:
                axis = Axis(orientation)
            except ValueError:
                warnings.append(f"unknown orientation {orientation!r}")
                return self._finish(
                    LayoutPlan(
                        strategy=Strategy.LAYERED,
                        children=children,
                        alignment=DEFAULT_ANCHOR,
                        warnings=warnings,
                    ),
                    container,
                )

        anchored = [c for c in children if has_anchor(c)]
        if anchored and (axis is None or self._conflicting(anchored, warnings)):
            plan = LayoutPlan(
                strategy=Strategy.RELATIVE,
                axis=axis,
                children=children,
                alignment=self._anchor(container, warnings),
                warnings=warnings,
            )
            return self._finish(plan, container)

        if axis is None:
            if container.get("direction") is not None:
                log.debug("direction ignored on a container without orientation")
            plan = LayoutPlan(
                strategy=Strategy.LAYERED,
                children=children,
                alignment=self._anchor(container, warnings),
                warnings=warnings,
            )
            return self._finish(plan, container)

        children = self._ordered(container, axis, children, warnings)
        weights = [self._weight(c, axis, warnings) for c in children]
        if any(w > 0 for w in weights):
            plan = LayoutPlan(
                strategy=Strategy.WEIGHTED,
                axis=axis,
                children=children,
                alignment=self._cross_alignment(container, axis, warnings),
                weights=weights,
                warnings=warnings,
            )
            return self._finish(plan, container)

        plan = LayoutPlan(
            strategy=Strategy.SEQUENTIAL,
            axis=axis,
            children=children,
            alignment=self._cross_alignment(container, axis, warnings),
            warnings=warnings,
        )
        self._fillers(container, axis, plan)
        return self._finish(plan, container)

    def _finish(self, plan: LayoutPlan, container: LayoutNode) -> LayoutPlan:
        where = container.get("id") or container.kind or "container"
        for warning in plan.warnings:
            log.warning(f"Layout of {where}: {warning}")
        return plan

    def _conflicting(self, anchored: Sequence[LayoutNode], warnings: List[str]) -> bool:
        conflict = False
        relations = {}
        for i, c in enumerate(anchored):
            siblings = sibling_anchors(c)
            if siblings:
                conflict = True
                relations[node_label(c, i)] = siblings

        for me, mine in relations.items():
            for relation, other in mine.items():
                if (
                    relation in _DIRECTIONAL
                    and relations.get(other, {}).get(relation) == me
                    and me < other
                ):
                    warnings.append(
                        f"{me} and {other} are each declared {relation} the other"
                    )

        if len(anchored) > 1:
            edges: Dict[str, Set[str]] = {"vertical": set(), "horizontal": set()}
            for c in anchored:
                for pin_axis, edge in parent_anchors(c):
                    edges[pin_axis].add(edge)
            if len(edges["vertical"]) > 1 or len(edges["horizontal"]) > 1:
                conflict = True

        return conflict

    def _ordered(
        self,
        container: LayoutNode,
        axis: Axis,
        children: List[LayoutNode],
        warnings: List[str],
    ) -> List[LayoutNode]:
        direction = container.get("direction")
        if direction is None or direction == _FORWARD_DIRECTION[axis]:
            return children
        if direction == _REVERSING_DIRECTION[axis]:
            return list(reversed(children))
        warnings.append(f"direction {direction!r} does not apply to a {axis.value} container")
        return children

    def _weight(self, child: LayoutNode, axis: Axis, warnings: List[str]) -> float:
        size_key = "width" if axis is Axis.HORIZONTAL else "height"
        axis_weight_key = "widthWeight" if axis is Axis.HORIZONTAL else "heightWeight"

        for key in ("weight", axis_weight_key):
            raw = child.get(key)
            if raw is None:
                continue
            value = _number(raw)
            if value is None:
                warnings.append(f"{key} {raw!r} is not a number")
                continue
            if value != 0:
                return abs(value)

        size = child.get(size_key)
        if _number(size) == 0 and not isinstance(size, str):
            return 1.0
        return 0.0

    def _tokens(self, container: LayoutNode) -> List[str]:
        raw = container.get("alignment", container.get("gravity"))
        if raw is None:
            return []
        if isinstance(raw, list):
            return [str(t) for t in raw]
        if isinstance(raw, str):
            return [t for t in _TOKEN_SPLIT.split(raw) if t]
        return [repr(raw)]

    def _split(self, container: LayoutNode, warnings: List[str]) -> Tuple[Optional[str], Optional[str]]:
        vertical = horizontal = None
        for token in self._tokens(container):
            if token == "center":
                vertical = vertical or "center"
                horizontal = horizontal or "center"
            elif token in _VERTICAL_TOKENS:
                vertical = _VERTICAL_TOKENS[token]
            elif token in _HORIZONTAL_TOKENS:
                horizontal = _HORIZONTAL_TOKENS[token]
            else:
                warnings.append(f"unknown alignment {token!r}")
        return vertical, horizontal

    def _anchor(self, container: LayoutNode, warnings: List[str]) -> str:
        vertical, horizontal = self._split(container, warnings)
        vertical = vertical or "top"
        horizontal = horizontal or "leading"
        if vertical == "center" and horizontal == "center":
            return "center"
        if vertical == "center":
            return horizontal
        if horizontal == "center":
            return vertical
        return vertical + horizontal.capitalize()

    def _cross_alignment(self, container: LayoutNode, axis: Axis, warnings: List[str]) -> str:
        vertical, horizontal = self._split(container, warnings)
        if axis is Axis.VERTICAL:
            return horizontal or "leading"
        return vertical or "top"

    def _fillers(self, container: LayoutNode, axis: Axis, plan: LayoutPlan) -> None:
        vertical, horizontal = self._split(container, [])
        primary = vertical if axis is Axis.VERTICAL else horizontal
        start = "top" if axis is Axis.VERTICAL else "leading"
        end = "bottom" if axis is Axis.VERTICAL else "trailing"

        if primary == start:
            plan.trailing_filler = True
        elif primary == end:
            plan.leading_filler = True
        elif primary == "center":
            plan.leading_filler = plan.trailing_filler = True

        distribution = container.get("distribution")
        if distribution is None or distribution == "fill":
            return
        if distribution == "equalSpacing":
            plan.fillers_between = True
        elif distribution == "equalCentering":
            plan.fillers_between = True
            plan.leading_filler = plan.trailing_filler = True
        else:
            plan.warnings.append(f"unknown distribution {distribution!r}")
