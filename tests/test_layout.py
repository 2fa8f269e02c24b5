"""Tests for layout strategy selection."""

from layoutc.ast.node import LayoutNode
from layoutc.compiler.layout import LayoutStrategySelector
from layoutc.compiler.spec import Axis, Strategy


def node(kind="View", children=(), **attributes) -> LayoutNode:
    return LayoutNode(kind=kind, attributes=attributes, children=tuple(children))


def select(container: LayoutNode) -> Strategy:
    return LayoutStrategySelector().select(container, container.children)


def test_zero_height_child_in_vertical_container_is_weighted():
    container = node(orientation="vertical", children=[node("Label", height=0), node("Label")])

    assert select(container) is Strategy.WEIGHTED


def test_zero_size_on_cross_axis_is_not_weighted():
    container = node(orientation="vertical", children=[node("Label", width=0)])

    assert select(container) is Strategy.SEQUENTIAL


def test_weights_in_plan():
    container = node(
        orientation="horizontal",
        children=[node("Label", weight=2), node("Label", widthWeight=1), node("Label")],
    )

    plan = LayoutStrategySelector().plan(container, container.children)

    assert plan.strategy is Strategy.WEIGHTED
    assert plan.axis is Axis.HORIZONTAL
    assert plan.weights == [2.0, 1.0, 0.0]


def test_mutual_above_selects_relative():
    """Two children each declared above the other."""
    container = node(
        orientation="vertical",
        children=[
            node("Label", id="a", alignTopOfView="b"),
            node("Label", id="b", alignTopOfView="a"),
        ],
    )

    plan = LayoutStrategySelector().plan(container, container.children)

    assert plan.strategy is Strategy.RELATIVE
    assert any("a and b" in w for w in plan.warnings)


def test_anchors_without_axis_select_relative():
    container = node(children=[node("Label", alignBottom=True)])

    assert select(container) is Strategy.RELATIVE


def test_opposite_parent_edges_conflict_on_axis_container():
    container = node(
        orientation="horizontal",
        children=[node("Label", alignTop=True), node("Label", alignBottom=True)],
    )

    assert select(container) is Strategy.RELATIVE


def test_single_parent_anchor_on_axis_container_stays_sequential():
    container = node(orientation="vertical", children=[node("Label", centerHorizontal=True)])

    assert select(container) is Strategy.SEQUENTIAL


def test_sequential_fillers_follow_alignment():
    selector = LayoutStrategySelector()

    top = node(orientation="vertical", alignment="top", children=[node("Label")])
    plan = selector.plan(top, top.children)
    assert (plan.leading_filler, plan.trailing_filler) == (False, True)

    bottom = node(orientation="vertical", gravity="bottom|right", children=[node("Label")])
    plan = selector.plan(bottom, bottom.children)
    assert (plan.leading_filler, plan.trailing_filler) == (True, False)
    assert plan.alignment == "trailing"

    centered = node(orientation="horizontal", alignment="center", children=[node("Label")])
    plan = selector.plan(centered, centered.children)
    assert (plan.leading_filler, plan.trailing_filler) == (True, True)
    assert plan.alignment == "center"

    plain = node(orientation="vertical", children=[node("Label")])
    plan = selector.plan(plain, plain.children)
    assert (plan.leading_filler, plan.trailing_filler, plan.fillers_between) == (False, False, False)


def test_distribution_inserts_fillers_between():
    container = node(
        orientation="horizontal",
        distribution="equalSpacing",
        children=[node("Label"), node("Label")],
    )

    plan = LayoutStrategySelector().plan(container, container.children)

    assert plan.fillers_between
    assert not plan.leading_filler


def test_direction_reverses_axis_containers():
    a, b = node("Label", id="a"), node("Label", id="b")
    container = node(orientation="vertical", direction="bottomToTop", children=[a, b])

    plan = LayoutStrategySelector().plan(container, container.children)

    assert plan.children == [b, a]


def test_layered_keeps_order_and_anchor():
    a, b = node("Label", id="a"), node("Label", id="b")
    container = node(alignment="bottom|right", direction="bottomToTop", children=[a, b])

    plan = LayoutStrategySelector().plan(container, container.children)

    assert plan.strategy is Strategy.LAYERED
    assert plan.children == [a, b]
    assert plan.alignment == "bottomTrailing"


def test_layered_default_anchor():
    container = node(children=[node("Label")])

    plan = LayoutStrategySelector().plan(container, container.children)

    assert plan.strategy is Strategy.LAYERED
    assert plan.alignment == "topLeading"


def test_invalid_orientation_falls_back_to_layered():
    container = node(orientation="diagonal", alignment="center", children=[node("Label", alignTop=True)])

    plan = LayoutStrategySelector().plan(container, container.children)

    assert plan.strategy is Strategy.LAYERED
    assert plan.alignment == "topLeading"
    assert plan.warnings


def test_bad_weight_is_warning_not_failure():
    container = node(orientation="vertical", children=[node("Label", weight="lots")])

    plan = LayoutStrategySelector().plan(container, container.children)

    assert plan.strategy is Strategy.SEQUENTIAL
    assert plan.warnings


def test_data_holders_are_not_laid_out():
    holder = LayoutNode(attributes={"data": [{"name": "x"}]})
    container = node(orientation="vertical", children=[holder, node("Label")])

    plan = LayoutStrategySelector().plan(container, container.children)

    assert [c.kind for c in plan.children] == ["Label"]
