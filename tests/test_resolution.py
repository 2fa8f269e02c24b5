"""Tests for style merging and partial inclusion."""

import pytest

from layoutc.ast.node import LayoutNode
from layoutc.compiler.includes import substitute_text, substitute_tree
from layoutc.compiler.resolver import Resolver, is_resolved
from layoutc.compiler.styles import StyleResolver, deep_merge
from layoutc.compiler.tracker import DependencyTracker
from layoutc.exceptions import CyclicIncludeError, NotFoundError


def test_deep_merge_node_wins():
    assert deep_merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}


def test_deep_merge_nested_and_arrays():
    """Nested objects merge key by key, arrays are replaced wholesale."""
    base = {"font": {"size": 12, "weight": "bold"}, "list": [1, 2]}
    own = {"font": {"size": 14}, "list": [9]}

    assert deep_merge(base, own) == {
        "font": {"size": 14, "weight": "bold"},
        "list": [9],
    }


def test_style_precedence(project):
    project.style("S", {"a": 1, "b": 2})
    node = LayoutNode(kind="Label", attributes={"style": "S", "b": 3})

    resolved = StyleResolver(project.store()).resolve(node)

    assert resolved.attributes == {"a": 1, "b": 3}


def test_style_array_not_merged(project):
    project.style("S", {"list": [1, 2]})
    node = LayoutNode(kind="View", attributes={"style": "S", "list": [9]})

    resolved = StyleResolver(project.store()).resolve(node)

    assert resolved.attributes == {"list": [9]}


def test_style_supplies_kind(project):
    project.style("title", {"kind": "Label", "fontSize": 20})
    node = LayoutNode(attributes={"style": "title", "text": "Hi"})

    resolved = StyleResolver(project.store()).resolve(node)

    assert resolved.kind == "Label"
    assert resolved.attributes == {"fontSize": 20, "text": "Hi"}


def test_missing_style_names_document_and_path(project):
    project.layout("home", {"kind": "View", "child": [{"kind": "Label", "style": "ghost"}]})

    with pytest.raises(NotFoundError) as exc:
        Resolver(project.store()).resolve("home")

    assert exc.value.identifier == "ghost"
    assert exc.value.what == "style"
    assert "home" in str(exc.value)
    assert "root.child[0]" in str(exc.value)


def test_invalid_style_name_is_warning(project):
    project.layout("home", {"kind": "Label", "style": 5})
    resolver = Resolver(project.store())

    root = resolver.resolve("home")

    assert "style" not in root.attributes
    assert [w.attribute for w in resolver.warnings] == ["style"]


def test_resolution_is_idempotent(project):
    """Resolving twice, or re-resolving a resolved tree, yields equal trees."""
    project.style("card", {"background": "#FFFFFF", "padding": [8]})
    project.layout("_row", {"kind": "Label", "style": "card", "text": "title"})
    project.layout(
        "home",
        {
            "kind": "View",
            "orientation": "vertical",
            "child": [
                {"include": "row", "variables": {"title": "Hello"}},
                {"kind": "Button", "style": "card"},
            ],
        },
    )
    resolver = Resolver(project.store())

    first = resolver.resolve("home")
    second = resolver.resolve("home")

    assert first == second
    assert is_resolved(first)
    assert resolver.resolve_node(first) == first


def test_include_marker_substitution(project):
    project.layout("_header", {"kind": "Label", "title": "@@NAME@@"})
    project.layout(
        "home",
        {"kind": "View", "child": [{"include": "header", "variables": {"@@NAME@@": "Hi"}}]},
    )

    root = Resolver(project.store()).resolve("home")

    assert root.children[0].kind == "Label"
    assert root.children[0].get("title") == "Hi"


def test_include_marker_substitution_text_mode(project):
    project.layout("_header", {"kind": "Label", "title": "@@NAME@@"})
    project.layout(
        "home",
        {"kind": "View", "child": [{"include": "header", "variables": {"@@NAME@@": "Hi"}}]},
    )

    root = Resolver(project.store(), substitution="text").resolve("home")

    assert root.children[0].get("title") == "Hi"


def test_substitute_tree_keeps_types_and_skips_keys():
    data = {
        "count": "count",
        "label": "Total: @@UNIT@@",
        "data": [{"name": "count"}],
    }

    out = substitute_tree(data, {"count": 5, "@@UNIT@@": "kg"})

    assert out == {"count": 5, "label": "Total: kg", "data": [{"name": "count"}]}


def test_substitute_text_only_whole_quoted_tokens():
    source = '{"text": "title", "other": "subtitle", "size": @@SIZE@@}'

    out = substitute_text(source, {"title": "Hello", "@@SIZE@@": 12})

    assert out == '{"text": "Hello", "other": "subtitle", "size": 12}'


def test_include_node_attributes_override_partial_root(project):
    project.layout("_button", {"kind": "Button", "text": "OK", "width": 100})
    project.layout("home", {"kind": "View", "child": [{"include": "button", "width": 200, "id": "ok"}]})

    child = Resolver(project.store()).resolve("home").children[0]

    assert child.attributes == {"text": "OK", "width": 200, "id": "ok"}


def test_nested_partials_and_scope(project):
    """Variables flow into nested includes; inner variables win."""
    project.layout("_inner", {"kind": "Label", "text": "label", "color": "color"})
    project.layout(
        "_outer",
        {
            "kind": "View",
            "child": [{"include": "inner", "variables": {"color": "#FF0000"}}],
        },
    )
    project.layout(
        "home",
        {
            "kind": "View",
            "child": [{"include": "outer", "variables": {"label": "Hi", "color": "#000000"}}],
        },
    )
    tracker = DependencyTracker("home")

    root = Resolver(project.store(), tracker).resolve("home")

    label = root.children[0].children[0]
    assert label.get("text") == "Hi"
    assert label.get("color") == "#FF0000"
    assert label.scope == {"label": "Hi", "color": "#FF0000"}
    assert tracker.record().partials == ["inner", "outer"]


def test_same_partial_twice_is_not_a_cycle(project):
    project.layout("_row", {"kind": "Label"})
    project.layout("home", {"kind": "View", "child": [{"include": "row"}, {"include": "row"}]})

    root = Resolver(project.store()).resolve("home")

    assert [c.kind for c in root.children] == ["Label", "Label"]


def test_cyclic_include(project):
    project.layout("_a", {"kind": "View", "child": [{"include": "b"}]})
    project.layout("_b", {"kind": "View", "child": [{"include": "a"}]})
    project.layout("home", {"kind": "View", "child": [{"include": "a"}]})

    with pytest.raises(CyclicIncludeError) as exc:
        Resolver(project.store()).resolve("home")

    assert [p.name for p in exc.value.chain] == ["_a.json", "_b.json", "_a.json"]


def test_self_include_of_top_level_document(project):
    project.layout("home", {"kind": "View", "child": [{"include": "home"}]})

    with pytest.raises(CyclicIncludeError):
        Resolver(project.store()).resolve("home")


def test_missing_partial(project):
    project.layout("home", {"kind": "View", "child": [{"include": "parts/ghost"}]})

    with pytest.raises(NotFoundError) as exc:
        Resolver(project.store()).resolve("home")

    assert [p.name for p in exc.value.candidates] == ["_ghost.json", "ghost.json"]


def test_styles_inside_partials_are_tracked(project):
    project.style("title", {"fontSize": 18})
    project.layout("_header", {"kind": "Label", "style": "title"})
    project.layout("home", {"kind": "View", "child": [{"include": "header"}]})
    tracker = DependencyTracker("home")

    root = Resolver(project.store(), tracker).resolve("home")

    assert root.children[0].get("fontSize") == 18
    record = tracker.record()
    assert record.partials == ["header"]
    assert record.styles == ["title"]
