"""Jinja2 templates and filters for the generated Swift sources."""

from __future__ import annotations

import json
import re
from typing import Any

from jinja2 import DictLoader, Environment, StrictUndefined

VIEW_TEMPLATE = """\
// Generated by layoutc from {{ source }}. Do not edit.
import SwiftUI
import SwiftJsonUI

struct {{ name }}View: View {
    @ObservedObject var viewModel: {{ name }}ViewModel

    var body: some View {
{{ body }}
    }
}
{%- if handlers %}

protocol {{ name }}Actions {
{%- for handler in handlers %}
    func {{ handler }}()
{%- endfor %}
}
{%- endif %}
"""

DATA_TEMPLATE = """\
// Generated by layoutc from {{ source }}. Do not edit.
import Foundation
import SwiftUI

struct {{ name }}Data {
{%- for slot in slots %}
    var {{ slot.name }}: {{ slot | swift_type }}{% if slot.has_default %} = {{ slot | swift_default }}{% endif %}
{%- endfor %}

    init() {}

    mutating func update(from dictionary: [String: Any]) {
{%- for slot in slots %}
        {{ slot | swift_assign }}
{%- endfor %}
    }

    func toMap() -> [String: Any] {
        var map: [String: Any] = [:]
{%- for slot in slots %}
{%- if slot.has_default %}
        map["{{ slot.name }}"] = {{ slot.name }}
{%- else %}
        if let value = {{ slot.name }} {
            map["{{ slot.name }}"] = value
        }
{%- endif %}
{%- endfor %}
        return map
    }
}
"""

TEMPLATES = {"view.swift.j2": VIEW_TEMPLATE, "data.swift.j2": DATA_TEMPLATE}

# class names from layout documents that differ from their Swift type
SWIFT_TYPES = {
    "String": "String",
    "Int": "Int",
    "Integer": "Int",
    "Double": "Double",
    "Float": "Float",
    "CGFloat": "CGFloat",
    "Bool": "Bool",
    "Boolean": "Bool",
    "Color": "Color",
    "Image": "Image",
    "Date": "Date",
}

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# reserved words that cannot name a property without backticks
SWIFT_KEYWORDS = frozenset(
    """
    associatedtype class deinit enum extension fileprivate func import init inout
    internal let open operator private precedencegroup protocol public rethrows
    static struct subscript typealias var break case catch continue default defer
    do else fallthrough for guard if in repeat return throw switch where while
    Any as await false is nil self Self super throws true try
    """.split()
)


def is_swift_identifier(name: str) -> bool:
    return bool(_IDENTIFIER.match(name)) and name not in SWIFT_KEYWORDS


_WORD_SPLIT = re.compile(r"[_\-\s.]+")


def pascal_case(name: str) -> str:
    """home_screen -> HomeScreen, userProfile -> UserProfile"""
    words = [w for w in _WORD_SPLIT.split(name) if w]
    return "".join(w[:1].upper() + w[1:] for w in words)


def camel_case(name: str) -> str:
    pascal = pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


def swift_literal(value: Any) -> str:
    """A Swift literal for a JSON value."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, list):
        return "[" + ", ".join(swift_literal(v) for v in value) + "]"
    if isinstance(value, dict):
        if not value:
            return "[:]"
        return "[" + ", ".join(
            f"{json.dumps(str(k))}: {swift_literal(v)}" for k, v in value.items()
        ) + "]"
    return json.dumps(str(value))


def swift_type(slot) -> str:
    base = SWIFT_TYPES.get(slot.value_kind, slot.value_kind)
    return base if slot.has_default else f"{base}?"


def swift_default(slot) -> str:
    value = slot.default
    base = SWIFT_TYPES.get(slot.value_kind, slot.value_kind)
    if isinstance(value, str) and base not in ("String", "Character"):
        # non-string classes take their default as a Swift expression
        return value
    if base in ("CGFloat", "Double", "Float") and isinstance(value, int) and not isinstance(value, bool):
        return f"{value}.0" if base != "CGFloat" else str(value)
    return swift_literal(value)


def swift_assign(slot) -> str:
    """Statement copying one entry of an untyped dictionary into the slot."""
    base = SWIFT_TYPES.get(slot.value_kind, slot.value_kind)
    key = json.dumps(slot.name)
    if base == "CGFloat":
        return (
            f"if let value = dictionary[{key}] as? Double {{ self.{slot.name} = CGFloat(value) }}"
        )
    return f"if let value = dictionary[{key}] as? {base} {{ self.{slot.name} = value }}"


def get_swift_jinja_env() -> Environment:
    """Create a Jinja2 Environment for the Swift templates.

    Returns:
        Configured Jinja2 Environment.
    """
    env = Environment(
        loader=DictLoader(TEMPLATES),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )

    env.filters["pascal_case"] = pascal_case
    env.filters["camel_case"] = camel_case
    env.filters["swift_literal"] = swift_literal
    env.filters["swift_type"] = swift_type
    env.filters["swift_default"] = swift_default
    env.filters["swift_assign"] = swift_assign

    return env
