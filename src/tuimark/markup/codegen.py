"""
Code generator: element tree -> markup text.

Reverse of parser.py, driven by the same attribute tables in schema.py.
Output is deterministic: attributes come in table order, layout fields are
collected into one style object in a fixed group order, and only values that
differ from the kind's defaults are written. `name` is the exception and is
always written.

Generation never fails on a well-formed tree.
"""

from __future__ import annotations

from typing import Any

from ..config import get_config
from ..dom import Node, Text, field_defaults, label_for
from .schema import COMMON_PROPS, KIND_PROPS, STYLE_PROPS, Prop, format_number, is_finite_number, option_value


def _quote(value: str) -> str:
    if '"' in value and "'" not in value:
        return f"'{value}'"
    return f'"{value}"'


def _style_value(value: Any) -> str:
    if isinstance(value, str):
        return _quote(value)
    return format_number(value)


def _style_attr(node: Node) -> str | None:
    entries = []
    for prop in STYLE_PROPS:
        value = getattr(node, prop.field)
        if value is None or value == "":
            continue
        if not isinstance(value, str) and not is_finite_number(value):
            continue
        entries.append(f"{prop.attr}: {_style_value(value)}")
    if not entries:
        return None
    return "style={{ " + ", ".join(entries) + " }}"


def _border_attr(node: Node) -> str | None:
    if not node.border:
        return None
    if node.border_sides:
        sides = ", ".join(f'"{side}"' for side in node.border_sides)
        return f"border={{[{sides}]}}"
    return "border"


def _options_attr(attr: str, options: tuple[str, ...]) -> str:
    records = ", ".join(
        f"{{ name: {_quote(name)}, value: {_quote(option_value(name))} }}" for name in options
    )
    return f"{attr}={{[{records}]}}"


def _format_attr(node: Node, prop: Prop, default: Any) -> str | None:
    """One `attr=value` fragment, or None when the field holds its default."""
    if prop.type == "border":
        return _border_attr(node)

    value = getattr(node, prop.field)
    if value is None or value == default:
        return None

    if prop.type == "bool":
        return prop.attr if value else f"{prop.attr}={{false}}"
    if prop.type == "options":
        return _options_attr(prop.attr, value) if value else None
    if prop.type in ("number", "size") and not isinstance(value, str):
        # nan and inf have no markup literal
        return f"{prop.attr}={{{format_number(value)}}}" if is_finite_number(value) else None
    if value == "":
        return None
    if prop.type == "rgba":
        return f"{prop.attr}={{RGBA.fromHex({_quote(str(value))})}}"
    return f"{prop.attr}={_quote(str(value))}"


def node_attrs(node: Node) -> list[str]:
    """Attribute fragments for a node's opening tag, in emission order."""
    defaults = field_defaults(type(node))
    attrs = [f"name={_quote(node.name or label_for(node.kind))}"]

    for prop in KIND_PROPS[node.kind] + COMMON_PROPS:
        fragment = _format_attr(node, prop, defaults.get(prop.field))
        if fragment is not None:
            attrs.append(fragment)

    style = _style_attr(node)
    if style is not None:
        attrs.append(style)
    return attrs


def format_text_content(node: Text) -> str:
    """
    Wrap text content in inline tags for its formatting flags.

    Innermost first: bold+italic as <strong><em>, else <strong> or <em>,
    then <u>, then <span dim>, with <span strikethrough> outermost.
    """
    content = node.content.replace("\n", "<br />")

    if node.bold and node.italic:
        content = f"<strong><em>{content}</em></strong>"
    elif node.bold:
        content = f"<strong>{content}</strong>"
    elif node.italic:
        content = f"<em>{content}</em>"
    if node.underline:
        content = f"<u>{content}</u>"
    if node.dim:
        content = f"<span dim>{content}</span>"
    if node.strikethrough:
        content = f"<span strikethrough>{content}</span>"
    return content


def generate_code(node: Node, indent: int = 0, *, indent_width: int | None = None) -> str:
    """Markup for one element and its subtree, starting `indent` levels deep."""
    if indent_width is None:
        indent_width = get_config().codegen.indent
    pad = " " * (indent * indent_width)
    tag = f"{node.kind} {' '.join(node_attrs(node))}"

    if isinstance(node, Text):
        return f"{pad}<{tag}>{format_text_content(node)}</{node.kind}>"

    if not node.container or not node.children:
        return f"{pad}<{tag} />"

    lines = [f"{pad}<{tag}>"]
    lines.extend(generate_code(child, indent + 1, indent_width=indent_width) for child in node.children)
    lines.append(f"{pad}</{node.kind}>")
    return "\n".join(lines)


def generate_children_code(root: Node, *, indent_width: int | None = None) -> str:
    """Markup for the root's children, one top-level element after another. The root itself is never written."""
    return "\n".join(generate_code(child, 0, indent_width=indent_width) for child in root.children)
