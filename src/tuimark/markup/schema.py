"""
Attribute tables shared by the parser and the code generator.

Each Prop ties a node field to its name in markup and to a value type.
Style props live inside `style={{ ... }}`; the rest are tag attributes.
Both directions read the same tables, so an attribute the generator can
emit always has a parser branch.

Value types:
- "string": quoted string, empty means unset
- "number": int or float
- "size":   number, "auto" or "N%"
- "bool":   bare attribute / {true} / {false}
- "options": list of option records or strings
- "rgba":   color emitted as RGBA.fromHex("...")
- "border": bare / {false} / list of sides (box and scrollbox only)
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

NUMBER_PATTERN = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
INT_PATTERN = re.compile(r"^-?\d+$")


@dataclass(frozen=True)
class Prop:
    field: str
    attr: str
    type: str = "string"


def _props(*specs: tuple[str, str] | tuple[str, str, str]) -> tuple[Prop, ...]:
    return tuple(Prop(*spec) for spec in specs)


# Style groups, in emission order
SIZING = _props(
    ("width", "width", "size"), ("height", "height", "size"),
    ("min_width", "minWidth", "number"), ("max_width", "maxWidth", "number"),
    ("min_height", "minHeight", "number"), ("max_height", "maxHeight", "number"),
    ("aspect_ratio", "aspectRatio", "number"),
)
FLEX_CONTAINER = _props(
    ("flex_direction", "flexDirection"), ("flex_wrap", "flexWrap"),
    ("justify_content", "justifyContent"), ("align_items", "alignItems"),
    ("align_content", "alignContent"),
    ("gap", "gap", "number"), ("row_gap", "rowGap", "number"), ("column_gap", "columnGap", "number"),
)
FLEX_ITEM = _props(
    ("flex_grow", "flexGrow", "number"), ("flex_shrink", "flexShrink", "number"),
    ("flex_basis", "flexBasis", "size"), ("align_self", "alignSelf"),
)
PADDING = _props(
    ("padding", "padding", "number"), ("padding_top", "paddingTop", "number"),
    ("padding_right", "paddingRight", "number"), ("padding_bottom", "paddingBottom", "number"),
    ("padding_left", "paddingLeft", "number"),
)
MARGIN = _props(
    ("margin", "margin", "number"), ("margin_top", "marginTop", "number"),
    ("margin_right", "marginRight", "number"), ("margin_bottom", "marginBottom", "number"),
    ("margin_left", "marginLeft", "number"),
)
POSITION = _props(
    ("position", "position"), ("x", "left", "number"), ("y", "top", "number"),
    ("z_index", "zIndex", "number"),
)
OVERFLOW = _props(("overflow", "overflow"),)

STYLE_PROPS: tuple[Prop, ...] = SIZING + FLEX_CONTAINER + FLEX_ITEM + PADDING + MARGIN + POSITION + OVERFLOW

# Tag attributes every kind accepts, emitted after the kind's own attributes
COMMON_PROPS = _props(
    ("background_color", "backgroundColor"),
    ("visible", "visible", "bool"),
)

_BORDER_PROPS = _props(
    ("border", "border", "border"), ("border_style", "borderStyle"),
    ("border_color", "borderColor"), ("focused_border_color", "focusedBorderColor"),
    ("should_fill", "shouldFill", "bool"), ("title", "title"), ("title_alignment", "titleAlignment"),
)

KIND_PROPS: dict[str, tuple[Prop, ...]] = {
    "box": _BORDER_PROPS,
    "scrollbox": _BORDER_PROPS + _props(
        ("sticky_scroll", "stickyScroll", "bool"), ("sticky_start", "stickyStart"),
        ("scroll_x", "scrollX", "bool"), ("scroll_y", "scrollY", "bool"),
        ("viewport_culling", "viewportCulling", "bool"),
    ),
    "text": _props(
        ("fg", "fg"), ("bg", "bg"), ("wrap_mode", "wrapMode"), ("selectable", "selectable", "bool"),
    ),
    "input": _props(
        ("placeholder", "placeholder"), ("placeholder_color", "placeholderColor"),
        ("max_length", "maxLength", "number"), ("text_color", "textColor"),
        ("focused_text_color", "focusedTextColor"), ("focused_background_color", "focusedBackgroundColor"),
        ("cursor_color", "cursorColor"), ("cursor_style", "cursorStyle"),
    ),
    "textarea": _props(
        ("placeholder", "placeholder"), ("placeholder_color", "placeholderColor"),
        ("initial_value", "initialValue"), ("text_color", "textColor"),
        ("focused_text_color", "focusedTextColor"), ("focused_background_color", "focusedBackgroundColor"),
        ("cursor_color", "cursorColor"), ("cursor_style", "cursorStyle"),
        ("blinking", "blinking", "bool"), ("show_cursor", "showCursor", "bool"),
        ("scroll_margin", "scrollMargin", "number"), ("tab_indicator_color", "tabIndicatorColor"),
    ),
    "select": _props(
        ("options", "options", "options"),
        ("show_scroll_indicator", "showScrollIndicator", "bool"),
        ("show_description", "showDescription", "bool"), ("wrap_selection", "wrapSelection", "bool"),
        ("item_spacing", "itemSpacing", "number"), ("fast_scroll_step", "fastScrollStep", "number"),
        ("text_color", "textColor"), ("selected_background_color", "selectedBackgroundColor"),
        ("selected_text_color", "selectedTextColor"), ("description_color", "descriptionColor"),
        ("selected_description_color", "selectedDescriptionColor"),
    ),
    "tab-select": _props(
        ("options", "options", "options"), ("tab_width", "tabWidth", "number"),
        ("show_underline", "showUnderline", "bool"), ("wrap_selection", "wrapSelection", "bool"),
        ("text_color", "textColor"), ("selected_background_color", "selectedBackgroundColor"),
        ("selected_text_color", "selectedTextColor"),
    ),
    "slider": _props(
        ("orientation", "orientation"), ("value", "value", "number"),
        ("min", "min", "number"), ("max", "max", "number"),
        ("view_port_size", "viewPortSize", "number"), ("foreground_color", "foregroundColor"),
    ),
    "ascii-font": _props(("text", "text"), ("font", "font"), ("color", "color", "rgba")),
}

# Inline wrappers inside <text>: tag -> flag. <span> flags come from its bare attributes.
INLINE_TAGS = frozenset({"strong", "em", "u", "span", "br"})
WRAPPER_FLAGS = {"strong": "bold", "em": "italic", "u": "underline"}
SPAN_FLAGS = ("strikethrough", "dim")


class Unset:
    """Marker for a raw value that does not convert to the prop's type."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET = Unset()


def to_number(raw: Any) -> int | float | Unset:
    if isinstance(raw, bool):
        return UNSET
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return raw if math.isfinite(raw) else UNSET
    if isinstance(raw, str):
        text = raw.strip()
        if INT_PATTERN.match(text):
            return int(text)
        if NUMBER_PATTERN.match(text):
            return to_number(float(text))
    return UNSET


def coerce(prop: Prop, raw: Any) -> Any:
    """Convert a tokenized attribute value to the field's type, or UNSET."""
    if prop.type in ("string", "rgba"):
        if isinstance(raw, str):
            return raw if raw else UNSET
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return str(raw)
        return UNSET

    if prop.type == "number":
        return to_number(raw)

    if prop.type == "size":
        if isinstance(raw, str) and (raw.strip() == "auto" or raw.strip().endswith("%")):
            return raw.strip()
        return to_number(raw)

    if prop.type == "bool":
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, str) and raw in ("true", "false"):
            return raw == "true"
        return UNSET

    if prop.type == "options":
        if not isinstance(raw, list):
            return UNSET
        names = []
        for item in raw:
            # Only the display name is read back; the normalized value is cosmetic.
            if isinstance(item, dict):
                if "name" in item:
                    names.append(str(item["name"]))
            elif isinstance(item, str):
                names.append(item)
        return tuple(names)

    logger.debug("No coercion for %s (%s)", prop.attr, prop.type)
    return UNSET


def is_finite_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def format_number(value: int | float) -> str:
    """Render a number the way it is written in markup: 2.0 -> "2", 1.5 -> "1.5"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def option_value(name: str) -> str:
    """Normalized value written next to each option name (lowercase, spaces to underscores)."""
    return re.sub(r"\s+", "_", name.lower())
