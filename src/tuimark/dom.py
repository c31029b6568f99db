"""
DOM - element tree for tuimark.

Every layout is a tree of typed element Nodes hanging off a single root box.
Each element kind is its own frozen dataclass on top of a shared base that
carries identity, children and the layout attributes every kind understands.

Key invariant: ids are unique within a tree. The root uses the reserved id
"root"; every other id is "el-<n>" from an IdAllocator (see tree.py).
Nodes are never mutated - edits build new nodes and share untouched subtrees.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import MISSING, dataclass, fields
from typing import Any, ClassVar

# number, "auto" or a percentage string like "50%"
SizeValue = int | float | str

ROOT_ID = "root"


@dataclass(frozen=True, kw_only=True)
class Node:
    """A layout element. Subclasses pin `kind` and add their own fields."""
    kind: ClassVar[str] = ""
    container: ClassVar[bool] = False

    id: str
    name: str | None = None
    children: tuple[Node, ...] = ()

    # sizing
    width: SizeValue | None = None
    height: SizeValue | None = None
    min_width: float | None = None
    max_width: float | None = None
    min_height: float | None = None
    max_height: float | None = None
    aspect_ratio: float | None = None

    # flex container
    flex_direction: str | None = None
    flex_wrap: str | None = None
    justify_content: str | None = None
    align_items: str | None = None
    align_content: str | None = None
    gap: float | None = None
    row_gap: float | None = None
    column_gap: float | None = None

    # flex item
    flex_grow: float | None = None
    flex_shrink: float | None = None
    flex_basis: SizeValue | None = None
    align_self: str | None = None

    padding: float | None = None
    padding_top: float | None = None
    padding_right: float | None = None
    padding_bottom: float | None = None
    padding_left: float | None = None

    margin: float | None = None
    margin_top: float | None = None
    margin_right: float | None = None
    margin_bottom: float | None = None
    margin_left: float | None = None

    position: str | None = None
    x: float | None = None
    y: float | None = None
    z_index: float | None = None

    overflow: str | None = None
    visible: bool = True
    background_color: str | None = None

    def depth_first(self) -> Iterator[Node]:
        """Traverse tree depth-first, yielding self then children."""
        yield self
        for child in self.children:
            yield from child.depth_first()


@dataclass(frozen=True, kw_only=True)
class _Bordered(Node):
    border: bool = False
    border_sides: tuple[str, ...] = ()
    border_style: str | None = None
    border_color: str | None = None
    focused_border_color: str | None = None
    should_fill: bool = False
    title: str | None = None
    title_alignment: str | None = None


@dataclass(frozen=True, kw_only=True)
class Box(_Bordered):
    kind: ClassVar[str] = "box"
    container: ClassVar[bool] = True


@dataclass(frozen=True, kw_only=True)
class Scrollbox(_Bordered):
    kind: ClassVar[str] = "scrollbox"
    container: ClassVar[bool] = True

    sticky_scroll: bool = False
    sticky_start: str = "bottom"
    scroll_x: bool = False
    scroll_y: bool = True
    viewport_culling: bool = False


@dataclass(frozen=True, kw_only=True)
class Text(Node):
    kind: ClassVar[str] = "text"

    content: str = ""
    fg: str | None = None
    bg: str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    dim: bool = False
    selectable: bool = False
    wrap_mode: str = "none"


@dataclass(frozen=True, kw_only=True)
class Input(Node):
    kind: ClassVar[str] = "input"

    placeholder: str | None = None
    placeholder_color: str | None = None
    max_length: int | None = None
    text_color: str | None = None
    focused_text_color: str | None = None
    focused_background_color: str | None = None
    cursor_color: str | None = None
    cursor_style: str = "block"


@dataclass(frozen=True, kw_only=True)
class Textarea(Node):
    kind: ClassVar[str] = "textarea"

    placeholder: str | None = None
    placeholder_color: str | None = None
    initial_value: str | None = None
    text_color: str | None = None
    focused_text_color: str | None = None
    focused_background_color: str | None = None
    cursor_color: str | None = None
    cursor_style: str = "block"
    blinking: bool = True
    show_cursor: bool = True
    scroll_margin: float | None = None
    tab_indicator_color: str | None = None


@dataclass(frozen=True, kw_only=True)
class Select(Node):
    kind: ClassVar[str] = "select"

    options: tuple[str, ...] = ()
    show_scroll_indicator: bool = False
    show_description: bool = False
    wrap_selection: bool = False
    item_spacing: float | None = None
    fast_scroll_step: float = 5
    text_color: str | None = None
    selected_background_color: str | None = None
    selected_text_color: str | None = None
    description_color: str | None = None
    selected_description_color: str | None = None


@dataclass(frozen=True, kw_only=True)
class TabSelect(Node):
    kind: ClassVar[str] = "tab-select"

    options: tuple[str, ...] = ()
    tab_width: float | None = None
    show_underline: bool = True
    wrap_selection: bool = False
    text_color: str | None = None
    selected_background_color: str | None = None
    selected_text_color: str | None = None


@dataclass(frozen=True, kw_only=True)
class Slider(Node):
    kind: ClassVar[str] = "slider"

    orientation: str | None = None
    value: float | None = None
    min: float | None = None
    max: float | None = None
    view_port_size: float | None = None
    foreground_color: str | None = None


@dataclass(frozen=True, kw_only=True)
class AsciiFont(Node):
    kind: ClassVar[str] = "ascii-font"

    text: str | None = None
    font: str | None = None
    color: str | None = None


NODE_CLASSES: dict[str, type[Node]] = {
    cls.kind: cls
    for cls in (Box, Text, Scrollbox, Input, Textarea, Select, Slider, AsciiFont, TabSelect)
}

ELEMENT_KINDS: tuple[str, ...] = tuple(NODE_CLASSES)
CONTAINER_KINDS: frozenset[str] = frozenset(k for k, c in NODE_CLASSES.items() if c.container)

# Defaults for elements created from the editor (not the serialization defaults,
# which are the dataclass field defaults).
_BG_ALT = "#1c222c"
_BORDER = "#2a3545"
_TEXT = "#d8dce5"
_ACCENT = "#4da8da"

CREATION_DEFAULTS: dict[str, dict[str, Any]] = {
    "box": {
        "width": 12, "height": 4, "background_color": _BG_ALT,
        "flex_direction": "column", "justify_content": "flex-start", "align_items": "flex-start",
        "border": True, "border_style": "single", "border_color": _BORDER,
    },
    "scrollbox": {
        "width": 20, "height": 8, "background_color": _BG_ALT, "flex_direction": "column",
        "border": True, "border_style": "rounded", "border_color": _BORDER,
    },
    "text": {"content": "Text", "fg": _TEXT},
    "input": {"width": 20, "height": 1, "placeholder": "Enter text..."},
    "textarea": {
        "width": 30, "height": 4, "placeholder": "Enter multi-line text...",
        "min_height": 1, "max_height": 6,
    },
    "select": {"width": 20, "height": 5, "options": ("Option 1", "Option 2", "Option 3")},
    "tab-select": {"options": ("Tab 1", "Tab 2"), "tab_width": 15},
    "slider": {
        "width": 20, "orientation": "horizontal", "value": 50, "min": 0, "max": 100,
        "foreground_color": _ACCENT,
    },
    "ascii-font": {"text": "", "font": "block", "color": _ACCENT},
}


def node_class(kind: str) -> type[Node] | None:
    """Look up the dataclass for an element kind."""
    return NODE_CLASSES.get(kind)


def is_container(node: Node) -> bool:
    return node.container


def label_for(kind: str) -> str:
    """Default display name: the kind with its first letter capitalized."""
    return kind[:1].upper() + kind[1:]


def make_root(children: tuple[Node, ...] | list[Node] = ()) -> Box:
    """The distinguished root box. Never serialized, only its children are."""
    return Box(id=ROOT_ID, name="Root", children=tuple(children))


def field_defaults(cls: type[Node]) -> dict[str, Any]:
    """Map of field name -> default for a node class (fields without one are skipped)."""
    return {f.name: f.default for f in fields(cls) if f.default is not MISSING}


def to_dict(node: Node, include_ids: bool = True) -> dict[str, Any]:
    """
    Plain-data view of a subtree: kind, every non-default field, children.

    With include_ids=False two trees compare equal when they have the same
    shape and values, which is how round trips are checked.
    """
    data: dict[str, Any] = {"kind": node.kind}
    defaults = field_defaults(type(node))
    for f in fields(node):
        if f.name == "children":
            continue
        if f.name == "id" and not include_ids:
            continue
        value = getattr(node, f.name)
        if f.name in defaults and value == defaults[f.name]:
            continue
        data[f.name] = list(value) if isinstance(value, tuple) else value
    data["children"] = [to_dict(child, include_ids) for child in node.children]
    return data
