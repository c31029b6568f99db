"""
Recursive-descent parser: markup tokens -> element tree.

Reverse of codegen.py. Element tags become Nodes; inline wrappers inside a
<text> element (strong, em, u, span, br) set formatting flags on that text
node instead of becoming children.

Entry points never raise. They return a ParseResult, and on failure the
caller keeps its previous tree and shows the message.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ..config import get_config
from ..dom import Node, label_for, node_class
from ..tree import IdAllocator, replace_children
from .schema import (
    COMMON_PROPS,
    INLINE_TAGS,
    KIND_PROPS,
    SPAN_FLAGS,
    STYLE_PROPS,
    UNSET,
    WRAPPER_FLAGS,
    Prop,
    coerce,
)
from .tokenizer import EOF, TAG_CLOSE, TAG_OPEN, TAG_SELF_CLOSE, TEXT, Token, tokenize

logger = logging.getLogger(__name__)


class MarkupError(ValueError):
    """Markup that cannot be turned into a tree. The message is shown to the user."""


@dataclass
class ParseResult:
    success: bool
    node: Node | None = None
    nodes: list[Node] = field(default_factory=list)
    error: str | None = None


def _apply_prop(values: dict[str, Any], prop: Prop, raw: Any) -> None:
    if prop.type == "border":
        if isinstance(raw, list):
            values["border"] = True
            values["border_sides"] = tuple(str(side) for side in raw)
        else:
            flag = coerce(Prop(prop.field, prop.attr, "bool"), raw)
            if flag is UNSET:
                logger.debug("Ignoring border=%r: not a side list or bool", raw)
            else:
                values["border"] = flag
        return

    value = coerce(prop, raw)
    if value is UNSET:
        logger.debug("Ignoring %s=%r: not a valid %s", prop.attr, raw, prop.type)
        return
    values[prop.field] = value


def props_to_fields(kind: str, props: dict[str, Any]) -> dict[str, Any]:
    """
    Map tag attributes to node fields for `kind`.

    Style keys are applied first, then common and kind-specific attributes.
    Attributes with no mapping are ignored so newer markup still loads.
    """
    values: dict[str, Any] = {}

    name = props.get("name")
    values["name"] = name if isinstance(name, str) and name else label_for(kind)

    style = props.get("style")
    if isinstance(style, dict):
        for prop in STYLE_PROPS:
            if prop.attr in style:
                _apply_prop(values, prop, style[prop.attr])

    for prop in KIND_PROPS[kind] + COMMON_PROPS:
        if prop.attr in props:
            _apply_prop(values, prop, props[prop.attr])

    return values


def _join_text(pieces: list[str]) -> str:
    """Join text runs with single spaces; "\\n" pieces (from <br />) break lines."""
    result = ""
    for piece in pieces:
        if piece == "\n":
            result += "\n"
        else:
            if result and not result.endswith("\n"):
                result += " "
            result += piece
    return result


class _Parser:
    """Consumes a token list left to right, building nodes."""

    def __init__(self, tokens: list[Token], ids: IdAllocator, max_depth: int):
        self.tokens = tokens
        self.ids = ids
        self.max_depth = max_depth
        self.pos = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def parse_all(self) -> list[Node]:
        """Parse every top-level element. Stray text and closing tags are skipped."""
        nodes: list[Node] = []
        while self.current.type != EOF:
            if self.current.type in (TAG_OPEN, TAG_SELF_CLOSE):
                node = self.parse_element(depth=0)
                if node is not None:
                    nodes.append(node)
            else:
                logger.debug("Skipping top-level %s token", self.current.type)
                self.pos += 1
        return nodes

    def parse_element(self, depth: int) -> Node | None:
        """Parse the element starting at the current token. None for skipped inline tags."""
        token = self.current
        name = token.name or ""

        if name in INLINE_TAGS:
            self._skip_inline(token)
            return None

        cls = node_class(name)
        if cls is None:
            raise MarkupError(f"Unknown element type: {name}")
        if depth >= self.max_depth:
            raise MarkupError(f"Maximum nesting depth exceeded ({self.max_depth})")

        self.pos += 1
        values = props_to_fields(name, token.props)
        logger.debug("Creating %s node %r", name, values.get("name"))

        if token.type == TAG_SELF_CLOSE:
            return cls(id=self.ids.next_id(), **values)

        # Allocate before children so ids follow document order
        node_id = self.ids.next_id()
        children: list[Node] = []
        pieces: list[str] = []
        flags: set[str] = set()

        while True:
            child = self.current
            if child.type == EOF:
                raise MarkupError(f"Unclosed tag: {name}")

            if child.type == TAG_CLOSE and child.name == name:
                self.pos += 1
                break

            if cls.kind == "text" and child.type == TEXT:
                pieces.append(child.content or "")
                self.pos += 1
            elif cls.kind == "text" and child.type != TAG_CLOSE and child.name in INLINE_TAGS:
                self._read_inline(pieces, flags, depth + 1)
            elif child.type in (TAG_OPEN, TAG_SELF_CLOSE):
                parsed = self.parse_element(depth + 1)
                if parsed is not None:
                    children.append(parsed)
            else:
                logger.debug("Skipping %s token inside <%s>", child.type, name)
                self.pos += 1

        if cls.kind == "text":
            if pieces:
                values["content"] = _join_text(pieces)
            values.update({flag: True for flag in flags})

        if children and not cls.container:
            logger.warning("Dropping %d child element(s) of <%s>: it cannot hold children", len(children), name)
            children = []

        return cls(id=node_id, children=tuple(children), **values)

    def _read_inline(self, pieces: list[str], flags: set[str], depth: int) -> None:
        """
        Read an inline wrapper inside <text>, collecting its text and flags.

        Wrappers nest, so <u><strong><em>x</em></strong></u> gives underline,
        bold and italic with content "x".
        """
        if depth >= self.max_depth:
            raise MarkupError(f"Maximum nesting depth exceeded ({self.max_depth})")
        token = self.current
        self.pos += 1

        if token.name == "br":
            pieces.append("\n")
            return

        if token.name == "span":
            flags.update(f for f in SPAN_FLAGS if token.props.get(f) is True)
        else:
            flags.add(WRAPPER_FLAGS[token.name])

        if token.type == TAG_SELF_CLOSE:
            return

        while True:
            inner = self.current
            if inner.type == EOF:
                raise MarkupError(f"Unclosed tag: {token.name}")
            if inner.type == TAG_CLOSE and inner.name == token.name:
                self.pos += 1
                return
            if inner.type == TEXT:
                pieces.append(inner.content or "")
                self.pos += 1
            elif inner.type != TAG_CLOSE and inner.name in INLINE_TAGS:
                self._read_inline(pieces, flags, depth + 1)
            elif inner.type in (TAG_OPEN, TAG_SELF_CLOSE):
                dropped = self.parse_element(depth + 1)
                if dropped is not None:
                    logger.warning("Dropping <%s> inside <%s>", dropped.kind, token.name)
            else:
                self.pos += 1

    def _skip_inline(self, token: Token) -> None:
        """Skip an inline wrapper outside <text>, balancing nested tags of the same name."""
        self.pos += 1
        logger.debug("Skipping <%s> outside of a text element", token.name)
        if token.type == TAG_SELF_CLOSE or token.name == "br":
            return

        depth = 1
        while depth > 0 and self.current.type != EOF:
            t = self.current
            if t.type == TAG_OPEN and t.name == token.name:
                depth += 1
            elif t.type == TAG_CLOSE and t.name == token.name:
                depth -= 1
            self.pos += 1


def _parse(source: str, ids: IdAllocator) -> tuple[list[Node], IdAllocator]:
    """
    Tokenize and parse with a scratch copy of `ids`.

    The caller commits the scratch counter only on success, so a failed
    parse leaves the allocator untouched.
    """
    if not source.strip():
        raise MarkupError("Empty input")
    scratch = IdAllocator(ids.counter)
    parser = _Parser(tokenize(source.strip()), scratch, get_config().parser.max_depth)
    try:
        return parser.parse_all(), scratch
    except RecursionError as e:
        raise MarkupError("Maximum nesting depth exceeded") from e


def parse_markup(source: str, ids: IdAllocator | None = None) -> ParseResult:
    """
    Parse markup holding exactly one top-level element (e.g. a pasted node).

    Pass the allocator that owns the live tree so new ids cannot collide
    with existing ones; without one, ids start at el-1.
    """
    ids = ids if ids is not None else IdAllocator()
    try:
        nodes, scratch = _parse(source, ids)
    except MarkupError as e:
        return ParseResult(success=False, error=str(e))

    if not nodes:
        return ParseResult(success=False, error="No valid element found")
    if len(nodes) > 1:
        return ParseResult(success=False, error=f"Expected a single root element, found {len(nodes)}")
    ids.counter = scratch.counter
    return ParseResult(success=True, node=nodes[0], nodes=nodes)


def parse_markup_multiple(source: str, ids: IdAllocator | None = None) -> ParseResult:
    """Parse any number of sibling elements, in source order."""
    ids = ids if ids is not None else IdAllocator()
    try:
        nodes, scratch = _parse(source, ids)
    except MarkupError as e:
        return ParseResult(success=False, error=str(e))

    if not nodes:
        return ParseResult(success=False, error="No valid elements found")
    ids.counter = scratch.counter
    return ParseResult(success=True, node=nodes[0], nodes=nodes)


def apply_markup(root: Node, source: str, ids: IdAllocator) -> tuple[Node, str | None]:
    """
    Replace the root's children with the elements in `source`.

    Returns (tree, error). Blank source clears the children. On a parse
    error the original tree comes back unchanged together with the message.
    """
    if not source.strip():
        return replace_children(root, root.id, ()), None

    result = parse_markup_multiple(source, ids)
    if not result.success:
        logger.info("Keeping previous tree: %s", result.error)
        return root, result.error
    return replace_children(root, root.id, result.nodes), None
