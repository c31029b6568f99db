"""
Tokenizer for the layout markup dialect.

Turns markup text into a flat list of tokens:
- tag_open        <box name="A" style={{ width: 10 }}>
- tag_self_close  <input placeholder="..." />
- tag_close       </box>
- text            trimmed text between tags (empty runs dropped)
- eof             always last

Attribute values are decoded here, so the parser only sees Python values:
bare names are True, quoted values are strings, and braced expressions are
arrays, flat style objects, booleans, numbers, unwrapped RGBA.fromHex colors
or, failing all of those, the raw expression text.

The tokenizer never fails: malformed input produces tokens the parser rejects.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from .schema import INT_PATTERN, NUMBER_PATTERN

TAG_OPEN = "tag_open"
TAG_CLOSE = "tag_close"
TAG_SELF_CLOSE = "tag_self_close"
TEXT = "text"
EOF = "eof"

NAME_CHARS = re.compile(r"[A-Za-z0-9_\-]")
TAG_NAME_PATTERN = re.compile(r"\S*")
RGBA_PATTERN = re.compile(r"""RGBA\.fromHex\(\s*["']([^"']+)["']\s*\)""")

_OPENERS = {"{": "}", "[": "]", "(": ")"}
_CLOSERS = set(_OPENERS.values())

QUOTES = "\"'`"
# A quote only opens a string right after one of these (whitespace aside)
_ATTR_VALUE_START = "="
_EXPR_VALUE_START = "=:,[({"


@dataclass
class Token:
    type: str
    name: str | None = None
    props: dict[str, Any] = field(default_factory=dict)
    content: str | None = None


def _skip_quoted(source: str, i: int) -> int:
    """Index just past the quoted string starting at source[i]."""
    quote = source[i]
    end = source.find(quote, i + 1)
    return len(source) if end == -1 else end + 1


def _opens_string(source: str, i: int, lo: int, starts: str) -> bool:
    """
    True if the quote at source[i] begins a string value.

    Apostrophes inside raw expressions (`{it's}`) are plain characters, so a
    quote counts only at the start of the scanned span or after a char in
    `starts`.
    """
    if source[i] not in QUOTES:
        return False
    j = i - 1
    while j >= lo and source[j].isspace():
        j -= 1
    return j < lo or source[j] in starts


def _is_quoted(text: str) -> bool:
    return len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'"


def _literal(text: str) -> Any:
    """Scalar literal: quoted string, number, or the text as-is."""
    text = text.strip()
    if _is_quoted(text):
        return text[1:-1]
    if INT_PATTERN.match(text):
        return int(text)
    if NUMBER_PATTERN.match(text):
        return float(text)
    return text


def split_top_level(text: str, sep: str = ",") -> list[str]:
    """Split on `sep` outside brackets, braces, parens and quotes. Empty parts dropped."""
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    i = 0
    while i < len(text):
        char = text[i]
        if _opens_string(text, i, 0, _EXPR_VALUE_START):
            end = _skip_quoted(text, i)
            current.append(text[i:end])
            i = end
            continue
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
        elif char == sep and depth == 0:
            parts.append("".join(current).strip())
            current = []
            i += 1
            continue
        current.append(char)
        i += 1
    parts.append("".join(current).strip())
    return [p for p in parts if p]


def parse_style_object(text: str) -> dict[str, Any]:
    """
    Parse a flat `{ key: value, ... }` object.

    Values are unquoted strings or numbers. Entries without a colon are skipped.
    """
    inner = text.strip()
    if inner.startswith("{") and inner.endswith("}"):
        inner = inner[1:-1]

    result: dict[str, Any] = {}
    for part in split_top_level(inner):
        key, colon, value = part.partition(":")
        if not colon:
            continue
        key = key.strip()
        if _is_quoted(key):
            key = key[1:-1]
        result[key] = _literal(value)
    return result


def parse_array(text: str) -> list[Any]:
    """Parse `[ ... ]` whose items are quoted strings, flat objects or numbers."""
    items: list[Any] = []
    for part in split_top_level(text.strip()[1:-1]):
        if part.startswith("{") and part.endswith("}"):
            items.append(parse_style_object(part))
        else:
            items.append(_literal(part))
    return items


def parse_expression(inner: str) -> Any:
    """Decode the inside of a `{...}` attribute value."""
    inner = inner.strip()

    if inner.startswith("[") and inner.endswith("]"):
        return parse_array(inner)
    if inner.startswith("{") and inner.endswith("}"):
        return parse_style_object(inner)
    if inner == "true":
        return True
    if inner == "false":
        return False
    if _is_quoted(inner):
        return inner[1:-1]
    if INT_PATTERN.match(inner):
        return int(inner)
    if NUMBER_PATTERN.match(inner):
        return float(inner)

    rgba = RGBA_PATTERN.search(inner)
    if rgba:
        return rgba.group(1)

    return inner


def _read_braced(source: str, i: int) -> int:
    """Index just past the balanced `{...}` starting at source[i]."""
    depth = 0
    while i < len(source):
        char = source[i]
        if depth > 0 and _opens_string(source, i, 0, _EXPR_VALUE_START):
            i = _skip_quoted(source, i)
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return i


def parse_props(body: str) -> dict[str, Any]:
    """Parse the attribute part of a tag: `name`, `name="v"`, `name='v'`, `name={expr}`."""
    props: dict[str, Any] = {}
    i = 0
    n = len(body)

    while i < n:
        while i < n and body[i].isspace():
            i += 1
        if i >= n:
            break

        start = i
        while i < n and NAME_CHARS.match(body[i]):
            i += 1
        name = body[start:i]
        if not name:
            i += 1
            continue

        while i < n and body[i].isspace():
            i += 1

        if i >= n or body[i] != "=":
            props[name] = True
            continue
        i += 1

        while i < n and body[i].isspace():
            i += 1
        if i >= n:
            props[name] = True
            break

        if body[i] in "\"'":
            end = body.find(body[i], i + 1)
            if end == -1:
                end = n
            props[name] = body[i + 1:end]
            i = end + 1
        elif body[i] == "{":
            end = _read_braced(body, i)
            props[name] = parse_expression(body[i + 1:end - 1])
            i = end
        else:
            start = i
            while i < n and not body[i].isspace():
                i += 1
            props[name] = _literal(body[start:i])

    return props


def _read_tag_body(source: str, i: int) -> tuple[str, int]:
    """Collect a tag body up to its closing `>`, ignoring `>` inside braces or quotes."""
    start = i
    depth = 0
    while i < len(source):
        char = source[i]
        starts = _EXPR_VALUE_START if depth > 0 else _ATTR_VALUE_START
        if _opens_string(source, i, start, starts):
            i = _skip_quoted(source, i)
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        elif char == ">" and depth <= 0:
            return source[start:i], i + 1
        i += 1
    return source[start:], len(source)


def tokenize(source: str) -> list[Token]:
    """Convert markup text into tokens, ending with an eof token."""
    tokens: list[Token] = []
    i = 0
    n = len(source)

    while i < n:
        if source[i] == "<":
            if source.startswith("</", i):
                end = source.find(">", i + 2)
                if end == -1:
                    end = n
                tokens.append(Token(type=TAG_CLOSE, name=source[i + 2:end].strip()))
                i = end + 1
                continue

            body, i = _read_tag_body(source, i + 1)
            body = body.strip()
            self_closing = body.endswith("/")
            if self_closing:
                body = body[:-1].rstrip()

            name = TAG_NAME_PATTERN.match(body).group(0)
            rest = body[len(name):]

            tokens.append(Token(
                type=TAG_SELF_CLOSE if self_closing else TAG_OPEN,
                name=name,
                props=parse_props(rest),
            ))
            continue

        end = source.find("<", i)
        if end == -1:
            end = n
        text = source[i:end].strip()
        if text:
            tokens.append(Token(type=TEXT, content=text))
        i = end

    tokens.append(Token(type=EOF))
    return tokens
