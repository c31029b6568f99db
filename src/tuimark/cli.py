"""
CLI interface for tuimark.

Pipe-friendly formatter and checker for layout markup files.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .config import get_config
from .dom import Node, make_root, to_dict
from .markup.codegen import generate_children_code
from .markup.parser import parse_markup_multiple
from .tree import count_nodes

logger = logging.getLogger(__name__)


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    get_config()

    parser = argparse.ArgumentParser(
        prog="tuimark",
        description="Format, check and inspect terminal UI layout markup",
    )

    parser.add_argument(
        "file",
        nargs="?",
        help="Input file (reads from stdin if not provided)",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--format",
        action="store_const",
        const="format",
        dest="mode",
        help="Print the canonical markup (default)",
    )
    mode.add_argument(
        "--check",
        action="store_const",
        const="check",
        dest="mode",
        help="Only parse; report the element count or the error",
    )
    mode.add_argument(
        "--tree",
        action="store_const",
        const="tree",
        dest="mode",
        help="Print an indented outline of the element tree",
    )
    mode.add_argument(
        "--json",
        action="store_const",
        const="json",
        dest="mode",
        help="Print the element tree as JSON",
    )
    parser.set_defaults(mode="format")

    parser.add_argument(
        "--indent",
        type=int,
        help="Spaces per nesting level in generated markup (default: from config, 2)",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log parser decisions to stderr",
    )

    return parser.parse_args(args)


def read_input(filepath: str | None) -> str:
    """Read from file or stdin."""
    if filepath:
        with open(filepath, encoding="utf-8") as f:
            return f.read()
    return sys.stdin.read()


def format_outline(nodes: list[Node]) -> str:
    """One line per element: `kind#id "name"`, two spaces per level."""
    lines = []

    def walk(node: Node, depth: int) -> None:
        lines.append(f'{"  " * depth}{node.kind}#{node.id} "{node.name}"')
        for child in node.children:
            walk(child, depth + 1)

    for node in nodes:
        walk(node, 0)
    return "\n".join(lines)


def setup_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else get_config().logging.level
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parsed = parse_args(args)
    setup_logging(parsed.verbose)

    if parsed.indent is not None and parsed.indent < 0:
        print(f"Error: --indent must be >= 0, got {parsed.indent}", file=sys.stderr)
        return 1

    # Read content
    try:
        content = read_input(parsed.file)
    except FileNotFoundError:
        print(f"Error: File not found: {parsed.file}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return 1

    result = parse_markup_multiple(content)
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1
    logger.debug("Parsed %d top-level element(s)", len(result.nodes))

    if parsed.mode == "check":
        count = sum(count_nodes(node) for node in result.nodes)
        print(f"OK: {count} element(s)")
    elif parsed.mode == "tree":
        print(format_outline(result.nodes))
    elif parsed.mode == "json":
        print(json.dumps([to_dict(node) for node in result.nodes], indent=2))
    else:
        print(generate_children_code(make_root(result.nodes), indent_width=parsed.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
