# Copyright 2026 OCL Parser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the ocl command-line interface."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from ocl.config.settings import OUTPUT_FORMATS, ConfigError, OclConfig, find_config, load_config
from ocl.model.nodes import Document, RecoveryNode
from ocl.parser.lexer import LexerError
from ocl.parser.parser import parse
from ocl.views.accessor import BlockCollection, DocumentView, NodeView, lookup, view
from ocl.views.interchange import to_json, to_yaml

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the ocl CLI."""
    parser = argparse.ArgumentParser(
        prog="ocl",
        description="ocl - inspect and query OCL configuration files",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a configuration file (default: .ocl.yaml in the current directory, if present)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # dump subcommand
    dump_parser = subparsers.add_parser(
        "dump",
        help="Print a file as JSON or YAML",
        description="Parse an OCL file and print its interchange tree.",
    )
    dump_parser.add_argument("file", type=Path, help="OCL file to dump")
    dump_parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: from configuration, else json)",
    )
    dump_parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Indentation width (default: from configuration, else 2)",
    )

    # get subcommand
    get_parser = subparsers.add_parser(
        "get",
        help="Look up a value by a path of names, labels and indices",
        description=(
            "Walk the document one key at a time. Integer keys select by position, "
            "other keys select by name, or by label on a collection of blocks."
        ),
    )
    get_parser.add_argument("file", type=Path, help="OCL file to query")
    get_parser.add_argument("keys", nargs="+", metavar="KEY", help="Lookup path")

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Report constructs that could not be parsed",
        description="Parse an OCL file and report every unparseable span.",
    )
    check_parser.add_argument("file", type=Path, help="OCL file to check")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


class _CommandError(Exception):
    """An error already formatted for the user."""


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    try:
        config = _load_config(args.config)
        if args.command == "dump":
            return _cmd_dump(args, config)
        if args.command == "get":
            return _cmd_get(args, config)
        if args.command == "check":
            return _cmd_check(args, config)
    except _CommandError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def _load_config(path: Path | None) -> OclConfig:
    try:
        if path is not None:
            return load_config(path)
        return find_config(Path.cwd())
    except ConfigError as exc:
        raise _CommandError(str(exc)) from exc


def _parse_file(path: Path, config: OclConfig) -> Document:
    """Read and parse *path*, converting failures into command errors."""
    try:
        source = path.read_text(encoding=config.encoding)
    except FileNotFoundError:
        raise _CommandError(f"file '{path}' does not exist.") from None
    except (OSError, UnicodeDecodeError, LookupError) as exc:
        raise _CommandError(f"cannot read '{path}': {exc}") from exc

    logger.debug(f"Parsing {path} with max depth {config.max_depth}")
    try:
        return parse(source, max_depth=config.max_depth)
    except LexerError as exc:
        raise _CommandError(f"{path}: {exc}") from exc


def _cmd_dump(args: argparse.Namespace, config: OclConfig) -> int:
    """Handle the dump subcommand."""
    document = _parse_file(args.file, config)
    output_format = args.format or config.output_format
    indent = config.indent if args.indent is None else args.indent
    root = view(document)
    if output_format == "yaml":
        print(to_yaml(root, indent=max(indent, 2)), end="")
    else:
        print(to_json(root, indent=indent or None))
    return 0


def _cmd_get(args: argparse.Namespace, config: OclConfig) -> int:
    """Handle the get subcommand."""
    document = _parse_file(args.file, config)
    current: Any = view(document)
    for key in args.keys:
        current = _step(current, key)
        if current is None:
            print(f"Error: no value at '{' '.join(args.keys)}' (missing '{key}').", file=sys.stderr)
            return 1
    print(to_json(current, indent=config.indent or None))
    return 0


def _step(current: Any, key: str) -> Any:
    """Resolve one path segment against a view or a resolved list."""
    position = _as_int(key)
    if isinstance(current, (DocumentView, NodeView, BlockCollection)):
        return lookup(current, key if position is None else position)
    if isinstance(current, list) and position is not None and -len(current) <= position < len(current):
        return current[position]
    return None


def _as_int(key: str) -> int | None:
    try:
        return int(key)
    except ValueError:
        return None


def _cmd_check(args: argparse.Namespace, config: OclConfig) -> int:
    """Handle the check subcommand."""
    document = _parse_file(args.file, config)
    recoveries = document.recoveries()
    for index in recoveries:
        node = document.node(index)
        assert isinstance(node, RecoveryNode)
        print(f"Warning: line {node.line}, column {node.column}: could not parse {node.text!r}")

    if recoveries:
        print(f"{len(recoveries)} unparseable construct(s) found.", file=sys.stderr)
        return 1

    print("No issues found.")
    return 0
