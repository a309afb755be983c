"""Command-line viewer for property-list files.

Provides the ``plist-core`` entry point via ``main()``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import IO

from .config import DocumentConfig
from .document import PropertyListDocument
from .model import PArray, PBool, PData, PDict, PString, Value, classify
from .rows import DisplayRow, summarize


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def _fmt_inline(value: Value, config: DocumentConfig) -> str:
    """Format a single value for compact one-line display."""
    if isinstance(value, PString):
        return f'"{summarize(value, config)}"'
    return summarize(value, config)


def _fmt_rows(rows: list[DisplayRow], dest: IO[str]) -> None:
    """Print the header and one aligned line per row."""
    count = len(rows)
    print(f"Root Dictionary  {count} item{'' if count == 1 else 's'}", file=dest)
    if not rows:
        print("  (empty property list)", file=dest)
        return
    key_width = max(len(r.key) for r in rows)
    kind_width = max(len(r.kind.name) for r in rows)
    for row in rows:
        print(f"  {row.key:<{key_width}}  {row.kind.name:<{kind_width}}  {row.summary}", file=dest)


def _fmt_inspect(key: str, value: Value, config: DocumentConfig) -> str:
    """Pretty-print one entry, expanding lists and mappings one level."""
    head = f"{key} ({classify(value).name})"

    if isinstance(value, PDict):
        if not value.entries:
            return f"{head} {{}}"
        width = max(len(k) for k in value.entries)
        lines = [f"{head} {{"]
        for k in sorted(value.entries):
            lines.append(f"  {k:<{width}}: {_fmt_inline(value.entries[k], config)}")
        lines.append("}")
        return "\n".join(lines)

    if isinstance(value, PArray):
        if not value.items:
            return f"{head} []"
        lines = [f"{head} ["]
        for i, v in enumerate(value.items):
            lines.append(f"  {i}: {_fmt_inline(v, config)}")
        lines.append("]")
        return "\n".join(lines)

    if isinstance(value, PData):
        return f"{head}: {summarize(value, config)} {value.value.hex()}"

    if isinstance(value, PBool):
        return f"{head}: {summarize(value, config)}"

    return f"{head}: {value}"


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plist-core",
        description="View a property-list file and optionally re-save it as XML.",
    )
    parser.add_argument("file", help="path to an XML or binary .plist file")
    parser.add_argument("--inspect", metavar="KEY", help="show one top-level entry in detail")
    parser.add_argument(
        "--save", action="store_true", help="write the file back as an XML property list"
    )
    parser.add_argument(
        "--width", type=int, default=50, help="summary width before truncation (default: 50)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def run(argv: list[str] | None = None, dest: IO[str] = sys.stdout) -> int:
    """Execute the command; return the process exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
    )

    try:
        config = DocumentConfig(summary_limit=args.width)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    doc = PropertyListDocument(config=config)
    outcome = doc.load(args.file)
    if not outcome.ok:
        print(f"Error: {doc.error_message}", file=sys.stderr)
        return 1

    if args.inspect is not None:
        try:
            value = doc.get_value(args.inspect)
        except KeyError:
            print(f"Error: no key '{args.inspect}' in {args.file}", file=sys.stderr)
            return 1
        print(_fmt_inspect(args.inspect, value, config), file=dest)
    else:
        _fmt_rows(doc.rows, dest)

    if args.save:
        outcome = doc.save()
        if not outcome.ok:
            print(f"Error: {doc.error_message}", file=sys.stderr)
            return 1
        print(f"Saved {doc.path} as XML", file=dest)
    return 0


def main() -> None:
    """``plist-core`` / ``python -m plist_core.cli``."""
    sys.exit(run())


if __name__ == "__main__":
    main()
