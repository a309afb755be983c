"""Display rows derived from a root mapping."""

from __future__ import annotations

from dataclasses import dataclass

from .config import DocumentConfig, DEFAULT_CONFIG
from .model import PArray, PBool, PData, PDict, Value, ValueKind, classify


@dataclass(frozen=True, slots=True)
class DisplayRow:
    key: str
    kind: ValueKind
    summary: str
    value: str  # full string form, never truncated


def truncate(text: str, config: DocumentConfig = DEFAULT_CONFIG) -> str:
    if len(text) > config.summary_limit:
        return text[: config.summary_limit] + config.ellipsis
    return text


def summarize(value: Value, config: DocumentConfig = DEFAULT_CONFIG) -> str:
    """Render a short, bounded summary of a value.

    - PBool: YES / NO
    - PData: (N bytes)
    - PArray: (N items)
    - PDict: (N keys)
    - everything else: string form, truncated
    """
    if isinstance(value, PBool):
        return "YES" if value.value else "NO"
    if isinstance(value, PData):
        return f"({len(value.value)} bytes)"
    if isinstance(value, PArray):
        return f"({len(value.items)} items)"
    if isinstance(value, PDict):
        return f"({len(value.entries)} keys)"
    return truncate(str(value), config)


def derive_rows(root: PDict, config: DocumentConfig = DEFAULT_CONFIG) -> list[DisplayRow]:
    """Map every top-level entry to a DisplayRow, sorted by key."""
    rows = [
        DisplayRow(key=key, kind=classify(value), summary=summarize(value, config), value=str(value))
        for key, value in root.entries.items()
    ]
    rows.sort(key=lambda row: row.key)
    return rows
