"""plist-core — load, summarize and save property-list documents."""

from .config import DocumentConfig
from .document import DocumentState, Outcome, PropertyListDocument
from .errors import (
    FormatFailure,
    NotLoaded,
    PlistCoreError,
    ReadFailure,
    SerializeFailure,
    WriteFailure,
)
from .model import (
    PArray,
    PBool,
    PData,
    PDate,
    PDict,
    PInteger,
    PReal,
    PString,
    PUnknown,
    Value,
    ValueKind,
    classify,
)
from .rows import DisplayRow, derive_rows, summarize

__all__ = [
    "PropertyListDocument",
    "DocumentState",
    "Outcome",
    "DocumentConfig",
    "DisplayRow",
    "derive_rows",
    "summarize",
    "classify",
    "ValueKind",
    "Value",
    "PString",
    "PInteger",
    "PReal",
    "PBool",
    "PDate",
    "PData",
    "PArray",
    "PDict",
    "PUnknown",
    "PlistCoreError",
    "ReadFailure",
    "FormatFailure",
    "SerializeFailure",
    "WriteFailure",
    "NotLoaded",
]
