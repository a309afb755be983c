"""Data model for property-list values."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any, Callable, Union


# ---------------------------------------------------------------------------
# ValueKind
# ---------------------------------------------------------------------------

class ValueKind(Enum):
    String = auto()
    Integer = auto()
    Number = auto()
    Boolean = auto()
    Date = auto()
    Bytes = auto()
    List = auto()
    Mapping = auto()
    Unknown = auto()


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PString:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class PInteger:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class PReal:
    value: float

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class PBool:
    value: bool

    def __str__(self) -> str:
        return "YES" if self.value else "NO"


@dataclass(frozen=True, slots=True)
class PDate:
    value: datetime  # naive UTC, as produced by plistlib

    def __str__(self) -> str:
        return self.value.strftime("%Y-%m-%d %H:%M:%S +0000")


@dataclass(frozen=True, slots=True)
class PData:
    value: bytes

    def __str__(self) -> str:
        return f"<{self.value.hex()}>"


@dataclass(slots=True)
class PArray:
    items: list[Value]

    def __str__(self) -> str:
        return render(self)


@dataclass(slots=True)
class PDict:
    entries: dict[str, Value]

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True, slots=True)
class PUnknown:
    """Any object that has no property-list representation (e.g. plistlib.UID)."""

    value: Any

    def __str__(self) -> str:
        return str(self.value)


Value = Union[PString, PInteger, PReal, PBool, PDate, PData, PArray, PDict, PUnknown]

_LEAF_TYPES = (PString, PInteger, PReal, PBool, PDate, PData, PUnknown)

_KINDS: dict[type, ValueKind] = {
    PString: ValueKind.String,
    PInteger: ValueKind.Integer,
    PReal: ValueKind.Number,
    PBool: ValueKind.Boolean,
    PDate: ValueKind.Date,
    PData: ValueKind.Bytes,
    PArray: ValueKind.List,
    PDict: ValueKind.Mapping,
    PUnknown: ValueKind.Unknown,
}


def classify(value: Value) -> ValueKind:
    """Return the display kind of a tagged value."""
    return _KINDS.get(type(value), ValueKind.Unknown)


# ---------------------------------------------------------------------------
# Native conversion
#
# Both directions walk an explicit stack; plistlib's XML parser accepts
# nesting far deeper than the interpreter's recursion limit.
# ---------------------------------------------------------------------------

def _leaf_from_native(obj: Any) -> Value:
    if isinstance(obj, _LEAF_TYPES):
        return obj
    # bool before int: bool is an int subclass
    if isinstance(obj, bool):
        return PBool(obj)
    if isinstance(obj, int):
        return PInteger(obj)
    if isinstance(obj, float):
        return PReal(obj)
    if isinstance(obj, str):
        return PString(obj)
    if isinstance(obj, datetime):
        if obj.tzinfo is not None:
            obj = obj.astimezone(timezone.utc).replace(tzinfo=None)
        return PDate(obj)
    if isinstance(obj, (bytes, bytearray)):
        return PData(bytes(obj))
    return PUnknown(obj)


def _children(obj: Any) -> list[tuple[Any, Any]] | None:
    """(slot, child) pairs of a container, or None for a leaf."""
    if isinstance(obj, PArray):
        return list(enumerate(obj.items))
    if isinstance(obj, PDict):
        return list(obj.entries.items())
    if isinstance(obj, (list, tuple)):
        return list(enumerate(obj))
    if isinstance(obj, dict):
        return list(obj.items())
    return None


def from_native(obj: Any) -> Value:
    """Wrap a plistlib-style Python object in its tagged value.

    Tagged leaves pass through; containers (native or tagged) are always
    copied. Raises ValueError if a container contains itself.
    """
    result: list[Value] = []
    active: set[int] = set()
    stack: list[tuple] = [("enter", obj, result.append)]

    while stack:
        op, item, put = stack.pop()
        if op == "exit":
            active.discard(item)
            continue

        children = _children(item)
        if children is None:
            put(_leaf_from_native(item))
            continue

        if id(item) in active:
            raise ValueError("property list contains a reference cycle")
        active.add(id(item))
        stack.append(("exit", id(item), None))

        if isinstance(item, (PDict, dict)):
            node: Value = PDict(dict.fromkeys(k for k, _ in children))
            setter: Callable = node.entries.__setitem__
        else:
            node = PArray([None] * len(children))
            setter = node.items.__setitem__
        put(node)
        for slot, child in reversed(children):
            stack.append(("enter", child, _bind(setter, slot)))

    return result[0]


def _bind(setter: Callable, slot: Any) -> Callable[[Any], None]:
    return lambda v: setter(slot, v)


def to_native(value: Value) -> Any:
    """Unwrap a tagged value into objects plistlib can serialize.

    PUnknown unwraps to its raw object, which the serializer then rejects.
    """
    result: list[Any] = []
    stack: list[tuple[Value, Callable]] = [(value, result.append)]

    while stack:
        item, put = stack.pop()
        if isinstance(item, PArray):
            node: Any = [None] * len(item.items)
            put(node)
            stack.extend((v, _bind(node.__setitem__, i)) for i, v in enumerate(item.items))
        elif isinstance(item, PDict):
            node = dict.fromkeys(item.entries)
            put(node)
            stack.extend((v, _bind(node.__setitem__, k)) for k, v in item.entries.items())
        else:
            put(item.value)

    return result[0]


def render(value: Value) -> str:
    """Full string form of a value; containers render as (a, b) and {k = v; ...}."""
    out: list[str] = []
    stack: list[Any] = [value]

    while stack:
        item = stack.pop()
        if isinstance(item, str):
            out.append(item)
        elif isinstance(item, PArray):
            parts: list[Any] = ["("]
            for i, v in enumerate(item.items):
                if i:
                    parts.append(", ")
                parts.append(v)
            parts.append(")")
            stack.extend(reversed(parts))
        elif isinstance(item, PDict):
            parts = ["{"]
            for i, (k, v) in enumerate(item.entries.items()):
                if i:
                    parts.append("; ")
                parts.append(f"{k} = ")
                parts.append(v)
            parts.append("}")
            stack.extend(reversed(parts))
        else:
            out.append(str(item))

    return "".join(out)
