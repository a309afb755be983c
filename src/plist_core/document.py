"""PropertyListDocument — load, inspect, edit and save a property list."""

from __future__ import annotations

import asyncio
import logging
import plistlib
import threading
from concurrent.futures import Executor
from dataclasses import dataclass
from enum import Enum, auto
from os import PathLike
from pathlib import Path
from typing import Any

from .config import DocumentConfig, DEFAULT_CONFIG
from .errors import (
    FormatFailure,
    NotLoaded,
    PlistCoreError,
    ReadFailure,
    SerializeFailure,
    WriteFailure,
)
from .model import PDict, Value, from_native, to_native
from .rows import DisplayRow, derive_rows

logger = logging.getLogger(__name__)

NOT_A_PLIST = "The file is not a valid property list."

_BINARY_MAGIC = b"bplist00"


class DocumentState(Enum):
    Unloaded = auto()
    Loading = auto()
    Loaded = auto()
    LoadFailed = auto()
    Saving = auto()
    SaveFailed = auto()


@dataclass(frozen=True, slots=True)
class Outcome:
    ok: bool
    error: PlistCoreError | None = None


# ---------------------------------------------------------------------------
# Blocking I/O steps (safe to run in an executor)
# ---------------------------------------------------------------------------

def read_plist(path: Path) -> tuple[PDict, str]:
    """Read and parse *path*; return the root mapping and its encoding."""
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ReadFailure(f"Failed to load property list: {exc}", exc) from exc

    fmt = "binary" if data.startswith(_BINARY_MAGIC) else "xml"
    # plistlib reports malformed input with whatever its parser trips over
    try:
        parsed = plistlib.loads(data)
        if not isinstance(parsed, dict) or not all(isinstance(k, str) for k in parsed):
            raise FormatFailure(NOT_A_PLIST)
        root = from_native(parsed)
    except FormatFailure:
        raise
    except Exception as exc:
        raise FormatFailure(NOT_A_PLIST, exc) from exc
    return root, fmt


def serialize(native: dict[str, Any], sort_keys: bool = True) -> bytes:
    """Encode a native mapping as a UTF-8 XML property list."""
    try:
        return plistlib.dumps(native, fmt=plistlib.FMT_XML, sort_keys=sort_keys)
    except (TypeError, ValueError, OverflowError, RecursionError) as exc:
        raise SerializeFailure(f"Failed to save property list: {exc}", exc) from exc


def write_plist(path: Path, data: bytes) -> None:
    try:
        path.write_bytes(data)
    except OSError as exc:
        raise WriteFailure(f"Failed to save property list: {exc}", exc) from exc


def _encode_and_write(path: Path, native: dict[str, Any], sort_keys: bool) -> None:
    # Encode fully before opening the file so a bad value never truncates it
    data = serialize(native, sort_keys)
    write_plist(path, data)


# ---------------------------------------------------------------------------
# PropertyListDocument
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class PropertyListDocument:
    """One open property-list file and its derived display rows.

    Failures never escape load()/save(); they are returned in the Outcome
    and kept in ``error`` until the next successful operation.

    Usage::

        doc = PropertyListDocument()
        doc.load("Info.plist")
        for row in doc.rows:
            print(row.key, row.kind.name, row.summary)
        doc.set_value("CFBundleVersion", "42")
        doc.save()
    """

    config: DocumentConfig = DEFAULT_CONFIG

    def __post_init__(self) -> None:
        self._lock = threading.Lock()
        self._root = PDict({})
        self._rows: list[DisplayRow] | None = None
        self._path: Path | None = None
        self._source_format: str | None = None
        self._state = DocumentState.Unloaded
        self._error: PlistCoreError | None = None
        self._pending_loads = 0

    # -- Observable state -----------------------------------------------

    @property
    def state(self) -> DocumentState:
        return self._state

    @property
    def path(self) -> Path | None:
        """Path bound by the most recent successful load."""
        return self._path

    @property
    def source_format(self) -> str | None:
        """``"xml"`` or ``"binary"``; saving always writes XML."""
        return self._source_format

    @property
    def root(self) -> PDict:
        """A detached copy; edit through set_value() / remove_value()."""
        with self._lock:
            return from_native(self._root)

    @property
    def is_loading(self) -> bool:
        return self._pending_loads > 0

    @property
    def error(self) -> PlistCoreError | None:
        return self._error

    @property
    def error_message(self) -> str | None:
        return self._error.message if self._error is not None else None

    @property
    def rows(self) -> list[DisplayRow]:
        """Sorted display rows, derived on first access after a change."""
        with self._lock:
            if self._rows is None:
                self._rows = derive_rows(self._root, self.config)
            return list(self._rows)

    def as_dict(self) -> dict[str, Any]:
        """The root mapping as plain plistlib-compatible objects."""
        with self._lock:
            return to_native(self._root)

    # -- Editing --------------------------------------------------------

    def get_value(self, key: str) -> Value:
        with self._lock:
            return from_native(self._root.entries[key])

    def set_value(self, key: str, value: Any) -> None:
        """Store *value* (native or tagged) under *key*."""
        if not isinstance(key, str):
            raise TypeError(f"keys must be strings, not {type(key).__name__}")
        with self._lock:
            self._root.entries[key] = from_native(value)
            self._rows = None

    def remove_value(self, key: str) -> None:
        with self._lock:
            del self._root.entries[key]
            self._rows = None

    # -- Load -----------------------------------------------------------

    def load(self, path: str | PathLike[str]) -> Outcome:
        """Read *path* and replace the root mapping with its contents."""
        path = Path(path)
        self._begin_load(path)
        try:
            root, fmt = read_plist(path)
        except PlistCoreError as exc:
            return self._fail_load(exc)
        return self._finish_load(path, root, fmt)

    async def load_async(
        self, path: str | PathLike[str], executor: Executor | None = None
    ) -> Outcome:
        """Like load(), with the read and parse run on *executor*."""
        path = Path(path)
        self._begin_load(path)
        loop = asyncio.get_running_loop()
        try:
            root, fmt = await loop.run_in_executor(executor, read_plist, path)
        except PlistCoreError as exc:
            return self._fail_load(exc)
        return self._finish_load(path, root, fmt)

    def _begin_load(self, path: Path) -> None:
        logger.debug("loading property list from %s", path)
        with self._lock:
            self._pending_loads += 1
            self._state = DocumentState.Loading
            self._error = None

    def _finish_load(self, path: Path, root: PDict, fmt: str) -> Outcome:
        with self._lock:
            self._root = root
            self._rows = None
            self._path = path
            self._source_format = fmt
            self._pending_loads -= 1
            self._state = self._settled(DocumentState.Loaded)
            self._error = None
        logger.info("loaded %d items from %s (%s)", len(root.entries), path, fmt)
        return Outcome(ok=True)

    def _fail_load(self, exc: PlistCoreError) -> Outcome:
        with self._lock:
            self._pending_loads -= 1
            self._state = self._settled(DocumentState.LoadFailed)
            self._error = exc
        logger.error("%s", exc.message)
        return Outcome(ok=False, error=exc)

    # -- Save -----------------------------------------------------------

    def save(self) -> Outcome:
        """Write the root mapping to the bound path as an XML property list."""
        try:
            path, native = self._begin_save()
            _encode_and_write(path, native, self.config.sort_keys)
        except PlistCoreError as exc:
            return self._fail_save(exc)
        return self._finish_save(path)

    async def save_async(self, executor: Executor | None = None) -> Outcome:
        """Like save(), with encoding and writing run on *executor*."""
        loop = asyncio.get_running_loop()
        try:
            path, native = self._begin_save()
            await loop.run_in_executor(
                executor, _encode_and_write, path, native, self.config.sort_keys
            )
        except PlistCoreError as exc:
            return self._fail_save(exc)
        return self._finish_save(path)

    def _begin_save(self) -> tuple[Path, dict[str, Any]]:
        # Snapshot under the lock: a save observes the last completed load
        with self._lock:
            if self._path is None:
                raise NotLoaded("Failed to save property list: no file has been loaded")
            self._state = DocumentState.Saving
            path = self._path
            native = to_native(self._root)
        logger.debug("saving property list to %s", path)
        return path, native

    def _finish_save(self, path: Path) -> Outcome:
        with self._lock:
            self._state = self._settled(DocumentState.Loaded)
            self._error = None
        logger.info("saved property list to %s", path)
        return Outcome(ok=True)

    def _fail_save(self, exc: PlistCoreError) -> Outcome:
        with self._lock:
            if self._state is DocumentState.Saving:
                self._state = self._settled(DocumentState.SaveFailed)
            self._error = exc
        logger.error("%s", exc.message)
        return Outcome(ok=False, error=exc)

    def _settled(self, state: DocumentState) -> DocumentState:
        return DocumentState.Loading if self._pending_loads else state
