"""Failure taxonomy for property-list documents."""

from __future__ import annotations


class PlistCoreError(Exception):
    """Base class for recoverable document failures."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class ReadFailure(PlistCoreError):
    """The file is missing, unreadable, or the read failed."""


class FormatFailure(PlistCoreError):
    """The bytes are not a property list whose root is a mapping."""


class SerializeFailure(PlistCoreError):
    """The mapping holds a value the XML encoder cannot write."""


class WriteFailure(PlistCoreError):
    """Overwriting the bound file failed."""


class NotLoaded(PlistCoreError):
    """save() was called before any successful load()."""
