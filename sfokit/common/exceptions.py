"""Custom exception hierarchy for sfokit.

Every failure the codec or the file model can report is one of the classes
below. They carry a short message plus an optional ``details`` mapping that
is rendered as ``key=value`` pairs, so callers can print them as-is.
"""

from __future__ import annotations

from typing import Any, Optional


# ============================================================================
# BASE EXCEPTIONS
# ============================================================================

class SfoError(Exception):
    """Base class for all sfokit errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


# ============================================================================
# FILE OPERATION ERRORS
# ============================================================================

class FileOperationError(SfoError):
    """Base error for operations on a backing file."""

    def __init__(self, path: str, message: str, details: Optional[dict] = None):
        details = details or {}
        details["path"] = path
        super().__init__(message, details)
        self.path = path


class NotAFileError(FileOperationError):
    """Path is missing or refers to a directory."""

    def __init__(self, path: str, reason: str = "not a valid SFO file"):
        super().__init__(str(path), reason)


class SfoIOError(FileOperationError):
    """Short read, short write or any OS level failure."""

    def __init__(self, path: str, reason: str, offset: Optional[int] = None):
        details = {"offset": offset} if offset is not None else None
        super().__init__(str(path), reason, details)
        self.offset = offset


# ============================================================================
# FORMAT ERRORS
# ============================================================================

class FormatError(SfoError):
    """Structural violation of the SFO layout."""
    pass


class UnsupportedTypeError(FormatError):
    """Data type tag outside of {0, 2, 4}."""

    def __init__(self, data_type: int, label: Optional[str] = None):
        details: dict[str, Any] = {"data_type": data_type}
        if label is not None:
            details["label"] = label
        super().__init__(f"unsupported data type: {data_type}", details)
        self.data_type = data_type


# ============================================================================
# ACCESSOR ERRORS
# ============================================================================

class KeyNotFoundError(SfoError, LookupError):
    def __init__(self, key: str):
        super().__init__("key not found", {"key": key})
        self.key = key


class IndexOutOfRangeError(SfoError, IndexError):
    def __init__(self, index: int, length: int):
        super().__init__("index out of range", {"index": index, "length": length})
        self.index = index
        self.length = length


class ParseError(SfoError, ValueError):
    """Text could not be converted to the entry's type."""

    def __init__(self, text: str, reason: str = "expected a decimal integer"):
        super().__init__(f"cannot parse {text!r}: {reason}", {"input": text})
        self.text = text


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def format_exception_chain(exc: BaseException, include_traceback: bool = False) -> str:
    """Format an exception together with its chain of causes.

    Args:
        exc: Exception to format
        include_traceback: Whether to include the full traceback

    Returns:
        Causes joined with " -> ", outermost first
    """
    import traceback

    if include_traceback:
        return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    messages = []
    current: Optional[BaseException] = exc
    while current is not None:
        if isinstance(current, SfoError):
            messages.append(str(current))
        else:
            messages.append(f"{type(current).__name__}: {current}")
        current = getattr(current, "__cause__", None)

    return " -> ".join(messages)
