"""Input validation helpers shared by the file model and the CLI."""

from __future__ import annotations

import re
from pathlib import Path

from ..config import INT32_MAX, INT32_MIN
from .exceptions import FormatError, IndexOutOfRangeError, NotAFileError, ParseError

_INT_RE = re.compile(r"^[+-]?\d+$")


def validate_sfo_path(path: Path | str) -> Path:
    """Validate that ``path`` names an existing regular file.

    Raises:
        NotAFileError: If the path is empty, missing or a directory
    """
    if not path:
        raise NotAFileError(str(path), "path cannot be empty")

    p = Path(path)
    if not p.exists():
        raise NotAFileError(str(p), "file does not exist")
    if p.is_dir():
        raise NotAFileError(str(p), "not a valid SFO file: path is a directory")
    return p


def validate_label(label: object) -> str:
    """Labels are NUL-terminated on disk, so they must be text without NULs."""
    if not isinstance(label, str):
        raise FormatError("label must be text", {"label": repr(label)})
    if "\x00" in label:
        raise FormatError("label contains a NUL byte", {"label": repr(label)})
    return label


def validate_index(index: int, length: int) -> int:
    if index < 0 or index >= length:
        raise IndexOutOfRangeError(index, length)
    return index


def parse_int32(text: str) -> int:
    """Parse a decimal signed 32-bit integer.

    Raises:
        ParseError: If ``text`` is not a decimal number or does not fit
    """
    stripped = text.strip()
    if not _INT_RE.match(stripped):
        raise ParseError(text)
    value = int(stripped, 10)
    if not INT32_MIN <= value <= INT32_MAX:
        raise ParseError(text, "value does not fit in a signed 32-bit integer")
    return value
