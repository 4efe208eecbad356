"""Helpers to render entry values for humans and for JSON output."""

from __future__ import annotations

from typing import Any

from ..config import TYPE_NAMES


def type_name(tag: int) -> str:
    return TYPE_NAMES.get(int(tag), f"unknown({int(tag)})")


def printable(text: str) -> str:
    """Replace undecodable bytes kept as surrogates with U+FFFD."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def format_value(value: Any, strip_nul: bool = True) -> str:
    """Render a value: bytes as hex, text without trailing NULs, ints in decimal."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if isinstance(value, str):
        text = printable(value)
        return text.rstrip("\x00") if strip_nul else text
    return str(value)


def to_jsonable(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if isinstance(value, str):
        return printable(value)
    return value
