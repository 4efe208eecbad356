"""Fixed-layout records and the decoded entry type."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Union

from ..common.exceptions import FormatError, UnsupportedTypeError
from ..config import (
    DEFAULT_VERSION,
    HEADER_FORMAT,
    INT32_MAX,
    INT32_MIN,
    SECTION_FORMAT,
    SFO_MAGIC,
)

SfoValue = Union[bytes, str, int]


def decode_text(data: bytes) -> str:
    """Decode label or text bytes; bytes that are not UTF-8 survive as surrogates."""
    return data.decode("utf-8", "surrogateescape")


def encode_text(text: str, label: str) -> bytes:
    try:
        return text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError as e:
        raise FormatError("text cannot be encoded", {"label": label}) from e


class DataType(IntEnum):
    BYTES = 0
    TEXT = 2
    INT32 = 4

    @classmethod
    def from_tag(cls, tag: int, label: str | None = None) -> "DataType":
        try:
            return cls(tag)
        except ValueError:
            raise UnsupportedTypeError(tag, label) from None


@dataclass
class SfoHeader:
    """The 20 byte file header."""

    magic: bytes = SFO_MAGIC
    version: bytes = DEFAULT_VERSION
    label_table_offset: int = 0
    data_table_offset: int = 0
    section_count: int = 0

    def pack(self) -> bytes:
        return struct.pack(
            HEADER_FORMAT,
            self.magic,
            self.version,
            self.label_table_offset,
            self.data_table_offset,
            self.section_count,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "SfoHeader":
        return cls(*struct.unpack(HEADER_FORMAT, data))


@dataclass
class SfoSection:
    """One 16 byte section descriptor.

    Only ``unused`` and ``data_type`` survive a save; every positional field is
    recomputed by the encoder.
    """

    label_offset: int = 0
    unused: int = 0
    data_type: int = DataType.TEXT
    used_size: int = 0
    reserved_size: int = 0
    data_offset: int = 0

    def pack(self) -> bytes:
        return struct.pack(
            SECTION_FORMAT,
            self.label_offset,
            self.unused,
            self.data_type,
            self.used_size,
            self.reserved_size,
            self.data_offset,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "SfoSection":
        return cls(*struct.unpack(SECTION_FORMAT, data))


@dataclass
class SfoEntry:
    label: str
    type: DataType
    value: SfoValue
    section: SfoSection = field(default_factory=SfoSection)

    def payload(self) -> bytes:
        """Wire bytes for ``value``, exactly ``used_size`` long once encoded."""
        if self.type == DataType.BYTES:
            if not isinstance(self.value, (bytes, bytearray)):
                raise FormatError(
                    "bytes entry holds a non-bytes value",
                    {"label": self.label, "value": type(self.value).__name__},
                )
            return bytes(self.value)
        if self.type == DataType.TEXT:
            if not isinstance(self.value, str):
                raise FormatError(
                    "text entry holds a non-text value",
                    {"label": self.label, "value": type(self.value).__name__},
                )
            return encode_text(self.value, self.label)
        if self.type == DataType.INT32:
            if isinstance(self.value, bool) or not isinstance(self.value, int):
                raise FormatError(
                    "int32 entry holds a non-integer value",
                    {"label": self.label, "value": type(self.value).__name__},
                )
            if not INT32_MIN <= self.value <= INT32_MAX:
                raise FormatError(
                    "int32 value out of range", {"label": self.label, "value": self.value}
                )
            return struct.pack("<i", self.value)
        raise UnsupportedTypeError(int(self.type), self.label)

    @classmethod
    def from_payload(cls, label: str, section: SfoSection, payload: bytes) -> "SfoEntry":
        """Interpret a raw payload according to the section's type tag."""
        dtype = DataType.from_tag(section.data_type, label)
        value: SfoValue
        if dtype == DataType.BYTES:
            value = payload
        elif dtype == DataType.TEXT:
            value = decode_text(payload)
        else:
            if len(payload) != 4:
                raise FormatError(
                    "int32 value must be exactly 4 bytes",
                    {"label": label, "size": len(payload)},
                )
            value = struct.unpack("<i", payload)[0]
        return cls(label=label, type=dtype, value=value, section=section)
