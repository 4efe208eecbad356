"""Binary codec for SFO streams.

Layout of a stream::

    header (20 bytes)
    section descriptors (16 bytes each, ``section_count`` of them)
    label block   starts at ``label_table_offset``, NUL-terminated UTF-8 keys
    data block    starts at ``data_table_offset``, values padded to 4 bytes

Decoding trusts the offsets stored in the file. Encoding ignores every stored
offset and size and lays the whole stream out again from the entry list.
"""

from __future__ import annotations

import io
import logging
from dataclasses import replace
from typing import BinaryIO, Sequence

from ..common.exceptions import FormatError, SfoIOError
from ..common.validation import validate_label
from ..config import HEADER_SIZE, MAX_LABEL_BLOCK, SECTION_SIZE, SFO_MAGIC
from .models import DataType, SfoEntry, SfoHeader, SfoSection, decode_text, encode_text

logger = logging.getLogger(__name__)


def align4(n: int) -> int:
    """Round ``n`` up to a multiple of 4; aligned values are left unchanged."""
    rem = n % 4
    if rem:
        return n + 4 - rem
    return n


def _stream_name(stream: BinaryIO) -> str:
    return str(getattr(stream, "name", "<stream>"))


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    offset = stream.tell()
    try:
        data = stream.read(size)
    except OSError as e:
        raise SfoIOError(_stream_name(stream), f"failed reading {what}", offset) from e
    if len(data) != size:
        raise SfoIOError(
            _stream_name(stream),
            f"short read on {what}: wanted {size} bytes, got {len(data)}",
            offset,
        )
    return data


def _seek(stream: BinaryIO, offset: int, what: str) -> None:
    try:
        stream.seek(offset, io.SEEK_SET)
    except (OSError, ValueError) as e:
        raise SfoIOError(_stream_name(stream), f"cannot seek to {what}", offset) from e


def _read_cstring(stream: BinaryIO) -> bytes:
    """Read up to and excluding the next NUL byte."""
    start = stream.tell()
    out = bytearray()
    while True:
        try:
            c = stream.read(1)
        except OSError as e:
            raise SfoIOError(_stream_name(stream), "failed reading label", start) from e
        if not c:
            raise SfoIOError(
                _stream_name(stream), "label is missing its NUL terminator", start
            )
        if c == b"\x00":
            return bytes(out)
        out += c


def read_header(stream: BinaryIO) -> SfoHeader:
    try:
        head = stream.read(HEADER_SIZE)
    except OSError as e:
        raise SfoIOError(_stream_name(stream), "failed reading header", 0) from e
    if head[:4] != SFO_MAGIC:
        raise FormatError("not a valid SFO file", {"magic": head[:4].hex()})
    if len(head) != HEADER_SIZE:
        raise SfoIOError(
            _stream_name(stream),
            f"short read on header: wanted {HEADER_SIZE} bytes, got {len(head)}",
            0,
        )
    header = SfoHeader.unpack(head)
    if header.section_count < 0:
        raise FormatError("negative section count", {"section_count": header.section_count})
    if header.label_table_offset < 0 or header.data_table_offset < 0:
        raise FormatError(
            "negative table offset",
            {
                "label_table_offset": header.label_table_offset,
                "data_table_offset": header.data_table_offset,
            },
        )
    return header


def decode(stream: BinaryIO) -> tuple[SfoHeader, list[SfoEntry]]:
    """Decode a seekable stream positioned at the start of an SFO object.

    Returns the header and the entries in directory order.
    """
    header = read_header(stream)

    sections = [
        SfoSection.unpack(_read_exact(stream, SECTION_SIZE, f"section {i}"))
        for i in range(header.section_count)
    ]

    entries: list[SfoEntry] = []
    for i, section in enumerate(sections):
        _seek(stream, header.label_table_offset + section.label_offset, f"label {i}")
        label = decode_text(_read_cstring(stream))

        _seek(stream, header.data_table_offset + section.data_offset, f"value of {label}")
        payload = _read_exact(stream, section.used_size, f"value of {label}")
        entries.append(SfoEntry.from_payload(label, section, payload))

    logger.debug(
        "Decoded SFO: %d entries, labels at 0x%x, data at 0x%x",
        len(entries),
        header.label_table_offset,
        header.data_table_offset,
    )
    return header, entries


def decode_bytes(data: bytes) -> tuple[SfoHeader, list[SfoEntry]]:
    return decode(io.BytesIO(data))


def encode(header: SfoHeader, entries: Sequence[SfoEntry]) -> bytes:
    """Lay out ``entries`` from scratch and return the complete stream.

    On success ``header`` and each entry's ``section`` are updated with the
    freshly computed layout. On failure nothing is modified.
    """
    count = len(entries)
    label_table_offset = HEADER_SIZE + count * SECTION_SIZE

    labels = bytearray()
    label_offsets: list[int] = []
    for entry in entries:
        label = validate_label(entry.label)
        raw_label = encode_text(label, label)
        if len(labels) > MAX_LABEL_BLOCK:
            raise FormatError(
                "label block exceeds 16-bit offset range",
                {"label": entry.label, "offset": len(labels)},
            )
        label_offsets.append(len(labels))
        labels += raw_label
        labels += b"\x00"

    # label_table_offset is a multiple of 4, so padding the block also aligns
    # the absolute start of the data block
    labels += b"\x00" * (align4(len(labels)) - len(labels))
    data_table_offset = label_table_offset + len(labels)

    data = bytearray()
    sections: list[SfoSection] = []
    for entry, label_offset in zip(entries, label_offsets):
        data_type = DataType.from_tag(int(entry.type), entry.label)
        payload = entry.payload()
        data_offset = len(data)
        data += payload
        used = len(payload)
        reserved = align4(used)
        data += b"\x00" * (reserved - used)
        sections.append(
            replace(
                entry.section,
                label_offset=label_offset,
                data_type=int(data_type),
                used_size=used,
                reserved_size=reserved,
                data_offset=data_offset,
            )
        )

    new_header = replace(
        header,
        label_table_offset=label_table_offset,
        data_table_offset=data_table_offset,
        section_count=count,
    )

    out = bytearray(new_header.pack())
    for section in sections:
        out += section.pack()
    out += labels
    out += data

    header.label_table_offset = label_table_offset
    header.data_table_offset = data_table_offset
    header.section_count = count
    for entry, section in zip(entries, sections):
        entry.section = section

    logger.debug("Encoded SFO: %d entries, %d bytes", count, len(out))
    return bytes(out)
