"""Builders for reference SFO blobs.

These lay out bytes by hand with ``struct`` so codec tests do not depend on
the encoder they are checking.
"""

import struct

MAGIC = b"\x00PSF"
VERSION = b"\x01\x01\x00\x00"


def _align(n):
    return (n + 3) & ~3


def build_sfo(items, version=VERSION, unused=0):
    """items: list of (label, data_type, payload_bytes)."""
    count = len(items)
    label_table = HEADER_SIZE + count * SECTION_SIZE

    labels = b""
    label_offsets = []
    for label, _, _ in items:
        label_offsets.append(len(labels))
        labels += label.encode("utf-8") + b"\x00"
    labels += b"\x00" * (_align(len(labels)) - len(labels))

    data = b""
    sections = b""
    for (label, dtype, payload), loff in zip(items, label_offsets):
        doff = len(data)
        data += payload + b"\x00" * (_align(len(payload)) - len(payload))
        sections += struct.pack(
            "<HBBIII", loff, unused, dtype, len(payload), _align(len(payload)), doff
        )

    header = struct.pack(
        "<4s4siii", MAGIC, version, label_table, label_table + len(labels), count
    )
    return header + sections + labels + data


HEADER_SIZE = 20
SECTION_SIZE = 16

# TITLE (text "Game\0") and VERSION (int 1), laid out field by field
EXAMPLE_BYTES = (
    MAGIC
    + VERSION
    + struct.pack("<iii", 52, 68, 2)
    + struct.pack("<HBBIII", 0, 0, 2, 5, 8, 0)
    + struct.pack("<HBBIII", 6, 0, 4, 4, 4, 8)
    + b"TITLE\x00VERSION\x00\x00\x00"
    + b"Game\x00\x00\x00\x00"
    + b"\x01\x00\x00\x00"
)

PARAM_ITEMS = [
    ("APP_VER", 2, b"01.00\x00"),
    ("ATTRIBUTE", 4, struct.pack("<i", 0)),
    ("CATEGORY", 2, b"DG\x00"),
    ("PARENTAL_LEVEL", 4, struct.pack("<i", 5)),
    ("TITLE", 2, b"My Game\x00"),
    ("TITLE_ID", 2, b"BLUS12345\x00"),
    ("RAW_BLOB", 0, b"\xde\xad\xbe\xef\x01"),
]


def write_sfo(path, items=None, **kwargs):
    data = build_sfo(PARAM_ITEMS if items is None else items, **kwargs)
    path.write_bytes(data)
    return path
