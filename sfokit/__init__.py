"""sfokit package root.

Read and write PlayStation SFO (PARAM.SFO) metadata files.
"""

from .common.exceptions import (
    FormatError,
    IndexOutOfRangeError,
    KeyNotFoundError,
    NotAFileError,
    ParseError,
    SfoError,
    SfoIOError,
    UnsupportedTypeError,
)
from .sfo.codec import align4, decode, decode_bytes, encode
from .sfo.models import DataType, SfoEntry, SfoHeader, SfoSection
from .sfo.parser import SfoFile

__version__ = "0.3.0"

__all__ = [
    "DataType",
    "FormatError",
    "IndexOutOfRangeError",
    "KeyNotFoundError",
    "NotAFileError",
    "ParseError",
    "SfoEntry",
    "SfoError",
    "SfoFile",
    "SfoHeader",
    "SfoIOError",
    "SfoSection",
    "UnsupportedTypeError",
    "align4",
    "decode",
    "decode_bytes",
    "encode",
]
