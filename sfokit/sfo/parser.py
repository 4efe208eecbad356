"""In-memory SFO model bound to a file on disk.

Usage:
    sfo = SfoFile.open("PARAM.SFO")
    for i in range(len(sfo)):
        print(sfo.get_key_by_index(i), sfo.get_value_by_index(i))
    sfo.set_value_by_index(0, "NEW TITLE")
    sfo.save()
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional

from ..common.exceptions import KeyNotFoundError, SfoIOError, UnsupportedTypeError
from ..common.fileops import atomic_write_bytes
from ..common.validation import (
    parse_int32,
    validate_index,
    validate_label,
    validate_sfo_path,
)
from ..logging_cfg import log_call
from . import codec
from .models import DataType, SfoEntry, SfoHeader, SfoSection, SfoValue

logger = logging.getLogger(__name__)


class SfoFile:
    """Ordered key/value table decoded from an SFO object.

    Entries keep the order of the section directory; positional accessors
    and the encoder both rely on it. Keys are not required to be unique,
    lookups by key return the first match.
    """

    def __init__(
        self,
        header: Optional[SfoHeader] = None,
        entries: Optional[list[SfoEntry]] = None,
        path: Path | str | None = None,
    ) -> None:
        self.header = header or SfoHeader()
        self.entries: list[SfoEntry] = entries if entries is not None else []
        self.path = Path(path) if path is not None else None

    # ------------------------------------------------------------------
    # construction / persistence
    # ------------------------------------------------------------------

    @classmethod
    @log_call()
    def open(cls, path: Path | str) -> "SfoFile":
        """Read and decode the file at ``path``."""
        p = validate_sfo_path(path)
        try:
            with open(p, "rb") as f:
                header, entries = codec.decode(f)
        except OSError as e:
            raise SfoIOError(str(p), f"failed reading file: {e.strerror or e}") from e
        return cls(header, entries, p)

    @classmethod
    def from_bytes(cls, data: bytes, path: Path | str | None = None) -> "SfoFile":
        header, entries = codec.decode_bytes(data)
        return cls(header, entries, path)

    @classmethod
    def new(cls, path: Path | str | None = None) -> "SfoFile":
        """Empty model with a default header."""
        return cls(SfoHeader(), [], path)

    def to_bytes(self) -> bytes:
        return codec.encode(self.header, self.entries)

    @log_call()
    def save(self, path: Path | str | None = None) -> Path:
        """Encode and overwrite ``path`` (default: the file this was opened from).

        The full stream is built in memory before the destination is touched.
        """
        target = Path(path) if path is not None else self.path
        if target is None:
            raise SfoIOError("<none>", "no path to save to")
        data = self.to_bytes()
        written = atomic_write_bytes(target, data)
        logger.debug("Saved %d entries to %s", len(self.entries), written)
        if self.path is None:
            self.path = written
        return written

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[SfoEntry]:
        return iter(self.entries)

    def __contains__(self, key: object) -> bool:
        return any(entry.label == key for entry in self.entries)

    def __repr__(self) -> str:
        return f"SfoFile(path={str(self.path)!r}, entries={len(self.entries)})"

    def length(self) -> int:
        return len(self.entries)

    def _entry(self, index: int) -> SfoEntry:
        validate_index(index, len(self.entries))
        return self.entries[index]

    def find_index(self, key: str) -> int:
        for i, entry in enumerate(self.entries):
            if entry.label == key:
                return i
        raise KeyNotFoundError(key)

    def get_value(self, key: str) -> SfoValue:
        return self.entries[self.find_index(key)].value

    def get_value_by_index(self, index: int) -> SfoValue:
        return self._entry(index).value

    def get_key_by_index(self, index: int) -> str:
        return self._entry(index).label

    def get_type_by_index(self, index: int) -> DataType:
        return self._entry(index).type

    def to_dict(self) -> dict[str, SfoValue]:
        """Labels mapped to values; for repeated labels the first one wins."""
        out: dict[str, SfoValue] = {}
        for entry in self.entries:
            out.setdefault(entry.label, entry.value)
        return out

    # ------------------------------------------------------------------
    # mutation
    # ------------------------------------------------------------------

    def set_value_by_index(self, index: int, text: str) -> None:
        """Set a value from its textual form, keeping the entry's type.

        Text values get a NUL appended unless they already end with one.
        """
        entry = self._entry(index)
        value: SfoValue
        if entry.type == DataType.BYTES:
            value = text.encode("utf-8")
        elif entry.type == DataType.TEXT:
            value = text if text.endswith("\x00") else text + "\x00"
        elif entry.type == DataType.INT32:
            value = parse_int32(text)
        else:
            raise UnsupportedTypeError(int(entry.type), entry.label)
        entry.value = value

    def set_raw_value_by_index(self, index: int, value: SfoValue) -> None:
        """Replace a value verbatim; no terminator is added."""
        entry = self._entry(index)
        candidate = SfoEntry(entry.label, entry.type, value, entry.section)
        candidate.payload()
        entry.value = value

    def set_label_by_index(self, index: int, label: str) -> None:
        entry = self._entry(index)
        entry.label = validate_label(label)

    def add_entry(self, label: str, data_type: DataType | int, value: SfoValue) -> int:
        """Append an entry and return its index."""
        validate_label(label)
        dtype = DataType.from_tag(int(data_type), label)
        entry = SfoEntry(label, dtype, value, SfoSection(data_type=int(dtype)))
        entry.payload()
        self.entries.append(entry)
        self.header.section_count = len(self.entries)
        return len(self.entries) - 1

    def remove_entry(self, index: int) -> SfoEntry:
        entry = self.entries.pop(validate_index(index, len(self.entries)))
        self.header.section_count = len(self.entries)
        return entry
