"""File write helpers.

Saving an SFO rewrites the whole file. To keep a failed save from leaving a
truncated file behind, the bytes go to a secure temporary file in the
destination directory first, are fsynced, and then atomically replace the
final path.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from .exceptions import SfoIOError

logger = logging.getLogger(__name__)


def _cleanup_tmp(tmp_path: Path | None) -> None:
    if tmp_path is None:
        return
    try:
        tmp_path.unlink()
    except FileNotFoundError:
        pass
    except OSError:
        logger.debug("Failed removing temp file: %s", tmp_path)


def atomic_write_bytes(path: Path | str, data: bytes) -> Path:
    """Replace ``path`` with ``data``; on failure the old content is untouched."""
    dest = Path(path)
    dest_parent = dest.parent if str(dest.parent) else Path(".")
    tmp_path = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=".sfokit_tmp_", dir=str(dest_parent))
        tmp_path = Path(tmp_name)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError:
                logger.debug("fsync failed for temp file %s", tmp_path)

        if dest.exists():
            try:
                os.chmod(tmp_path, dest.stat().st_mode & 0o7777)
            except OSError:
                logger.debug("Could not copy permissions from %s", dest)

        os.replace(tmp_path, dest)
        tmp_path = None
        logger.debug("Wrote %d bytes to %s", len(data), dest)
        return dest
    except OSError as e:
        raise SfoIOError(str(dest), f"failed writing file: {e.strerror or e}") from e
    finally:
        _cleanup_tmp(tmp_path)
