"""Configuration and constants for the sfokit package."""
from __future__ import annotations

from typing import Dict

# File opened by the CLI when no path is given
DEFAULT_SFO_NAME = "PARAM.SFO"

# Magic bytes every SFO stream starts with
SFO_MAGIC = b"\x00PSF"

# Version field written for models built from scratch (1.1)
DEFAULT_VERSION = b"\x01\x01\x00\x00"

# Fixed record layouts, little-endian
HEADER_FORMAT = "<4s4siii"
SECTION_FORMAT = "<HBBIII"
HEADER_SIZE = 20
SECTION_SIZE = 16

# Label offsets are stored in 16 bits
MAX_LABEL_BLOCK = 0xFFFF

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# Environment variable consulted by logging_cfg.configure_logging
LOG_FORMAT_ENV = "SFOKIT_LOG_FORMAT"

TYPE_NAMES: Dict[int, str] = {
    0: "bytes",
    2: "text",
    4: "int32",
}
