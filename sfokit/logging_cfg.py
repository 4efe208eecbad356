"""Centralized logging helpers for sfokit.

The library modules only ever log at DEBUG through ``logging.getLogger``;
the CLI calls ``configure_logging`` once to decide where that output goes.
"""

from __future__ import annotations

import functools
import json
import logging
import os
import sys
import time
from typing import Optional

from .config import LOG_FORMAT_ENV

_STD_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
_HANDLER_NAME = "sfokit_console"


def get_logger(name: str = "sfokit", level: int = logging.INFO) -> logging.Logger:
    """Return a logger with a single plain console handler attached."""
    logger = logging.getLogger(name)
    logger.setLevel(level)

    has_console = any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in logger.handlers
    )
    if not has_console:
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(ch)

    return logger


class JsonFormatter(logging.Formatter):
    """Minimal JSON formatter, one object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def log_call(level: int = logging.DEBUG):
    """Decorator that logs function entry, duration and exit.

    Usage:
        @log_call()
        def foo(...):
            ...
    """

    def _decorator(func):
        @functools.wraps(func)
        def _wrapper(*args, **kwargs):
            logger = logging.getLogger(func.__module__)
            start = time.time()
            logger.debug("Entering %s; args=%s kwargs=%s", func.__qualname__, args, kwargs)
            try:
                result = func(*args, **kwargs)
            except Exception:
                duration = (time.time() - start) * 1000.0
                logger.debug(
                    "Exception in %s after %.2fms", func.__qualname__, duration, exc_info=True
                )
                raise
            duration = (time.time() - start) * 1000.0
            logger.log(
                level,
                "Exited %s; duration_ms=%.2f; return=%s",
                func.__qualname__,
                duration,
                repr(result)[:100],
            )
            return result

        return _wrapper

    return _decorator


def _choose_mode(env: Optional[str]) -> str:
    chosen = env or os.getenv(LOG_FORMAT_ENV, "auto")
    chosen = chosen.lower()
    if chosen in ("json", "human"):
        return chosen
    # auto: prefer human when interactive
    try:
        return "human" if sys.stderr.isatty() else "json"
    except (AttributeError, ValueError):
        return "json"


def configure_logging(env: Optional[str] = None, level: int = logging.WARNING) -> logging.Logger:
    """Configure the ``sfokit`` logger.

    env: None | 'auto' | 'json' | 'human'
    - None reads SFOKIT_LOG_FORMAT, falling back to 'auto'.
    - 'auto' chooses human-readable when stderr is a TTY, otherwise JSON.

    Returns the package logger.
    """
    mode = _choose_mode(env)
    logger = logging.getLogger("sfokit")
    logger.setLevel(level)

    existing = [h for h in logger.handlers if getattr(h, "name", None) == _HANDLER_NAME]
    for h in existing:
        logger.removeHandler(h)

    sh = logging.StreamHandler(sys.stderr)
    sh.name = _HANDLER_NAME
    if mode == "json":
        sh.setFormatter(JsonFormatter())
    else:
        sh.setFormatter(logging.Formatter(_STD_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(sh)
    return logger
