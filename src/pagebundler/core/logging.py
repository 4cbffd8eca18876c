"""Stdlib logging configuration for the PageBundler CLI."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from pagebundler.core.utils.io import ensure_directory

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_INSTALLED_HANDLER: logging.Handler | None = None
_NULL_HANDLER_INSTALLED: bool = False


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str = "INFO", *, log_path: Optional[Path] = None) -> None:
    """Install a single PageBundler handler on the root logger.

    Logs go to stderr, or to ``log_path`` when given. Calling again replaces
    the previously installed handler, so repeated CLI invocations in one
    process do not duplicate output.
    """
    global _INSTALLED_HANDLER

    root = logging.getLogger()
    root.setLevel(_level_from_name(level))

    if _INSTALLED_HANDLER is not None:
        root.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
        _INSTALLED_HANDLER = None

    handler: logging.Handler
    if log_path is not None:
        resolved = Path(log_path).resolve()
        ensure_directory(resolved.parent)
        handler = logging.FileHandler(str(resolved), encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    _INSTALLED_HANDLER = handler


def suppress_lastresort_in_json_mode() -> None:
    """Keep stdlib logging's lastResort handler from writing to stderr.

    JSON output must stay machine-readable; a NullHandler on an otherwise
    handler-less root logger keeps WARNING+ records off stderr.
    """
    global _NULL_HANDLER_INSTALLED

    root = logging.getLogger()
    if root.handlers or _NULL_HANDLER_INSTALLED:
        return
    root.addHandler(logging.NullHandler())
    _NULL_HANDLER_INSTALLED = True


def reset_logging_for_tests() -> None:
    """Test-only: remove handlers installed by this module."""
    global _INSTALLED_HANDLER, _NULL_HANDLER_INSTALLED
    root = logging.getLogger()
    for h in list(root.handlers):
        if h is _INSTALLED_HANDLER or isinstance(h, logging.NullHandler):
            root.removeHandler(h)
            h.close()
    _INSTALLED_HANDLER = None
    _NULL_HANDLER_INSTALLED = False
