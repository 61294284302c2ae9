"""Centralized logging setup.

Every module asks for its logger here so handlers and format are installed once.
"""

from __future__ import annotations

import logging
import os
import sys

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_ROOT_NAME = "kindergarten_payroll"


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Install the console handler on the package root logger (idempotent)."""
    root = logging.getLogger(_ROOT_NAME)
    level = level or os.getenv("LOG_LEVEL", "INFO")
    root.setLevel(level if isinstance(level, int) else str(level).upper())

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT))
        root.addHandler(handler)
    return root


def get_logger(name: str) -> logging.Logger:
    """Logger under the package root, e.g. get_logger(__name__)."""
    marker = _ROOT_NAME + "."
    if marker in name:
        # Same logger name whether imported as installed package or via src/.
        name = marker + name.rsplit(marker, 1)[1]
    elif name != _ROOT_NAME:
        name = marker + name
    return logging.getLogger(name)
