"""Logging setup for delta_crud."""

from __future__ import annotations

import logging
import sys
from typing import Union

ROOT_LOGGER = "delta_crud"


def setup_logger(level: Union[int, str] = logging.INFO, name: str = ROOT_LOGGER) -> logging.Logger:
    """
    Configure and return the package logger.

    Idempotent: a second call only updates the level. Logs go to stderr so
    they never interleave with the demo output on stdout.
    """
    log = logging.getLogger(name)
    log.setLevel(level)
    if log.handlers:
        return log

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    h = logging.StreamHandler(sys.stderr)
    h.setFormatter(fmt)
    log.addHandler(h)
    return log


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    return logging.getLogger(name)
