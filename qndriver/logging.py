"""Logging utilities for qndriver.

Loggers live under the ``qndriver.`` namespace and do not propagate to the
root logger. Level, format and stream are package-wide settings: changing
them with :func:`set_log_level` or :func:`configure_logging` updates every
existing logger and applies to loggers created later. The initial level
comes from the ``QNDRIVER_LOG_LEVEL`` environment variable (default:
WARNING).
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, TextIO

_LOG_LEVEL_ENV_VAR = "QNDRIVER_LOG_LEVEL"
_DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _resolve_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


_level: int = _resolve_level(os.getenv(_LOG_LEVEL_ENV_VAR, "WARNING"))
_format: str = _DEFAULT_FORMAT
# None means sys.stderr as it is when the handler is built
_stream: Optional[TextIO] = None

_loggers: dict[str, logging.Logger] = {}


def _attach_handler(logger: logging.Logger) -> None:
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler(_stream if _stream is not None else sys.stderr)
    handler.setLevel(_level)
    handler.setFormatter(logging.Formatter(_format))
    logger.addHandler(handler)
    logger.setLevel(_level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the cached qndriver logger for ``name`` (usually ``__name__``).

    Names outside the package are placed under ``qndriver.``; None gives
    the package logger itself.
    """
    if name is None:
        name = "qndriver"
    if name != "qndriver" and not name.startswith("qndriver."):
        name = f"qndriver.{name}"

    logger = _loggers.get(name)
    if logger is None:
        logger = logging.getLogger(name)
        _attach_handler(logger)
        logger.propagate = False
        _loggers[name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Set the level of every qndriver logger, present and future.

    Args:
        level: A logging level or its name ('DEBUG', 'INFO', ...).
    """
    global _level
    _level = _resolve_level(level)
    for logger in _loggers.values():
        logger.setLevel(_level)
        for handler in logger.handlers:
            handler.setLevel(_level)


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Route all qndriver logging to one stream with one format.

    Args:
        level: Logging level (default: WARNING).
        format_string: Record format. None restores the default
            ``[LEVEL] name: message``.
        stream: Output stream. None means stderr.

    Example:
        >>> import logging
        >>> from qndriver.logging import configure_logging
        >>> configure_logging(level=logging.INFO)
    """
    global _level, _format, _stream
    _level = _resolve_level(level)
    _format = format_string or _DEFAULT_FORMAT
    _stream = stream
    for logger in _loggers.values():
        _attach_handler(logger)
