"""Logging utilities for alpinekit.

Rendering never raises for non-fatal conditions (unknown positions,
unresolvable record fields, failed sound playback); those are logged here.
"""

from __future__ import annotations

import logging
import sys


class _LoggerHolder:
    """Holder for the global logger instance."""

    instance: logging.Logger | None = None


def get_logger() -> logging.Logger:
    """Get the alpinekit logger instance.

    The level and format come from the ``[log]`` settings section the
    first time the logger is requested.

    Returns
    -------
    logging.Logger
        The alpinekit logger configured with a stream handler.
    """
    if _LoggerHolder.instance is None:
        from .config import get_settings

        log_settings = get_settings().log
        logger = logging.getLogger("alpinekit")
        logger.setLevel(log_settings.level)

        # Only add handler if none exists
        if not logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(logging.Formatter(log_settings.format))
            logger.addHandler(handler)

        _LoggerHolder.instance = logger

    return _LoggerHolder.instance


def debug(msg: str) -> None:
    """Log a debug message.

    Parameters
    ----------
    msg : str
        The message to log.
    """
    get_logger().debug(msg)


def info(msg: str) -> None:
    """Log an info message.

    Parameters
    ----------
    msg : str
        The message to log.
    """
    get_logger().info(msg)


def warn(msg: str) -> None:
    """Log a warning message. Never raises exceptions.

    Parameters
    ----------
    msg : str
        The warning message to log.
    """
    get_logger().warning(msg)


def error(msg: str) -> None:
    """Log an error message. Never raises exceptions.

    Parameters
    ----------
    msg : str
        The error message to log.
    """
    get_logger().error(msg)


def exception(msg: str) -> None:
    """Log an exception with full traceback.

    Call this from within an except block.

    Parameters
    ----------
    msg : str
        The error message to log alongside the traceback.
    """
    get_logger().exception(msg)


def set_level(level: int | str) -> None:
    """Set the logging level.

    Parameters
    ----------
    level : int or str
        The logging level (e.g., logging.DEBUG, "DEBUG").
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    get_logger().setLevel(level)


def enable_debug() -> None:
    """Enable debug logging for option collection and rendering."""
    set_level(logging.DEBUG)
