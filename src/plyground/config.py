"""Configuration of Plyground.

Provides the package logger and the few knobs
that drive how lazy queries are displayed:

* ``preview_rows``: how many rows are fetched when a lazy
  query is printed or previewed.
* ``display_max_rows``: how many rows of a collected result
  are rendered when it is printed.

>>> from plyground import config
>>> config.get_preview_rows()
10
>>> config.set_preview_rows(0)
Traceback (most recent call last):
    ...
ValueError: preview_rows must be a positive integer, got 0
"""

import logging

LOGGER_NAME = "plyground"

LOG_FORMATS = {
    "simple": "%(levelname).1s %(message)s",
    "verbose": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}

DEFAULT_PREVIEW_ROWS = 10
DEFAULT_DISPLAY_MAX_ROWS = 20

_logger: logging.Logger | None = None
_log_level: int = logging.WARNING
_log_format: str = "simple"

_preview_rows: int = DEFAULT_PREVIEW_ROWS
_display_max_rows: int = DEFAULT_DISPLAY_MAX_ROWS


def _get_formatter() -> logging.Formatter:
    fmt = LOG_FORMATS[_log_format]
    if _log_format == "verbose":
        return logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S")
    return logging.Formatter(fmt)


def get_logger() -> logging.Logger:
    """Get the Plyground logger.

    The first call configures it with a stream handler
    unless one was already attached by the application.
    """
    global _logger

    if _logger is None:
        _logger = logging.getLogger(LOGGER_NAME)
        _logger.setLevel(_log_level)
        if not _logger.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(_log_level)
            handler.setFormatter(_get_formatter())
            _logger.addHandler(handler)

    return _logger


def set_log_level(level: int) -> None:
    """Set the logging level, like ``logging.DEBUG``."""
    global _log_level

    _log_level = level
    if _logger is not None:
        _logger.setLevel(level)
        for handler in _logger.handlers:
            handler.setLevel(level)


def enable_debug() -> None:
    """Log every query submitted to the store."""
    set_log_level(logging.DEBUG)


def disable_debug() -> None:
    set_log_level(logging.WARNING)


def set_log_format(format_name: str) -> None:
    """Set the log output format, ``"simple"`` or ``"verbose"``."""
    global _log_format

    if format_name not in LOG_FORMATS:
        raise ValueError(f"Unknown format: {format_name}. Use 'simple' or 'verbose'")

    _log_format = format_name
    if _logger is not None:
        for handler in _logger.handlers:
            handler.setFormatter(_get_formatter())


def _check_positive(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return value


def get_preview_rows() -> int:
    return _preview_rows


def set_preview_rows(rows: int) -> None:
    """Set how many rows a preview of a lazy query fetches."""
    global _preview_rows
    _preview_rows = _check_positive("preview_rows", rows)


def get_display_max_rows() -> int:
    return _display_max_rows


def set_display_max_rows(rows: int) -> None:
    """Set how many rows of a collected result are printed."""
    global _display_max_rows
    _display_max_rows = _check_positive("display_max_rows", rows)


def reset() -> None:
    """Restore the default display settings."""
    global _preview_rows, _display_max_rows
    _preview_rows = DEFAULT_PREVIEW_ROWS
    _display_max_rows = DEFAULT_DISPLAY_MAX_ROWS
