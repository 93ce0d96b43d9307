from __future__ import annotations

import logging
import sys

ROOT_LOGGER = "xlharvest"
_FORMAT = "%(asctime)s %(levelname)-5s %(name)s %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a single stderr handler to the package logger and set its level."""

    logger = logging.getLogger(ROOT_LOGGER)
    handler = next((h for h in logger.handlers if type(h) is logging.StreamHandler), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
        logger.addHandler(handler)
    else:
        # sys.stderr may have been swapped since the handler was created
        handler.stream = sys.stderr
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the package logger."""

    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


__all__ = ["ROOT_LOGGER", "configure_logging", "get_logger"]
