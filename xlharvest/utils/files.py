from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

from xlharvest.errors import FileAccessError
from xlharvest.utils.log import get_logger

_logger = get_logger(__name__)


def ensure_directory(directory: Path, logger: logging.Logger | None = None) -> Path:
    """Create the directory (and parents) when it does not exist yet."""

    log = logger or _logger
    if directory.exists():
        return directory
    log.warning("Output folder not found, creating it: %s", directory)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileAccessError(directory, str(exc)) from exc
    log.info("Output folder created: %s", directory)
    return directory


def file_timestamps(path: Path) -> tuple[datetime, datetime]:
    """Return the (created, modified) timestamps of a file as aware datetimes.

    Birth time is used where the platform reports it; otherwise ``st_ctime``
    stands in (creation time on Windows, metadata change time elsewhere).
    """

    try:
        stat = os.stat(path)
    except OSError as exc:
        raise FileAccessError(path, str(exc)) from exc
    created_ts = getattr(stat, "st_birthtime", None) or stat.st_ctime
    created = datetime.fromtimestamp(created_ts).astimezone()
    modified = datetime.fromtimestamp(stat.st_mtime).astimezone()
    return created, modified


__all__ = ["ensure_directory", "file_timestamps"]
