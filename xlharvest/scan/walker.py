"""Recursive discovery of spreadsheet files under a root folder."""

from __future__ import annotations

import csv
import logging
import os
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from xlharvest.errors import FileAccessError
from xlharvest.utils.log import get_logger

LOCK_PREFIX = "~"

_logger = get_logger(__name__)


@dataclass(slots=True)
class ExtensionCounts:
    xlsx: int = 0
    xlsm: int = 0
    xls: int = 0
    other: int = 0

    def add(self, name: str) -> None:
        suffix = os.path.splitext(name)[1]
        if suffix == ".xlsx":
            self.xlsx += 1
        elif suffix == ".xlsm":
            self.xlsm += 1
        elif suffix == ".xls":
            self.xls += 1
        else:
            self.other += 1

    def report_lines(self) -> list[str]:
        return [
            f"xlsx files total count: {self.xlsx}",
            f"xlsm files total count: {self.xlsm}",
            f"xls files total count: {self.xls}",
            f"rest of the files total count: {self.other}",
        ]


def _raise(error: OSError) -> None:
    raise FileAccessError(error.filename or "", error.strerror or str(error)) from error


def iter_files(root: Path) -> Iterator[Path]:
    """Yield regular files under ``root`` that are not editor lock files.

    Any traversal error aborts the walk with ``FileAccessError``.
    """

    if not root.is_dir():
        raise FileAccessError(root, "not a directory")
    for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise):
        for name in filenames:
            if name.startswith(LOCK_PREFIX):
                continue
            path = Path(dirpath) / name
            if path.is_file():
                yield path


def count_excel_files(root: Path, logger: logging.Logger | None = None) -> ExtensionCounts:
    """Count files under ``root`` bucketed by spreadsheet extension."""

    (logger or _logger).info("Scanning %s for Excel files", root)
    counts = ExtensionCounts()
    for path in iter_files(root):
        counts.add(path.name)
    return counts


def collect_excel_files(root: Path, logger: logging.Logger | None = None) -> list[Path]:
    """Return every ``.xlsx`` file under ``root`` in traversal order."""

    (logger or _logger).info("Scanning %s for Excel files", root)
    return [path for path in iter_files(root) if path.name.endswith(".xlsx")]


def write_file_listing(paths: Sequence[Path], destination: Path) -> Path:
    """Write one path per row to a CSV report."""

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        with destination.open("w", encoding="utf-8", newline="") as handle:
            writer = csv.writer(handle)
            writer.writerows([str(path)] for path in paths)
    except OSError as exc:
        raise FileAccessError(destination, str(exc)) from exc
    return destination


__all__ = [
    "ExtensionCounts",
    "collect_excel_files",
    "count_excel_files",
    "iter_files",
    "write_file_listing",
]
