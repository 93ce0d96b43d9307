from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any, TypeVar

from xlharvest.errors import ConfigReadError, ProcessingDeclined
from xlharvest.extraction.types import OutputRecord
from xlharvest.scan.walker import collect_excel_files
from xlharvest.utils.log import get_logger

Confirm = Callable[[str], bool]
PathT = TypeVar("PathT", str, Path)

_logger = get_logger(__name__)


def diff_new_files(prior: Mapping[str, Any], current: Sequence[PathT]) -> list[PathT]:
    """Return the entries of ``current`` whose path is not a key of ``prior``."""

    return [path for path in current if str(path) not in prior]


def read_processed_files(path: Path) -> dict[str, OutputRecord]:
    """Load a results log and index its records by file path."""

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigReadError(path, str(exc)) from exc
    except json.JSONDecodeError as exc:
        raise ConfigReadError(path, f"invalid JSON: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, list):
        raise ConfigReadError(path, "expected a JSON array of records")

    processed: dict[str, OutputRecord] = {}
    try:
        for item in payload:
            record = OutputRecord.from_dict(item)
            processed[record.file] = record
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ConfigReadError(path, f"malformed record: {exc}") from exc
    return processed


def compare_and_prompt(
    log_path: Path,
    root: Path,
    confirm: Confirm,
    logger: logging.Logger | None = None,
) -> list[Path]:
    """Find files under ``root`` missing from the log and ask before processing them."""

    log = logger or _logger
    processed = read_processed_files(log_path)
    new_files = diff_new_files(processed, collect_excel_files(root, logger=log))
    if not new_files:
        log.info("No new files found")
        return []

    listing = "\n".join(str(path) for path in new_files)
    prompt = f"New files found:\n{listing}\nProcess these files?"
    if not confirm(prompt):
        raise ProcessingDeclined("user chose not to process the new files")
    return new_files


__all__ = ["Confirm", "compare_and_prompt", "diff_new_files", "read_processed_files"]
