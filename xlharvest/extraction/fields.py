"""Locate labelled cells in a sheet grid and read the value next to them.

A field is found by scanning the grid row by row for the first cell whose text
matches the field's pattern. The value lives at the label's coordinates moved
``offset_x`` columns to the right and ``offset_y`` rows *up*.

Missing labels are skipped (logged at DEBUG) unless ``strict_missing`` is set;
an offset that lands outside the sheet always aborts the extraction.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence

from openpyxl.utils import get_column_letter

from xlharvest.errors import CellCoordinateError, LabelNotFound
from xlharvest.extraction.types import FieldConfig
from xlharvest.utils.log import get_logger

MAX_COLUMN = 16384
MAX_ROW = 1048576

Grid = Sequence[Sequence[str]]

_logger = get_logger(__name__)


def find_label(rows: Grid, pattern: re.Pattern[str]) -> tuple[int, int] | None:
    """Return the one-indexed ``(column, row)`` of the first matching cell."""

    for row_index, row in enumerate(rows, start=1):
        for col_index, cell in enumerate(row, start=1):
            if pattern.search(cell):
                return col_index, row_index
    return None


def offset_target(field: str, column: int, row: int, config: FieldConfig) -> tuple[int, int]:
    """Apply the configured offsets to a label position and validate the result."""

    target_col = column + config.offset_x
    target_row = row - config.offset_y
    if not (1 <= target_col <= MAX_COLUMN and 1 <= target_row <= MAX_ROW):
        raise CellCoordinateError(field, target_col, target_row)
    return target_col, target_row


def cell_reference(column: int, row: int) -> str:
    """Return the A1-style reference for one-indexed coordinates."""

    return f"{get_column_letter(column)}{row}"


def read_cell(rows: Grid, column: int, row: int) -> str:
    if row > len(rows):
        return ""
    values = rows[row - 1]
    if column > len(values):
        return ""
    return values[column - 1]


def extract_fields(
    rows: Grid,
    fields: Mapping[str, FieldConfig],
    logger: logging.Logger | None = None,
    strict_missing: bool = False,
) -> dict[str, str]:
    """Extract every configured field present in ``rows``.

    Field names are visited in sorted order so the resulting mapping, and any
    JSON written from it, is deterministic.
    """

    log = logger or _logger
    results: dict[str, str] = {}
    for name in sorted(fields):
        config = fields[name]
        position = find_label(rows, config.compiled())
        if position is None:
            if strict_missing:
                raise LabelNotFound(name, config.regex)
            log.debug("No cell matches %r, skipping field %s", config.regex, name)
            continue
        column, row = offset_target(name, *position, config)
        value = read_cell(rows, column, row)
        log.debug(
            "Field %s: label at %s, value at %s = %r",
            name,
            cell_reference(*position),
            cell_reference(column, row),
            value,
        )
        results[name] = value
    return results


__all__ = [
    "Grid",
    "cell_reference",
    "extract_fields",
    "find_label",
    "offset_target",
    "read_cell",
]
