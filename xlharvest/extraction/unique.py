from __future__ import annotations

import re

from xlharvest.errors import ColumnNotFound
from xlharvest.extraction.fields import Grid


def find_header_column(header: list[str] | tuple[str, ...], pattern: re.Pattern[str]) -> int:
    """Return the zero-based index of the first header cell matching ``pattern``."""

    for index, cell in enumerate(header):
        if pattern.search(cell):
            return index
    raise ColumnNotFound(pattern.pattern)


def collect_unique(rows: Grid, header_pattern: str | re.Pattern[str]) -> list[str]:
    """Collect distinct non-blank values below the matching header, first seen first."""

    pattern = (
        header_pattern
        if isinstance(header_pattern, re.Pattern)
        else re.compile(header_pattern, re.IGNORECASE)
    )
    if not rows:
        raise ColumnNotFound(pattern.pattern)
    column = find_header_column(list(rows[0]), pattern)

    values: list[str] = []
    seen: set[str] = set()
    for row in rows[1:]:
        if len(row) <= column:
            continue
        value = row[column].strip()
        if not value or value in seen:
            continue
        seen.add(value)
        values.append(value)
    return values


__all__ = ["collect_unique", "find_header_column"]
