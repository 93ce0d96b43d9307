from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from xlharvest.errors import SheetNotFound


def _as_pattern(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern, re.IGNORECASE)


def locate_sheet(sheet_names: Iterable[str], pattern: str | re.Pattern[str]) -> str:
    """Return the first sheet name, in workbook order, matching ``pattern``."""

    compiled = _as_pattern(pattern)
    for name in sheet_names:
        if compiled.search(name):
            return name
    raise SheetNotFound([compiled.pattern])


def locate_sheet_chain(
    sheet_names: Sequence[str],
    patterns: Sequence[str | re.Pattern[str]],
) -> str:
    """Try each pattern in priority order and return the first sheet found."""

    attempted: list[str] = []
    for pattern in patterns:
        try:
            return locate_sheet(sheet_names, pattern)
        except SheetNotFound as exc:
            attempted.extend(exc.patterns)
    raise SheetNotFound(attempted)


__all__ = ["locate_sheet", "locate_sheet_chain"]
