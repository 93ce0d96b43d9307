from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class HarvestError(Exception):
    """Base class for every error raised by xlharvest."""


class ConfigReadError(HarvestError):
    """Configuration or prior log could not be read or parsed."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"cannot read {self.path}: {reason}")


class WorkbookOpenError(HarvestError):
    """The spreadsheet library refused to open a file."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = str(path)
        super().__init__(f"cannot open workbook {self.path}: {reason}")


class WorkbookReadError(HarvestError):
    """A sheet of an opened workbook could not be parsed."""

    def __init__(self, path: Path | str, sheet: str, reason: str) -> None:
        self.path = str(path)
        self.sheet = sheet
        super().__init__(f"cannot read sheet {sheet!r} of {self.path}: {reason}")


class SheetNotFound(HarvestError):
    def __init__(self, patterns: Sequence[str]) -> None:
        self.patterns = list(patterns)
        joined = ", ".join(self.patterns)
        super().__init__(f"no sheet matches pattern(s): {joined}")


class ColumnNotFound(HarvestError):
    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        super().__init__(f"no header cell in row 1 matches pattern: {pattern}")


class LabelNotFound(HarvestError):
    """Raised only when missing labels are configured to be fatal."""

    def __init__(self, field: str, pattern: str) -> None:
        self.field = field
        self.pattern = pattern
        super().__init__(f"no cell matches pattern {pattern!r} for field {field!r}")


class CellCoordinateError(HarvestError):
    def __init__(self, field: str, column: int, row: int) -> None:
        self.field = field
        self.column = column
        self.row = row
        super().__init__(
            f"offset target for field {field!r} is out of range (column={column}, row={row})"
        )


class FileAccessError(HarvestError):
    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = str(path)
        super().__init__(f"cannot access {self.path}: {reason}")


class ProcessingDeclined(HarvestError):
    """The user refused to process the newly found files."""


__all__ = [
    "CellCoordinateError",
    "ColumnNotFound",
    "ConfigReadError",
    "FileAccessError",
    "HarvestError",
    "LabelNotFound",
    "ProcessingDeclined",
    "SheetNotFound",
    "WorkbookOpenError",
    "WorkbookReadError",
]
