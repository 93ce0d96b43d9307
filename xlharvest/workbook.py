"""Thin openpyxl wrapper exposing workbooks as grids of strings."""

from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from types import TracebackType
from typing import Any
from zipfile import BadZipFile
from zlib import error as ZlibError

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from xlharvest.errors import SheetNotFound, WorkbookOpenError, WorkbookReadError


def cell_text(value: Any) -> str:
    """Render a raw openpyxl cell value the way it reads in the sheet."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float):
        # General number format shows at most 15 significant digits
        value = float(f"{value:.15g}")
        if value.is_integer():
            return str(int(value))
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def _trim(values: list[str]) -> list[str]:
    end = len(values)
    while end and values[end - 1] == "":
        end -= 1
    return values[:end]


class Workbook:
    """Read-only view over an ``.xlsx``/``.xlsm`` workbook."""

    def __init__(self, path: Path, book: Any) -> None:
        self.path = path
        self._book = book

    @classmethod
    def open(cls, path: Path | str) -> Workbook:
        location = Path(path)
        try:
            book = load_workbook(location, read_only=True, data_only=True)
        except (OSError, InvalidFileException, BadZipFile, KeyError, ValueError) as exc:
            raise WorkbookOpenError(location, str(exc)) from exc
        return cls(location, book)

    @property
    def sheet_names(self) -> list[str]:
        return list(self._book.sheetnames)

    def rows(self, sheet: str) -> list[list[str]]:
        """Return every row of ``sheet`` with trailing blanks removed.

        Rows keep their position, so the grid may be jagged but row ``n`` of
        the sheet is always ``grid[n - 1]``.
        """

        if sheet not in self._book.sheetnames:
            raise SheetNotFound([sheet])
        worksheet = self._book[sheet]
        try:
            grid = [
                _trim([cell_text(value) for value in row])
                for row in worksheet.iter_rows(values_only=True)
            ]
        # SyntaxError covers both ElementTree and lxml parse errors
        except (SyntaxError, BadZipFile, ZlibError, EOFError, KeyError, ValueError, OSError) as exc:
            raise WorkbookReadError(self.path, sheet, str(exc)) from exc
        while grid and not grid[-1]:
            grid.pop()
        return grid

    def close(self) -> None:
        self._book.close()

    def __enter__(self) -> Workbook:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()


__all__ = ["Workbook", "cell_text"]
