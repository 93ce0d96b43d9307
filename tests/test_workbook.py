from __future__ import annotations

import zipfile
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pytest

from xlharvest.errors import SheetNotFound, WorkbookOpenError, WorkbookReadError
from xlharvest.workbook import Workbook, cell_text

WorkbookFactory = Callable[..., Path]


def test_workbook_lists_sheets_in_order(tmp_path: Path, make_workbook: WorkbookFactory) -> None:
    path = make_workbook(tmp_path / "o.xlsx", {"Resumen": [["x"]], "FICHA": [["y"]], "SAP": [["z"]]})

    with Workbook.open(path) as book:
        assert book.sheet_names == ["Resumen", "FICHA", "SAP"]


def test_workbook_rows_are_jagged_strings(tmp_path: Path, make_workbook: WorkbookFactory) -> None:
    path = make_workbook(
        tmp_path / "o.xlsx",
        {"FICHA": [["Title", None, "wide"], [None, "Client:", "Acme"], [None, "Amount:", 1200.0]]},
    )

    with Workbook.open(path) as book:
        rows = book.rows("FICHA")

    assert rows == [["Title", "", "wide"], ["", "Client:", "Acme"], ["", "Amount:", "1200"]]


def test_workbook_keeps_leading_empty_rows(tmp_path: Path, make_workbook: WorkbookFactory) -> None:
    path = make_workbook(tmp_path / "o.xlsx", {"FICHA": [[], [None, "Name:", "Acme"]]})

    with Workbook.open(path) as book:
        rows = book.rows("FICHA")

    assert rows[1][1:] == ["Name:", "Acme"]
    assert not rows[0]


def test_workbook_unknown_sheet(tmp_path: Path, make_workbook: WorkbookFactory) -> None:
    path = make_workbook(tmp_path / "o.xlsx", {"FICHA": [["x"]]})
    with Workbook.open(path) as book, pytest.raises(SheetNotFound):
        book.rows("SAP")


def test_workbook_open_errors(tmp_path: Path) -> None:
    broken = tmp_path / "broken.xlsx"
    broken.write_text("not a zip", encoding="utf-8")

    with pytest.raises(WorkbookOpenError):
        Workbook.open(broken)
    with pytest.raises(WorkbookOpenError):
        Workbook.open(tmp_path / "missing.xlsx")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, ""),
        (True, "TRUE"),
        (3.0, "3"),
        (2.5, "2.5"),
        (0.1 + 0.2, "0.3"),
        (1234.5600000000002, "1234.56"),
        (42, "42"),
        (datetime(2024, 5, 1, 8, 30), "2024-05-01T08:30:00"),
        ("text", "text"),
    ],
)
def test_cell_text(value: object, expected: str) -> None:
    assert cell_text(value) == expected


def test_workbook_damaged_sheet_raises_read_error(
    tmp_path: Path, make_workbook: WorkbookFactory
) -> None:
    path = make_workbook(tmp_path / "o.xlsx", {"FICHA": [["Client:", "Acme"] for _ in range(20)]})
    with zipfile.ZipFile(path) as source:
        parts = {name: source.read(name) for name in source.namelist()}
    sheet = "xl/worksheets/sheet1.xml"
    parts[sheet] = parts[sheet][: len(parts[sheet]) // 2]
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as target:
        for name, content in parts.items():
            target.writestr(name, content)

    with Workbook.open(path) as book, pytest.raises(WorkbookReadError) as excinfo:
        book.rows("FICHA")
    assert excinfo.value.sheet == "FICHA"
