from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook as OpenpyxlWorkbook

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from xlharvest.config import Settings  # noqa: E402
from xlharvest.extraction.types import FieldConfig  # noqa: E402
from xlharvest.utils.log import ROOT_LOGGER  # noqa: E402

WorkbookFactory = Callable[[Path, Mapping[str, Sequence[Sequence[Any]]]], Path]


def write_workbook(path: Path, sheets: Mapping[str, Sequence[Sequence[Any]]]) -> Path:
    """Create an .xlsx file whose sheets hold the given rows, in order."""

    book = OpenpyxlWorkbook()
    book.remove(book.active)
    for title, rows in sheets.items():
        sheet = book.create_sheet(title)
        for row_index, row in enumerate(rows, start=1):
            for col_index, value in enumerate(row, start=1):
                if value is not None:
                    sheet.cell(row=row_index, column=col_index, value=value)
    path.parent.mkdir(parents=True, exist_ok=True)
    book.save(path)
    return path


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture()
def temp_settings(tmp_path: Path) -> Settings:
    return Settings(
        base_dir=tmp_path / "offers",
        output_dir=tmp_path / "output",
        list_report=tmp_path / "files.csv",
    )


@pytest.fixture()
def fields() -> dict[str, FieldConfig]:
    return {
        "client": FieldConfig(regex="^client:$", offset_x=1, offset_y=0),
        "amount": FieldConfig(regex="amount", offset_x=1, offset_y=0),
    }


@pytest.fixture()
def make_workbook() -> WorkbookFactory:
    return write_workbook
