from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path

from xlharvest.extraction.fields import Grid, extract_fields
from xlharvest.extraction.types import FieldConfig, OutputRecord
from xlharvest.extraction.unique import collect_unique


def build_record(
    path: Path,
    data_rows: Grid,
    id_rows: Grid,
    fields: Mapping[str, FieldConfig],
    created_at: datetime,
    modified_at: datetime,
    header_pattern: str | re.Pattern[str],
    logger: logging.Logger | None = None,
    strict_missing: bool = False,
) -> OutputRecord:
    """Compose the harvested values of one workbook into an ``OutputRecord``.

    Errors from field extraction or identifier collection propagate; no
    partial record is ever returned.
    """

    data = extract_fields(data_rows, fields, logger=logger, strict_missing=strict_missing)
    unique_ids = collect_unique(id_rows, header_pattern)
    return OutputRecord(
        file=str(path),
        base_name=path.name,
        created_at=created_at,
        modified_at=modified_at,
        data=data,
        unique_ids=unique_ids,
    )


__all__ = ["build_record"]
