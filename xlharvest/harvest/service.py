from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

from xlharvest.config import Settings, settings
from xlharvest.errors import FileAccessError, HarvestError
from xlharvest.extraction.record import build_record
from xlharvest.extraction.sheets import locate_sheet, locate_sheet_chain
from xlharvest.extraction.types import FieldConfig, OutputRecord
from xlharvest.scan.diff import Confirm, compare_and_prompt
from xlharvest.scan.walker import collect_excel_files
from xlharvest.utils.files import ensure_directory, file_timestamps
from xlharvest.utils.log import get_logger
from xlharvest.workbook import Workbook


def _decline(prompt: str) -> bool:
    return False


class HarvestService:
    """Coordinate sheet lookup, extraction and persistence for workbook files."""

    def __init__(
        self,
        fields: Mapping[str, FieldConfig],
        config: Settings = settings,
        logger: logging.Logger | None = None,
        confirm: Confirm = _decline,
    ) -> None:
        self.fields = dict(fields)
        self.config = config
        self.logger = logger or get_logger(__name__)
        self.confirm = confirm

    def process_file(self, path: Path) -> OutputRecord:
        """Harvest one workbook; any failure propagates and yields no record."""

        with Workbook.open(path) as book:
            names = book.sheet_names
            data_sheet = locate_sheet(names, self.config.data_sheet_pattern)
            id_sheet = locate_sheet_chain(names, self.config.id_sheet_patterns)
            data_rows = book.rows(data_sheet)
            id_rows = book.rows(id_sheet)
        created_at, modified_at = file_timestamps(path)
        return build_record(
            path,
            data_rows,
            id_rows,
            self.fields,
            created_at=created_at,
            modified_at=modified_at,
            header_pattern=self.config.id_header_pattern,
            logger=self.logger,
            strict_missing=self.config.strict_missing_labels,
        )

    def process_many(
        self,
        paths: Sequence[Path],
        max_files: int = 0,
        on_record: Callable[[OutputRecord], None] | None = None,
    ) -> list[OutputRecord]:
        """Process files in order, skipping the ones that fail.

        When ``max_files`` is positive the run stops once that many records
        have been produced.
        """

        records: list[OutputRecord] = []
        total = len(paths)
        for index, path in enumerate(paths, start=1):
            self.logger.info("Processing file %d/%d: %s", index, total, path.name)
            try:
                record = self.process_file(path)
            except HarvestError as error:
                self.logger.error("Error processing file %s: %s", path, error)
            else:
                records.append(record)
                if on_record is not None:
                    on_record(record)
                if len(records) == max_files:
                    self.logger.warning("Reached the maximum number of files (%d)", max_files)
                    break
        return records

    def process_directory(self, root: Path, max_files: int = 0) -> list[OutputRecord]:
        paths = collect_excel_files(root, logger=self.logger)
        self.logger.info("Found %d Excel files in %s", len(paths), root)
        return self.process_many(paths, max_files=max_files)

    def process_new(self, log_path: Path, root: Path) -> list[OutputRecord]:
        """Process only the files under ``root`` that ``log_path`` does not list."""

        new_files = compare_and_prompt(log_path, root, self.confirm, logger=self.logger)
        if not new_files:
            return []
        return self.process_many(new_files)

    def save_results(self, records: Sequence[OutputRecord], path: Path) -> Path:
        """Write records as a pretty-printed JSON array."""

        ensure_directory(path.parent, logger=self.logger)
        payload = [record.to_dict() for record in records]
        self.logger.info("Writing results to %s", path)
        try:
            path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            raise FileAccessError(path, str(exc)) from exc
        return path


__all__ = ["HarvestService"]
