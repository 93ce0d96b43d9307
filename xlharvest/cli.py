from __future__ import annotations

import time
from pathlib import Path
from typing import Any

import typer

from xlharvest import __version__
from xlharvest.config import load_field_configs, settings
from xlharvest.errors import HarvestError, SheetNotFound
from xlharvest.extraction.sheets import locate_sheet
from xlharvest.extraction.types import OutputRecord
from xlharvest.harvest.service import HarvestService
from xlharvest.scan.walker import collect_excel_files, count_excel_files, write_file_listing
from xlharvest.utils.files import ensure_directory
from xlharvest.utils.log import configure_logging, get_logger
from xlharvest.workbook import Workbook

app = typer.Typer(
    help="Extract labelled values from Excel workbooks using a JSON field configuration.",
    add_completion=False,
)

logger = get_logger("cli")


def _version_callback(
    ctx: typer.Context,
    param: Any,
    value: bool,
) -> bool:
    if value:
        typer.echo(__version__)
        raise typer.Exit()
    return value


def _fail(message: str) -> typer.Exit:
    typer.echo(message, err=True)
    return typer.Exit(code=1)


def _print_record(record: OutputRecord) -> None:
    typer.echo(record.to_dict())


@app.callback()
def _main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Root entry point."""

    configure_logging(settings.log_level)


def read(
    config: Path = typer.Option(
        Path("cell_addresses.json"),
        "--config",
        help="JSON file mapping field names to label patterns and offsets.",
    ),
    file: Path | None = typer.Option(None, "--file", help="Single Excel file to process."),
    year: str | None = typer.Option(None, "--year", help="Year folder to scan under the base dir."),
    max_files: int = typer.Option(0, "--max", help="Maximum number of files to process."),
    output: str | None = typer.Option(None, "--output", help="Output JSON file name."),
    debug: bool = typer.Option(False, "--debug", help="Print harvested records and log details."),
) -> None:
    started = time.perf_counter()
    if debug:
        configure_logging("DEBUG")
    if file is None and not year:
        raise _fail("At least one of --file or --year is required.")

    try:
        fields = load_field_configs(config)
    except HarvestError as exc:
        raise _fail(str(exc)) from exc

    output_path: Path | None = None
    if output:
        try:
            ensure_directory(settings.output_dir, logger=logger)
        except HarvestError as exc:
            raise _fail(str(exc)) from exc
        output_path = settings.output_dir / output

    service = HarvestService(fields, config=settings, logger=logger)
    on_record = _print_record if debug else None
    records: list[OutputRecord] = []

    if file is not None:
        try:
            record = service.process_file(file)
        except HarvestError as exc:
            raise _fail(f"Error processing file {file}: {exc}") from exc
        if on_record is not None:
            on_record(record)
        records.append(record)

    if year:
        root = settings.year_dir(year)
        try:
            paths = collect_excel_files(root, logger=logger)
        except HarvestError as exc:
            raise _fail(f"Failed to read directory: {exc}") from exc
        typer.echo(f"Found {len(paths)} Excel files in {root}")
        if max_files:
            typer.echo(f"Only {max_files} files will be processed.")
        records.extend(service.process_many(paths, max_files=max_files, on_record=on_record))

    if output_path is not None:
        try:
            service.save_results(records, output_path)
        except HarvestError as exc:
            raise _fail(str(exc)) from exc
        typer.echo(f"Results saved to: {output_path}")
    typer.echo(f"Completed in {time.perf_counter() - started:f} seconds")


def process(
    source: Path = typer.Option(..., "--source", help="Results JSON from a previous run."),
    config: Path = typer.Option(..., "--config", help="Field configuration JSON."),
    year: str = typer.Option("", "--year", help="Year folder to scan under the base dir."),
    output: str = typer.Option("results.json", "--output", help="Output JSON file name."),
) -> None:
    try:
        fields = load_field_configs(config)
    except HarvestError as exc:
        raise _fail(str(exc)) from exc

    root = settings.year_dir(year) if year else settings.base_dir
    service = HarvestService(fields, config=settings, logger=logger, confirm=typer.confirm)
    try:
        records = service.process_new(source, root)
    except HarvestError as exc:
        raise _fail(str(exc)) from exc
    if not records:
        return

    output_path = settings.output_dir / output
    try:
        service.save_results(records, output_path)
    except HarvestError as exc:
        raise _fail(str(exc)) from exc
    typer.echo(f"Results saved to: {output_path}")


def count() -> None:
    try:
        counts = count_excel_files(settings.base_dir, logger=logger)
    except HarvestError as exc:
        raise _fail(str(exc)) from exc
    for line in counts.report_lines():
        typer.echo(line)


def count_and_list(
    report: Path | None = typer.Option(None, "--report", help="CSV file to write."),
) -> None:
    try:
        paths = collect_excel_files(settings.base_dir, logger=logger)
    except HarvestError as exc:
        raise _fail(str(exc)) from exc
    try:
        destination = write_file_listing(paths, report or settings.list_report)
    except HarvestError as exc:
        raise _fail(str(exc)) from exc
    typer.echo(f"Listed {len(paths)} files in {destination}")


def sheets(
    file: Path = typer.Option(..., "--file", help="Excel file to inspect."),
) -> None:
    try:
        with Workbook.open(file) as book:
            name = locate_sheet(book.sheet_names, settings.data_sheet_pattern)
    except SheetNotFound as exc:
        logger.error("Data sheet not found in %s: %s", file, exc)
        raise typer.Exit(code=1) from exc
    except HarvestError as exc:
        logger.error("Cannot open %s: %s", file, exc)
        raise typer.Exit(code=1) from exc
    logger.info("Data sheet: %s", name)
    typer.echo(name)


_COMMANDS = (
    (read, "read", "r", "Extract fields from one file or a year folder."),
    (process, "process", "p", "Process files missing from a previous results JSON."),
    (count, "count", "c", "Count files under the base dir by Excel extension."),
    (count_and_list, "count-and-list", "cl", "Write the list of .xlsx files to a CSV report."),
    (sheets, "sheets", "t", "Show which sheet of a file is used as the data sheet."),
)

for _command, _name, _alias, _help in _COMMANDS:
    app.command(_name, help=_help)(_command)
    app.command(_alias, help=_help, hidden=True)(_command)


def main() -> None:  # pragma: no cover - delegated to Typer
    app()


__all__ = ["app", "main"]
