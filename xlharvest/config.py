from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from xlharvest.errors import ConfigReadError
from xlharvest.extraction.types import FieldConfig, ensure_pattern


class Settings(BaseSettings):
    """Application configuration loaded from environment variables or .env files."""

    model_config = SettingsConfigDict(env_file=(".env", ".env.local"), env_prefix="XLHARVEST_")

    base_dir: Path = Path(".")
    output_dir: Path = Path("./output")
    data_sheet_pattern: str = "^FICHA$"
    id_sheet_patterns: list[str] = ["^SAP$", "^OFERTA$"]
    id_header_pattern: str = "Registral"
    list_report: Path = Path("files.csv")
    log_level: str = "INFO"
    strict_missing_labels: bool = False

    @field_validator("data_sheet_pattern", "id_header_pattern")
    @classmethod
    def validate_pattern(cls, value: str) -> str:
        return ensure_pattern(value)

    @field_validator("id_sheet_patterns")
    @classmethod
    def validate_patterns(cls, value: list[str]) -> list[str]:
        if not value:
            msg = "id_sheet_patterns must not be empty"
            raise ValueError(msg)
        for pattern in value:
            ensure_pattern(pattern)
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in logging.getLevelNamesMapping():
            msg = f"unknown log level {value!r}"
            raise ValueError(msg)
        return normalized

    def year_dir(self, year: str) -> Path:
        return self.base_dir / year


settings = Settings()

_FIELDS_ADAPTER = TypeAdapter(dict[str, FieldConfig])


def load_field_configs(path: Path | str) -> dict[str, FieldConfig]:
    """Read the JSON mapping of field name to label pattern and offsets."""

    location = Path(path)
    try:
        raw = location.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigReadError(location, str(exc)) from exc
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigReadError(location, f"invalid JSON: {exc}") from exc
    try:
        return _FIELDS_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise ConfigReadError(location, str(exc)) from exc


__all__ = ["Settings", "load_field_configs", "settings"]
