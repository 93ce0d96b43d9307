from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


def ensure_pattern(value: str) -> str:
    """Return ``value`` unchanged if it compiles as a regular expression."""

    try:
        re.compile(value)
    except re.error as exc:
        msg = f"invalid regular expression {value!r}: {exc}"
        raise ValueError(msg) from exc
    return value


class FieldConfig(BaseModel):
    """Where to find one field: a label pattern and the offset to its value."""

    model_config = ConfigDict(frozen=True)

    regex: str
    offset_x: int = 0
    offset_y: int = 0

    @field_validator("regex")
    @classmethod
    def validate_regex(cls, value: str) -> str:
        return ensure_pattern(value)

    def compiled(self) -> re.Pattern[str]:
        return re.compile(self.regex, re.IGNORECASE)


@dataclass(slots=True)
class OutputRecord:
    """Values harvested from one workbook."""

    file: str
    base_name: str
    created_at: datetime
    modified_at: datetime
    data: dict[str, str] = field(default_factory=dict)
    unique_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "base_name": self.base_name,
            "created_at": self.created_at.isoformat(),
            "modified_at": self.modified_at.isoformat(),
            "data": dict(self.data),
            "unique_ids": list(self.unique_ids),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> OutputRecord:
        return cls(
            file=str(payload["file"]),
            base_name=str(payload.get("base_name", "")),
            created_at=datetime.fromisoformat(payload["created_at"]),
            modified_at=datetime.fromisoformat(payload["modified_at"]),
            data={str(key): str(value) for key, value in (payload.get("data") or {}).items()},
            unique_ids=[str(value) for value in payload.get("unique_ids") or []],
        )


__all__ = ["FieldConfig", "OutputRecord", "ensure_pattern"]
