from __future__ import annotations

import json
from pathlib import Path

import pytest

from xlharvest.errors import ConfigReadError, ProcessingDeclined
from xlharvest.scan.diff import compare_and_prompt, diff_new_files, read_processed_files


def _record(file: str) -> dict[str, object]:
    return {
        "file": file,
        "base_name": Path(file).name,
        "created_at": "2024-01-02T10:00:00+01:00",
        "modified_at": "2024-01-03T10:00:00+01:00",
        "data": {"client": "Acme"},
        "unique_ids": ["R-1"],
    }


def test_diff_returns_only_unseen_paths_in_order() -> None:
    prior = {"a.xlsx": object(), "b.xlsx": object()}
    current = ["a.xlsx", "b.xlsx", "c.xlsx"]

    assert diff_new_files(prior, current) == ["c.xlsx"]
    assert current == ["a.xlsx", "b.xlsx", "c.xlsx"]


def test_diff_compares_paths_as_strings(tmp_path: Path) -> None:
    known = tmp_path / "a.xlsx"
    fresh = tmp_path / "z.xlsx"
    assert diff_new_files({str(known): None}, [fresh, known]) == [fresh]


def test_read_processed_files_indexes_by_path(tmp_path: Path) -> None:
    log = tmp_path / "results.json"
    log.write_text(json.dumps([_record("x/a.xlsx"), _record("x/b.xlsx")]), encoding="utf-8")

    processed = read_processed_files(log)

    assert set(processed) == {"x/a.xlsx", "x/b.xlsx"}
    assert processed["x/a.xlsx"].unique_ids == ["R-1"]


def test_read_processed_files_accepts_null_log(tmp_path: Path) -> None:
    log = tmp_path / "results.json"
    log.write_text("null", encoding="utf-8")
    assert read_processed_files(log) == {}


@pytest.mark.parametrize("content", ["{not json", '{"file": "a"}', '[{"base_name": "a"}]'])
def test_read_processed_files_rejects_bad_logs(tmp_path: Path, content: str) -> None:
    log = tmp_path / "results.json"
    log.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigReadError):
        read_processed_files(log)


def test_read_processed_files_missing_log(tmp_path: Path) -> None:
    with pytest.raises(ConfigReadError):
        read_processed_files(tmp_path / "absent.json")


def test_compare_and_prompt_asks_about_new_files(tmp_path: Path) -> None:
    root = tmp_path / "offers"
    root.mkdir()
    (root / "old.xlsx").write_bytes(b"")
    (root / "new.xlsx").write_bytes(b"")
    log = tmp_path / "results.json"
    log.write_text(json.dumps([_record(str(root / "old.xlsx"))]), encoding="utf-8")
    prompts: list[str] = []

    def confirm(prompt: str) -> bool:
        prompts.append(prompt)
        return True

    new_files = compare_and_prompt(log, root, confirm)

    assert new_files == [root / "new.xlsx"]
    assert str(root / "new.xlsx") in prompts[0]


def test_compare_and_prompt_refusal_raises(tmp_path: Path) -> None:
    root = tmp_path / "offers"
    root.mkdir()
    (root / "new.xlsx").write_bytes(b"")
    log = tmp_path / "results.json"
    log.write_text("[]", encoding="utf-8")

    with pytest.raises(ProcessingDeclined):
        compare_and_prompt(log, root, lambda prompt: False)


def test_compare_and_prompt_without_new_files_skips_prompt(tmp_path: Path) -> None:
    root = tmp_path / "offers"
    root.mkdir()
    (root / "old.xlsx").write_bytes(b"")
    log = tmp_path / "results.json"
    log.write_text(json.dumps([_record(str(root / "old.xlsx"))]), encoding="utf-8")

    def confirm(prompt: str) -> bool:
        raise AssertionError("prompt should not be shown")

    assert compare_and_prompt(log, root, confirm) == []
