"""Tests for loading workbook files."""

import pandas as pd
import pytest

from schemadata.ingestion.workbooks import collect_workbook_paths, load_workbooks, read_workbook


@pytest.fixture
def workbook(tmp_path):
    path = tmp_path / "game.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame({"id": [1, 2], "name": ["Aria", "Bram"], "level": [10, 7.5]}).to_excel(
            writer, sheet_name="Character", index=False
        )
        pd.DataFrame({"table": ["Character"], "column": ["id"]}).to_excel(
            writer, sheet_name="Define", index=False
        )
        pd.DataFrame({"id": [10], "character_id": [1]}).to_excel(
            writer, sheet_name="Skill", index=False
        )
    return path


def test_read_workbook_returns_raw_rows(workbook):
    sheets = read_workbook(workbook)
    assert list(sheets) == ["Character", "Define", "Skill"]
    assert sheets["Character"][0] == ["id", "name", "level"]
    assert sheets["Character"][1][1] == "Aria"


def test_read_workbook_rejects_non_workbooks(tmp_path):
    path = tmp_path / "broken.xlsx"
    path.write_text("not a workbook", encoding="utf-8")
    with pytest.raises(ValueError, match="Failed to read workbook"):
        read_workbook(path)


def test_collect_skips_lock_files_and_other_suffixes(tmp_path, workbook):
    (tmp_path / "~$game.xlsx").write_text("lock", encoding="utf-8")
    (tmp_path / "notes.csv").write_text("a,b", encoding="utf-8")
    assert collect_workbook_paths([tmp_path]) == [workbook]


def test_load_workbooks_extracts_data_sheets(workbook, schema):
    report = load_workbooks([workbook], schema)
    assert sorted(report.tables) == ["Character", "Skill"]
    character = report.tables["Character"]
    assert character.rows[0] == {"id": "1", "name": "Aria", "level": "10"}
    assert character.rows[1]["level"] == "7.5"
    assert character.source_rows == [2, 3]
    assert report.files == 1
    assert report.total_rows == 3
    assert report.failed_files == 0


def test_load_workbooks_counts_failures(tmp_path, workbook):
    (tmp_path / "broken.xlsx").write_text("not a workbook", encoding="utf-8")
    report = load_workbooks([tmp_path])
    assert report.files == 2
    assert report.failed_files == 1
    assert "Character" in report.tables
    assert any(line.startswith("[ERROR] broken.xlsx") for line in report.logs)
    assert report.logs[-1] == report.summary()


def test_repeated_sheet_name_replaces_earlier_table_with_warning(tmp_path, workbook, caplog):
    later = tmp_path / "patch.xlsx"
    with pd.ExcelWriter(later, engine="openpyxl") as writer:
        pd.DataFrame({"id": [3], "name": ["Cole"]}).to_excel(
            writer, sheet_name="Character", index=False
        )
    with caplog.at_level("WARNING", logger="schemadata.ingestion.workbooks"):
        report = load_workbooks([workbook, later])
    assert report.tables["Character"].rows == [{"id": "3", "name": "Cole"}]
    assert "replaces the table loaded earlier" in caplog.text
    assert "[DUP] patch.xlsx -> Character: replaces earlier sheet (2 rows)" in report.logs
