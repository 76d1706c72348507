"""Tests for run_validation over whole table sets."""

from conftest import make_table
from schemadata.core.enums import Category, Severity
from schemadata.core.schemas import Schema
from schemadata.validation import ALL_CHECKS, run_validation


def _spec_schema():
    return Schema.from_dict(
        {
            "tables": [
                {"id": "c", "name": "Character", "columns": [{"name": "id", "isPrimaryKey": True}]},
                {
                    "id": "s",
                    "name": "Skill",
                    "columns": [
                        {"name": "id", "isPrimaryKey": True},
                        {"name": "character_id", "isForeignKey": True},
                    ],
                },
            ],
            "refs": [
                {
                    "fromTable": "s",
                    "fromColumns": ["character_id"],
                    "toTable": "c",
                    "toColumns": ["id"],
                }
            ],
        }
    )


def test_end_to_end_single_referential_error():
    tables = {
        "Character": make_table("Character", [{"id": "1"}]),
        "Skill": make_table(
            "Skill",
            [{"id": "10", "character_id": "1"}, {"id": "11", "character_id": "99"}],
        ),
    }
    result = run_validation(_spec_schema(), tables)

    assert len(result.issues) == 1
    issue = result.issues[0]
    assert issue.category == Category.REFERENTIAL
    assert issue.severity == Severity.ERROR
    assert issue.table == "Skill"
    assert issue.column == "character_id"
    assert issue.value == "99"
    assert issue.row == 3
    assert result.error_count == 1
    assert result.by_table == {"Skill": [issue]}
    assert result.by_category == {"referential": [issue]}


def test_foreign_keys_resolve_regardless_of_table_order():
    tables = [
        make_table("Skill", [{"id": "10", "character_id": "1"}]),
        make_table("Character", [{"id": "1"}]),
    ]
    result = run_validation(_spec_schema(), tables)
    assert result.issues == []
    skill_stat = next(s for s in result.table_stats if s.name == "Skill")
    assert skill_stat.checked_fk


def test_sheet_names_match_schema_case_insensitively():
    tables = {
        "character": make_table("character", [{"id": "1"}, {"id": "1"}]),
        "SKILL": make_table("SKILL", [{"id": "10", "character_id": "2"}]),
    }
    result = run_validation(_spec_schema(), tables)
    assert sorted((i.table, i.category.value) for i in result.issues) == [
        ("SKILL", "referential"),
        ("character", "uniqueness"),
    ]
    assert all(s.matched for s in result.table_stats)


def test_missing_parent_data_skips_foreign_key_check():
    tables = {"Skill": make_table("Skill", [{"id": "10", "character_id": "99"}])}
    result = run_validation(_spec_schema(), tables)
    assert result.issues == []
    stat = result.table_stats[0]
    assert stat.checked_pk
    assert not stat.checked_fk
    assert stat.checks == 1


def test_unmatched_tables_listed_with_zero_checks(schema):
    tables = {"Notes": make_table("Notes", [{"text": "hello"}])}
    result = run_validation(schema, tables)
    stat = result.table_stats[0]
    assert not stat.matched
    assert stat.checks == 0
    assert stat.rows == 1
    assert result.tables == ["Notes"]
    assert result.score == 100
    assert result.total_checks == 0


def test_fixture_data_stats_and_score(schema, tables):
    result = run_validation(schema, tables)
    assert result.issues == []
    assert result.score == 100
    character = next(s for s in result.table_stats if s.name == "Character")
    assert character.checked_pk and character.checked_not_null
    assert character.checked_enum and character.checked_type
    assert not character.checked_fk
    # pk 3 + not null 3 + enum 3 + numeric id/level 6
    assert character.checks == 15
    assert result.total_rows == 8


def test_issues_reported_across_checks(schema, tables):
    tables["Character"].rows.append({"id": "1", "name": "", "class": "Bard", "level": "high"})
    result = run_validation(schema, tables)
    categories = [i.category.value for i in result.issues]
    assert categories == ["uniqueness", "required", "enum", "type"]
    assert [i.id for i in result.issues] == ["dv-1", "dv-2", "dv-3", "dv-4"]
    assert all(i.row == 5 for i in result.issues)
    character = next(s for s in result.table_stats if s.name == "Character")
    assert (character.errors, character.warnings) == (3, 1)
    assert result.has_errors()
    assert 0 <= result.score < 100


def test_score_is_clamped_and_rounded():
    schema = Schema.from_dict(
        {"tables": [{"name": "T", "columns": [{"name": "n", "type": "int", "isNotNull": True}]}]}
    )
    tables = {"T": make_table("T", [{"n": "x"}, {"n": "1"}, {"n": "2"}, {"n": "3"}])}
    result = run_validation(schema, tables)
    # 8 checks (not null 4 + type 4), 1 warning
    assert result.total_checks == 8
    assert result.score == 88
    assert not result.has_errors()
    assert result.has_errors(strict=True)


def test_half_score_rounds_up():
    schema = Schema.from_dict(
        {"tables": [{"name": "T", "columns": [{"name": "id", "isPrimaryKey": True}]}]}
    )
    ids = ["1", "1", "1", "1", "2", "3", "4", "5"]
    tables = {"T": make_table("T", [{"id": v} for v in ids])}
    result = run_validation(schema, tables)
    # 8 checks, 3 duplicates: 62.5
    assert result.total_checks == 8
    assert len(result.issues) == 3
    assert result.score == 63


def test_registry_holds_one_instance_per_check():
    ids = [c.check_id for c in ALL_CHECKS]
    assert ids == ["primary_key", "not_null", "foreign_key", "enum", "type"]
