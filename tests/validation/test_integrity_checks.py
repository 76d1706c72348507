"""Tests for the individual integrity checks."""

import pytest

from conftest import make_table
from schemadata.core.enums import Category, Severity
from schemadata.core.schemas import Schema
from schemadata.validation.checks import TableFrame, ValidationContext, pk_key_set
from schemadata.validation.checks.enum_values import EnumValuesCheck
from schemadata.validation.checks.foreign_key import ForeignKeyCheck
from schemadata.validation.checks.not_null import NotNullCheck
from schemadata.validation.checks.numeric_type import NumericTypeCheck
from schemadata.validation.checks.primary_key import PrimaryKeyCheck


def _schema(*tables, refs=(), enums=()):
    return Schema.from_dict({"tables": list(tables), "refs": list(refs), "enums": list(enums)})


class TestPrimaryKeyCheck:
    @pytest.fixture
    def schema(self):
        return _schema(
            {
                "id": "p",
                "name": "Pair",
                "columns": [
                    {"name": "a", "isPrimaryKey": True},
                    {"name": "b", "isPrimaryKey": True},
                ],
            }
        )

    def test_duplicate_composite_key_flagged_once_at_second_occurrence(self, schema):
        frame = TableFrame.from_table(
            make_table("Pair", [{"a": "1", "b": "a"}, {"a": "1", "b": "a"}, {"a": "2", "b": "b"}])
        )
        context = ValidationContext(schema=schema)
        outcome = PrimaryKeyCheck().validate(frame, schema.tables[0], context)

        assert outcome.checks == 3
        assert len(outcome.issues) == 1
        issue = outcome.issues[0]
        assert issue.category == Category.UNIQUENESS
        assert issue.severity == Severity.ERROR
        assert issue.row == 3
        assert issue.value == "1|a"
        assert issue.column == "a+b"
        assert "row 2" in issue.description

    def test_all_empty_keys_are_not_compared(self, schema):
        frame = TableFrame.from_table(
            make_table("Pair", [{"a": "", "b": ""}, {"a": "", "b": ""}])
        )
        outcome = PrimaryKeyCheck().validate(frame, schema.tables[0], ValidationContext(schema))
        assert outcome.checks == 2
        assert outcome.issues == []

    def test_applies_only_with_primary_key(self):
        schema = _schema({"name": "Log", "columns": [{"name": "msg"}]})
        assert not PrimaryKeyCheck().applies_to_table(schema.tables[0], ValidationContext(schema))


class TestNotNullCheck:
    def test_empty_and_missing_values_flagged(self):
        schema = _schema(
            {
                "name": "Character",
                "columns": [
                    {"name": "id", "isPrimaryKey": True, "isNotNull": True},
                    {"name": "name", "isNotNull": True},
                ],
            }
        )
        table = make_table(
            "Character",
            [{"id": "1", "name": "Aria"}, {"id": "2", "name": ""}, {"id": ""}],
            headers=["id", "name"],
        )
        outcome = NotNullCheck().validate(
            TableFrame.from_table(table), schema.tables[0], ValidationContext(schema)
        )
        assert outcome.checks == 3
        assert [i.row for i in outcome.issues] == [3, 4]
        assert all(i.column == "name" and i.value == "(empty)" for i in outcome.issues)
        assert all(i.category == Category.REQUIRED for i in outcome.issues)

    def test_column_absent_from_sheet_counts_as_empty(self):
        schema = _schema({"name": "T", "columns": [{"name": "code", "isNotNull": True}]})
        frame = TableFrame.from_table(make_table("T", [{"other": "x"}]))
        outcome = NotNullCheck().validate(frame, schema.tables[0], ValidationContext(schema))
        assert len(outcome.issues) == 1


class TestForeignKeyCheck:
    @pytest.fixture
    def schema(self):
        return _schema(
            {"id": "t1", "name": "Parent", "columns": [{"name": "id", "isPrimaryKey": True}]},
            {
                "id": "t2",
                "name": "Child",
                "columns": [
                    {"name": "id", "isPrimaryKey": True},
                    {"name": "parent_id", "isForeignKey": True},
                ],
            },
            refs=[
                {
                    "fromTable": "t2",
                    "fromColumns": ["parent_id"],
                    "toTable": "t1",
                    "toColumns": ["id"],
                }
            ],
        )

    def _context(self, schema, parent_keys):
        context = ValidationContext(schema=schema)
        if parent_keys is not None:
            context.pk_values["parent"] = set(parent_keys)
        return context

    def test_missing_parent_value_flagged_and_empty_ignored(self, schema):
        frame = TableFrame.from_table(
            make_table(
                "Child",
                [
                    {"id": "a", "parent_id": "1"},
                    {"id": "b", "parent_id": "4"},
                    {"id": "c", "parent_id": ""},
                ],
            )
        )
        child = schema.table_by_name("Child")
        outcome = ForeignKeyCheck().validate(frame, child, self._context(schema, {"1", "2", "3"}))
        assert outcome.applied
        assert outcome.checks == 3
        assert len(outcome.issues) == 1
        issue = outcome.issues[0]
        assert issue.value == "4"
        assert issue.column == "parent_id"
        assert issue.category == Category.REFERENTIAL
        assert "Parent" in issue.description

    def test_target_without_data_is_skipped(self, schema):
        frame = TableFrame.from_table(make_table("Child", [{"id": "a", "parent_id": "9"}]))
        child = schema.table_by_name("Child")
        outcome = ForeignKeyCheck().validate(frame, child, self._context(schema, None))
        assert not outcome.applied
        assert outcome.checks == 0
        assert outcome.issues == []

    def test_parent_side_is_not_checked(self, schema):
        parent = schema.table_by_name("Parent")
        assert not ForeignKeyCheck().applies_to_table(parent, ValidationContext(schema))

    def test_dangling_target_is_skipped(self):
        schema = _schema(
            {"id": "t2", "name": "Child", "columns": [{"name": "x_id", "isForeignKey": True}]},
            refs=[{"fromTable": "t2", "fromColumns": ["x_id"], "toTable": "gone", "toColumns": ["id"]}],
        )
        frame = TableFrame.from_table(make_table("Child", [{"x_id": "1"}]))
        outcome = ForeignKeyCheck().validate(frame, schema.tables[0], ValidationContext(schema))
        assert not outcome.applied
        assert outcome.issues == []


class TestEnumValuesCheck:
    @pytest.fixture
    def schema(self):
        return _schema(
            {"name": "T", "columns": [{"name": "grade", "type": "Grade"}]},
            enums=[{"name": "grade", "values": ["A", "B", "C"]}],
        )

    def test_undeclared_value_flagged_case_insensitively(self, schema):
        frame = TableFrame.from_table(
            make_table("T", [{"grade": "a"}, {"grade": "d"}, {"grade": ""}, {"grade": "C"}])
        )
        outcome = EnumValuesCheck().validate(frame, schema.tables[0], ValidationContext(schema))
        assert outcome.checks == 4
        assert len(outcome.issues) == 1
        issue = outcome.issues[0]
        assert issue.value == "d"
        assert issue.row == 3
        assert issue.category == Category.ENUM
        assert "allowed: A, B, C" in issue.description

    def test_schema_qualified_enum_type(self):
        schema = _schema(
            {"name": "T", "columns": [{"name": "grade", "type": "public.grade"}]},
            enums=[{"name": "grade", "values": ["A"]}],
        )
        assert EnumValuesCheck().applies_to_table(schema.tables[0], ValidationContext(schema))


class TestNumericTypeCheck:
    def test_non_numeric_values_are_warnings(self):
        schema = _schema(
            {
                "name": "T",
                "columns": [
                    {"name": "qty", "type": "int"},
                    {"name": "price", "type": "decimal(10,2)"},
                    {"name": "label", "type": "varchar"},
                ],
            }
        )
        frame = TableFrame.from_table(
            make_table(
                "T",
                [
                    {"qty": "3", "price": "1.25", "label": "x"},
                    {"qty": "many", "price": "", "label": "y"},
                    {"qty": "-2", "price": "abc", "label": "z"},
                ],
            )
        )
        outcome = NumericTypeCheck().validate(frame, schema.tables[0], ValidationContext(schema))
        assert outcome.checks == 6
        assert [(i.column, i.value) for i in outcome.issues] == [("qty", "many"), ("price", "abc")]
        assert all(i.severity == Severity.WARNING for i in outcome.issues)


def test_pk_key_set_joins_composite_columns():
    schema = _schema(
        {
            "name": "Pair",
            "columns": [{"name": "a", "isPrimaryKey": True}, {"name": "B", "isPrimaryKey": True}],
        }
    )
    frame = TableFrame.from_table(make_table("Pair", [{"a": "1", "b": "x"}]))
    assert pk_key_set(frame, schema.tables[0]) == {"1|x"}


def test_issue_ids_are_sequential_within_a_run():
    context = ValidationContext(schema=Schema())
    assert [context.next_issue_id() for _ in range(3)] == ["dv-1", "dv-2", "dv-3"]
