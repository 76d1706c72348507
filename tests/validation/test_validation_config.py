"""Tests for the validation configuration functions and constants."""

import pytest

from schemadata.core.enums import Category, Severity
from schemadata.validation.config import get_severity, is_numeric_type


def test_get_severity_valid():
    assert get_severity(Category.UNIQUENESS) == Severity.ERROR
    assert get_severity(Category.REQUIRED) == Severity.ERROR
    assert get_severity(Category.REFERENTIAL) == Severity.ERROR
    assert get_severity(Category.ENUM) == Severity.ERROR
    assert get_severity(Category.TYPE) == Severity.WARNING


def test_get_severity_accepts_plain_strings():
    assert get_severity("type") == Severity.WARNING


def test_get_severity_invalid_category():
    with pytest.raises(ValueError, match="Unknown category: spelling"):
        get_severity("spelling")


def test_all_categories_have_severity_configured():
    for category in Category:
        assert get_severity(category) in (Severity.ERROR, Severity.WARNING, Severity.INFO)


@pytest.mark.parametrize(
    "type_name",
    ["int", "int4", "INTEGER", "bigint unsigned", "decimal(10,2)", "Float", "double precision"],
)
def test_numeric_types(type_name):
    assert is_numeric_type(type_name)


@pytest.mark.parametrize("type_name", ["varchar", "point", "interval", "text", ""])
def test_non_numeric_types(type_name):
    assert not is_numeric_type(type_name)
