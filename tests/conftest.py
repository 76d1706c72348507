"""Shared pytest fixtures: a small game-design schema and matching data tables."""

from typing import Dict, List

import pytest

from schemadata.core.schemas import Schema
from schemadata.core.tables import TableData


def make_table(name: str, rows: List[Dict[str, str]], headers: List[str] = None) -> TableData:
    """Build TableData with headers taken from the first row when not given."""
    if headers is None:
        headers = list(rows[0].keys()) if rows else []
    return TableData(name=name, headers=headers, rows=rows)


@pytest.fixture
def schema_dict() -> Dict:
    """Serialized schema in the parser's camelCase form."""
    return {
        "tables": [
            {
                "id": "t-character",
                "name": "Character",
                "groupName": "core",
                "note": "Playable characters",
                "columns": [
                    {"name": "id", "type": "int", "isPrimaryKey": True},
                    {"name": "name", "type": "varchar", "isNotNull": True},
                    {"name": "class", "type": "char_class"},
                    {"name": "level", "type": "int"},
                ],
            },
            {
                "id": "t-skill",
                "name": "Skill",
                "groupName": "core",
                "columns": [
                    {"name": "id", "type": "int", "isPrimaryKey": True},
                    {"name": "character_id", "type": "int", "isForeignKey": True},
                    {"name": "title", "type": "varchar"},
                ],
            },
            {
                "id": "t-index",
                "name": "Index",
                "columns": [
                    {"name": "name", "type": "varchar", "isPrimaryKey": True},
                    {"name": "note", "type": "text"},
                ],
            },
        ],
        "refs": [
            {
                "id": "r1",
                "fromTable": "t-skill",
                "fromColumns": ["character_id"],
                "toTable": "t-character",
                "toColumns": ["id"],
                "type": "many-to-one",
            }
        ],
        "enums": [
            {
                "name": "char_class",
                "values": [
                    {"name": "Warrior", "note": "melee"},
                    {"name": "Mage"},
                    "Rogue",
                ],
            }
        ],
    }


@pytest.fixture
def schema(schema_dict) -> Schema:
    return Schema.from_dict(schema_dict)


@pytest.fixture
def character_table() -> TableData:
    return make_table(
        "Character",
        [
            {"id": "1", "name": "Aria", "class": "Warrior", "level": "10"},
            {"id": "2", "name": "Bram", "class": "mage", "level": "7"},
            {"id": "3", "name": "Cole", "class": "Rogue", "level": "12"},
        ],
    )


@pytest.fixture
def skill_table() -> TableData:
    return make_table(
        "Skill",
        [
            {"id": "10", "character_id": "1", "title": "Slash"},
            {"id": "11", "character_id": "3", "title": "Sneak"},
            {"id": "12", "character_id": "2", "title": "Fireball"},
        ],
    )


@pytest.fixture
def index_table() -> TableData:
    return make_table(
        "Index",
        [
            {"name": "Index", "note": "Index"},
            {"name": "weapons", "note": "armory"},
        ],
    )


@pytest.fixture
def tables(character_table, skill_table, index_table) -> Dict[str, TableData]:
    return {
        "Character": character_table,
        "Skill": skill_table,
        "Index": index_table,
    }
