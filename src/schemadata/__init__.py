"""schemadata: schema-aware query and integrity engine for spreadsheet data.

The package binds a declarative schema (tables, keys, relationships, enums) to
tables extracted from Excel workbooks. It runs SQL against the loaded data or
against the schema itself, and checks the data against the schema's
constraints.
"""

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
