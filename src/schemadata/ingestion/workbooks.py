"""Workbook loading: decode Excel files and extract their data sheets."""

from __future__ import annotations

import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd
from tqdm import tqdm

from schemadata.core.schemas import Schema
from schemadata.core.tables import TableData
from .sheets import extract_tables

logger = logging.getLogger(__name__)

WORKBOOK_SUFFIXES = (".xlsx",)
LOCK_FILE_PREFIX = "~$"


@dataclass
class LoadReport:
    """Outcome of loading one or more workbooks.

    Attributes:
        tables: Extracted tables, keyed by sheet name.
        files: Number of workbook files considered.
        skipped_sheets: Data sheets that yielded no table.
        failed_files: Files the decoder could not read.
        logs: Human-readable progress lines.
    """

    tables: Dict[str, TableData] = field(default_factory=dict)
    files: int = 0
    skipped_sheets: int = 0
    failed_files: int = 0
    logs: List[str] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return sum(t.row_count for t in self.tables.values())

    def summary(self) -> str:
        return (
            f"Loaded {len(self.tables)} tables from {self.files} files, "
            f"{self.total_rows} total rows ({self.skipped_sheets} sheets skipped, "
            f"{self.failed_files} files failed)"
        )


def read_workbook(path: Path) -> Dict[str, List[List[Any]]]:
    """Decode every sheet of a workbook into raw cell rows.

    Raises:
        ValueError: If the file cannot be decoded.
    """
    try:
        frames = pd.read_excel(path, sheet_name=None, header=None, dtype=object)
    except (OSError, ValueError, KeyError, zipfile.BadZipFile) as e:
        raise ValueError(f"Failed to read workbook {path}: {e}") from e
    sheets: Dict[str, List[List[Any]]] = {}
    for sheet_name, df in frames.items():
        cells = df.to_numpy(dtype=object)
        sheets[str(sheet_name)] = np.where(df.isna().to_numpy(), None, cells).tolist()
    return sheets


def collect_workbook_paths(paths: Iterable[Path]) -> List[Path]:
    """Expand directories and keep only workbook files, skipping lock files."""
    out: List[Path] = []
    for p in paths:
        candidates = sorted(p.rglob("*")) if p.is_dir() else [p]
        for c in candidates:
            if c.suffix.lower() in WORKBOOK_SUFFIXES and not c.name.startswith(LOCK_FILE_PREFIX):
                out.append(c)
    return out


def load_workbooks(
    paths: Iterable[Path], schema: Optional[Schema] = None, *, progress: bool = False
) -> LoadReport:
    """Load data tables from workbook files and directories.

    A sheet name seen in an earlier file is replaced by the later one, with
    a warning.
    Undecodable files are logged and counted, not raised.

    Args:
        paths: Files or directories to scan for ``.xlsx`` workbooks.
        schema: Optional schema used for header detection.
        progress: Show a tqdm progress bar.

    Returns:
        LoadReport with the tables and aggregate counts.
    """
    files = collect_workbook_paths(paths)
    report = LoadReport(files=len(files))
    report.logs.append(f"Found {len(files)} Excel files")

    for path in tqdm(files, desc="Loading workbooks", unit="files", disable=not progress):
        try:
            sheets = read_workbook(path)
        except ValueError as e:
            report.failed_files += 1
            report.logs.append(f"[ERROR] {path.name}: {e}")
            logger.warning("%s", e)
            continue

        tables, skipped = extract_tables(sheets, schema)
        report.skipped_sheets += skipped
        if not tables:
            report.logs.append(f"[SKIP] {path.name}: no data sheets found")
            continue
        for table in tables:
            if table.name in report.tables:
                previous = report.tables[table.name]
                logger.warning(
                    "Sheet %s in %s replaces the table loaded earlier (%d rows)",
                    table.name,
                    path.name,
                    previous.row_count,
                )
                report.logs.append(
                    f"[DUP] {path.name} -> {table.name}: replaces earlier sheet "
                    f"({previous.row_count} rows)"
                )
            report.tables[table.name] = table
            report.logs.append(
                f"[Data] {path.name} -> {table.name}: "
                f"{table.row_count} rows, {len(table.headers)} cols"
            )

    report.logs.append(report.summary())
    logger.info("%s", report.summary())
    return report


__all__ = [
    "LoadReport",
    "read_workbook",
    "collect_workbook_paths",
    "load_workbooks",
]
