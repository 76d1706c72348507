import argparse
import importlib
import logging
from pathlib import Path
from typing import List, Optional

import colorlog
import pandas as pd

from schemadata import __version__ as _PACKAGE_VERSION
from schemadata.core.schemas import Schema, load_schema

OUTPUT_FORMATS = ["table", "json"]


def setup_logging(
    verbose: bool = False, warnings_only: bool = False, errors_only: bool = False
) -> None:
    logger = logging.getLogger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
    log_format = (
        "%(asctime)s:%(levelname)s:%(name)s in %(filename)s:%(funcName)s:%(lineno)d: %(message)s"
    )
    log_colors = {
        "DEBUG": "cyan",
        "INFO": "green",
        "WARNING": "yellow",
        "ERROR": "red",
        "CRITICAL": "bold_red",
    }
    stream_handler = colorlog.StreamHandler()
    formatter = colorlog.ColoredFormatter(f"%(log_color)s{log_format}", log_colors=log_colors)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
    if errors_only:
        logger.setLevel(logging.ERROR)
    elif warnings_only:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _load_schema_arg(path_arg: Optional[str]) -> Optional[Schema]:
    """Load the --schema file if given.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the document is not a valid schema.
    """
    if not path_arg:
        return None
    schema = load_schema(Path(path_arg))
    logging.info(
        "Loaded schema %s: %d tables, %d refs, %d enums",
        path_arg,
        len(schema.tables),
        len(schema.refs),
        len(schema.enums),
    )
    return schema


def _load_data(args: argparse.Namespace, schema: Optional[Schema]):
    from schemadata.ingestion import load_workbooks

    paths = [Path(p) for p in args.data]
    missing = [p for p in paths if not p.exists()]
    for p in missing:
        logging.warning("Data path not found: %s", p)
    existing = [p for p in paths if p.exists()]
    return load_workbooks(existing, schema, progress=bool(getattr(args, "progress", False)))


def _read_sql(args: argparse.Namespace) -> Optional[str]:
    if getattr(args, "sql_file", None):
        try:
            return Path(args.sql_file).read_text(encoding="utf-8")
        except OSError as e:
            logging.error("Failed to read SQL file %s: %s", args.sql_file, e)
            return None
    return args.sql


def _print_query_result(result, fmt: str) -> None:
    if fmt == "json":
        print(result.to_json())
        return

    if result.error is not None:
        print(f"Error: {result.error}")
        return

    blocks = result.multi_results if result.multi_results is not None else [result]
    for i, block in enumerate(blocks):
        if result.multi_results is not None:
            if i:
                print()
            print(f"-- [{i + 1}] {block.table_name}")
            if block.error is not None:
                print(f"Error: {block.error}")
                continue
        if block.columns:
            print(pd.DataFrame(block.rows, columns=block.columns).to_string(index=False))
        print(f"({block.row_count} rows)")
    if result.duration is not None:
        print(f"Time: {result.duration:.1f} ms")


def _write_report(
    content: str, target, default_dir: Path, filename: str, label: str
) -> Path:
    report_dir = default_dir if target is True else Path(target)
    report_dir.mkdir(parents=True, exist_ok=True)
    report_path = report_dir / filename
    with open(report_path, "w", encoding="utf-8") as f:
        f.write(content)
    logging.info("%s report saved: %s", label, report_path)
    return report_path


def cmd_load(args: argparse.Namespace) -> int:
    """Extract tables from workbooks and print what was found.

    Returns:
        0 if at least one table was extracted, 1 if none, 2 on a bad schema.
    """
    try:
        schema = _load_schema_arg(getattr(args, "schema", None))
    except (FileNotFoundError, ValueError) as e:
        logging.error("%s", e)
        return 2

    report = _load_data(args, schema)
    for line in report.logs:
        print(line)
    return 0 if report.tables else 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate loaded workbook data against a schema.

    Returns:
        0 if validation passed without errors
        1 if no data tables were validated
        2 if validation errors were found (or warnings with --strict), or the
          schema could not be loaded
    """
    registry = importlib.import_module("schemadata.validation.registry")

    try:
        schema = _load_schema_arg(args.schema)
    except (FileNotFoundError, ValueError) as e:
        logging.error("%s", e)
        return 2

    report = _load_data(args, schema)
    if not report.tables:
        logging.error("No data tables were loaded.")
        return 1

    result = registry.run_validation(schema, report.tables)
    registry.print_report(result)

    if result.matched_tables == 0:
        logging.error("No loaded table matches a schema table.")
        return 1

    stem = Path(args.schema).stem
    default_dir = Path(args.schema).resolve().parent
    if args.report:
        _write_report(
            result.to_markdown(), args.report, default_dir, f"{stem}_validation.md", "Markdown"
        )
    if args.report_json:
        _write_report(
            result.to_json(), args.report_json, default_dir, f"{stem}_validation.json", "JSON"
        )

    strict = bool(getattr(args, "strict", False))
    if result.has_errors(strict=strict):
        logging.error(
            "Validation found %d errors and %d warnings.",
            result.error_count,
            result.warning_count,
        )
        return 2

    logging.info("Validation passed (score %d).", result.score)
    return 0


def cmd_query(args: argparse.Namespace) -> int:
    """Run SQL against loaded workbook data.

    Returns:
        0 on success, 2 if the query or any statement failed.
    """
    from schemadata.query import execute_data_sql

    try:
        schema = _load_schema_arg(getattr(args, "schema", None))
    except (FileNotFoundError, ValueError) as e:
        logging.error("%s", e)
        return 2

    sql = _read_sql(args)
    if sql is None:
        return 2

    report = _load_data(args, schema)
    result = execute_data_sql(sql, report.tables, schema)
    _print_query_result(result, args.format)
    return 0 if result.ok else 2


def cmd_meta_query(args: argparse.Namespace) -> int:
    """Run SQL against the schema's metadata tables.

    Returns:
        0 on success, 2 if the schema could not be loaded or the query failed.
    """
    from schemadata.query import execute_sql

    try:
        schema = _load_schema_arg(args.schema)
    except (FileNotFoundError, ValueError) as e:
        logging.error("%s", e)
        return 2

    sql = _read_sql(args)
    if sql is None:
        return 2

    result = execute_sql(sql, schema)
    _print_query_result(result, args.format)
    return 0 if result.ok else 2


def cmd_describe(args: argparse.Namespace) -> int:
    """Print the queryable tables and the metadata table layout."""
    from schemadata.query import VIRTUAL_TABLE_SCHEMA, describe_data_tables

    try:
        schema = _load_schema_arg(getattr(args, "schema", None))
    except (FileNotFoundError, ValueError) as e:
        logging.error("%s", e)
        return 2

    if args.data:
        report = _load_data(args, schema)
        print(describe_data_tables(report.tables, schema))
        print()
    print(VIRTUAL_TABLE_SCHEMA)
    return 0


def _add_data_args(p: argparse.ArgumentParser, schema_required: bool = False) -> None:
    p.add_argument(
        "--data",
        nargs="+",
        required=True,
        help="Workbook files or directories to scan for .xlsx files",
    )
    p.add_argument(
        "--schema",
        required=schema_required,
        default=None,
        help="Serialized schema file (JSON or YAML)",
    )
    p.add_argument("--progress", action="store_true", help="Show a progress bar while loading")


def _add_sql_args(p: argparse.ArgumentParser) -> None:
    group = p.add_mutually_exclusive_group(required=True)
    group.add_argument("--sql", help="SQL text; several statements may be separated by ';'")
    group.add_argument("--sql-file", help="Read SQL text from a file")
    p.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default="table",
        help="Output format (default: table)",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="schemadata",
        description=f"Schema data tools (v{_PACKAGE_VERSION})",
    )
    p.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    p.add_argument(
        "--warnings-only",
        action="store_true",
        help="Show only warnings and errors (overrides --verbose)",
    )
    p.add_argument(
        "--errors-only",
        action="store_true",
        help="Show only errors (overrides --warnings-only and --verbose)",
    )

    sub = p.add_subparsers(dest="command", required=True)

    p_load = sub.add_parser("load", help="Extract data tables from workbooks")
    _add_data_args(p_load)
    p_load.set_defaults(func=cmd_load)

    p_validate = sub.add_parser("validate", help="Validate workbook data against a schema")
    _add_data_args(p_validate, schema_required=True)
    p_validate.add_argument(
        "--report",
        nargs="?",
        const=True,
        default=False,
        help="Generate detailed Markdown report. Optionally specify custom directory path.",
    )
    p_validate.add_argument(
        "--report-json",
        nargs="?",
        const=True,
        default=False,
        help="Generate detailed JSON report. Optionally specify custom directory path.",
    )
    p_validate.add_argument(
        "--strict", action="store_true", help="Treat warnings as errors for the exit code"
    )
    p_validate.set_defaults(func=cmd_validate)

    p_query = sub.add_parser("query", help="Run SQL against workbook data")
    _add_data_args(p_query)
    _add_sql_args(p_query)
    p_query.set_defaults(func=cmd_query)

    p_meta = sub.add_parser("meta-query", help="Run SQL against schema metadata tables")
    p_meta.add_argument("--schema", required=True, help="Serialized schema file (JSON or YAML)")
    _add_sql_args(p_meta)
    p_meta.set_defaults(func=cmd_meta_query)

    p_describe = sub.add_parser("describe", help="Describe queryable tables")
    p_describe.add_argument(
        "--data", nargs="*", default=[], help="Workbook files or directories to describe"
    )
    p_describe.add_argument("--schema", default=None, help="Serialized schema file")
    p_describe.set_defaults(func=cmd_describe)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        verbose=bool(args.verbose),
        warnings_only=bool(getattr(args, "warnings_only", False)),
        errors_only=bool(getattr(args, "errors_only", False)),
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
