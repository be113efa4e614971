"""flatstore CLI entry points.
This module exposes table query and mutation commands.
It maps argparse commands onto FlatTable SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import StoreConfig
from core.constants import FIELD_SEPARATOR, VERSION
from core.errors import FlatStoreConfigError
from core.types import OperationResult, Record
from store.table_sdk import FlatTable


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="flatstore", description="Flat-file table CLI")
    parser.add_argument("--version", action="version", version=f"flatstore {VERSION}")
    parser.add_argument("--table", help="Override FLATSTORE_PATH for this command")
    parser.add_argument(
        "--legacy-encoding",
        action="store_true",
        help="Read and write the table as ISO-8859-1 instead of UTF-8",
    )
    parser.add_argument("--id-column", help="Override FLATSTORE_ID_COLUMN for this command")
    parser.add_argument(
        "--header-offset",
        type=int,
        help="Override FLATSTORE_HEADER_OFFSET for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_select_command(subparsers)
    _add_search_command(subparsers)
    _add_get_command(subparsers)
    _add_insert_command(subparsers)
    _add_update_command(subparsers)
    _add_delete_command(subparsers)
    _add_next_id_command(subparsers)
    _add_info_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the flatstore CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        table = _open_table(args)
    except FlatStoreConfigError as error:
        print(f"error={error}")
        return 2
    if args.command == "info":
        return _run_info_command(table)
    if table.is_error:
        print(f"error={table.error_message}")
        return 1
    if args.command == "select":
        return _print_rows(table, table.select_all())
    if args.command == "search":
        return _run_search_command(table, args)
    if args.command == "get":
        return _run_get_command(table, args)
    if args.command == "insert":
        return _run_insert_command(table, args, parser)
    if args.command == "update":
        return _run_update_command(table, args, parser)
    if args.command == "delete":
        return _run_delete_command(table, args)
    if args.command == "next-id":
        print(table.next_id(args.column))
        return 0
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _open_table(args: argparse.Namespace) -> FlatTable:
    """Open the table from environment config and CLI overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Opened table.
    """
    config = StoreConfig.from_env()
    if args.table:
        config = replace(config, table_path=Path(args.table).expanduser())
    if args.legacy_encoding:
        config = replace(config, is_utf8=False)
    if args.id_column:
        config = replace(config, id_column=args.id_column)
    if args.header_offset is not None:
        if args.header_offset < 0:
            raise FlatStoreConfigError(
                f"Invalid --header-offset value: expected >= 0, got {args.header_offset}."
            )
        config = replace(config, header_offset=args.header_offset)
    return FlatTable.from_config(config)


def _run_info_command(table: FlatTable) -> int:
    """Handle info command.

    Args:
        table: Opened table.

    Returns:
        Exit code.
    """
    status = table.status()
    print(f"path={status.path}")
    print(f"is_file={status.is_file}")
    print(f"is_utf8={status.is_utf8}")
    print(f"row_count={status.row_count}")
    print(f"columns={FIELD_SEPARATOR.join(status.columns)}")
    print(f"error={status.error_message or '-'}")
    return 1 if status.is_error else 0


def _run_search_command(table: FlatTable, args: argparse.Namespace) -> int:
    """Handle search command.

    Args:
        table: Opened table.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    if args.like:
        rows = table.search_like(args.column, args.value)
    else:
        rows = table.search_exact(args.column, args.value)
    return _print_rows(table, rows)


def _run_get_command(table: FlatTable, args: argparse.Namespace) -> int:
    """Handle get command.

    Args:
        table: Opened table.
        args: Parsed CLI args.

    Returns:
        Exit code; 1 when no row matches.
    """
    row = table.find_by_key(args.key, args.column)
    if row is None:
        print(f"error=No row with {args.column or table.id_column}={args.key}")
        return 1
    return _print_rows(table, [row])


def _run_insert_command(
    table: FlatTable,
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
) -> int:
    """Handle insert command.

    Args:
        table: Opened table.
        args: Parsed CLI args.
        parser: Parser used to report malformed assignments.

    Returns:
        Exit code.
    """
    row: dict[str, object] = dict(_parse_assignments(args.set, parser))
    if args.auto_id:
        row[table.id_column] = table.next_id()
    result = table.insert(row)
    if args.auto_id and result:
        print(f"{table.id_column}={row[table.id_column]}")
    return _report(result, "inserted")


def _run_update_command(
    table: FlatTable,
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
) -> int:
    """Handle update command.

    Assignments are merged over the current row before it is replaced.

    Args:
        table: Opened table.
        args: Parsed CLI args.
        parser: Parser used to report malformed assignments.

    Returns:
        Exit code.
    """
    current = table.find_by_key(args.key, args.column) or {}
    merged: dict[str, object] = {**current, **_parse_assignments(args.set, parser)}
    return _report(table.update(args.key, merged, args.column), "updated")


def _run_delete_command(table: FlatTable, args: argparse.Namespace) -> int:
    """Handle delete command.

    Args:
        table: Opened table.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    result = table.delete(args.key, args.column, only_first=not args.all)
    return _report(result, "deleted")


def _print_rows(table: FlatTable, rows: list[Record]) -> int:
    """Print rows as separator-joined values in header order."""
    for row in rows:
        print(FIELD_SEPARATOR.join(row.get(column, "") for column in table.columns))
    return 0


def _report(result: OperationResult, label: str) -> int:
    """Print a mutation result and return its exit code."""
    if not result:
        print(f"error={result.error}")
        return 1
    print(f"{label}={result.affected}")
    return 0


def _parse_assignments(
    assignments: Sequence[str],
    parser: argparse.ArgumentParser,
) -> dict[str, str]:
    """Parse ``column=value`` arguments into a mapping."""
    values: dict[str, str] = {}
    for assignment in assignments:
        column, separator, value = assignment.partition("=")
        if not separator or not column.strip():
            parser.error(f"Invalid --set value '{assignment}': expected column=value")
        values[column.strip()] = value
    return values


def _add_select_command(subparsers: Any) -> None:
    """Register select subcommand."""
    subparsers.add_parser("select", help="Print every row")


def _add_search_command(subparsers: Any) -> None:
    """Register search subcommand."""
    parser = subparsers.add_parser("search", help="Print rows matching a column value")
    parser.add_argument("--column", required=True, help="Column to search")
    parser.add_argument("--value", required=True, help="Value to match")
    parser.add_argument(
        "--like",
        action="store_true",
        help="Match case-insensitive substrings instead of exact values",
    )


def _add_get_command(subparsers: Any) -> None:
    """Register get subcommand."""
    parser = subparsers.add_parser("get", help="Print the first row with a key value")
    parser.add_argument("key", help="Numeric key value")
    parser.add_argument("--column", help="Key column, defaults to the identifier column")


def _add_insert_command(subparsers: Any) -> None:
    """Register insert subcommand."""
    parser = subparsers.add_parser("insert", help="Append a row")
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="COLUMN=VALUE",
        help="Cell value; repeat for each column",
    )
    parser.add_argument(
        "--auto-id",
        action="store_true",
        help="Assign the next free identifier to the identifier column",
    )


def _add_update_command(subparsers: Any) -> None:
    """Register update subcommand."""
    parser = subparsers.add_parser("update", help="Change cells of the row with a key value")
    parser.add_argument("key", help="Numeric key value")
    parser.add_argument("--column", help="Key column, defaults to the identifier column")
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="COLUMN=VALUE",
        help="Cell value; repeat for each column",
    )


def _add_delete_command(subparsers: Any) -> None:
    """Register delete subcommand."""
    parser = subparsers.add_parser("delete", help="Delete rows with a key value")
    parser.add_argument("key", help="Numeric key value")
    parser.add_argument("--column", help="Key column, defaults to the identifier column")
    parser.add_argument("--all", action="store_true", help="Delete every matching row")


def _add_next_id_command(subparsers: Any) -> None:
    """Register next-id subcommand."""
    parser = subparsers.add_parser("next-id", help="Print the next free identifier")
    parser.add_argument("--column", help="Identifier column, defaults to the configured one")


def _add_info_command(subparsers: Any) -> None:
    """Register info subcommand."""
    subparsers.add_parser("info", help="Print table status")
