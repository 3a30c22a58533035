from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .client import DatabaseClient
from .logging_config import configure_logging
from .settings import load_settings


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="sqlitehelper utilities")
    parser.add_argument("--config", type=Path, default=None, help="Path to a TOML settings file")
    parser.add_argument("--log-level", default="WARNING", help="Root log level (default: WARNING)")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write logs to this file")
    parser.add_argument("--log-queries", action="store_true", help="Log every statement sent to SQLite")
    parser.add_argument("--log-jsonl", action="store_true", help="Write log records as JSON lines")
    sub = parser.add_subparsers(dest="command", required=True)

    tables = sub.add_parser("tables", help="List user tables")
    tables.add_argument("database", help="Path to the SQLite file")

    describe = sub.add_parser("describe", help="Describe the columns of a table")
    describe.add_argument("database", help="Path to the SQLite file")
    describe.add_argument("table", help="Table name")

    query = sub.add_parser("query", help="Run a SQL statement (or a ;-separated batch)")
    query.add_argument("database", help="Path to the SQLite file")
    query.add_argument("sql", help="Statement text")
    query.add_argument("--json", action="store_true", help="Print rows as JSON records")

    backup = sub.add_parser("backup", help="Copy the database to another file")
    backup.add_argument("database", help="Path to the SQLite file")
    backup.add_argument("destination", type=Path, help="Backup file path")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    level = args.log_level
    if args.log_queries and level.upper() == "WARNING":
        level = "DEBUG"
    configure_logging(level=level, log_file=args.log_file, jsonl=args.log_jsonl)
    settings = load_settings(
        config_path=args.config,
        overrides={"filename": args.database, "log_queries": args.log_queries or None},
    )

    with DatabaseClient(settings=settings) as client:
        if args.command == "tables":
            for name in client.list_tables():
                print(name)
            return 0
        if args.command == "describe":
            columns = client.describe_table(args.table)
            if not columns:
                print(f"Table not found: {args.table}", file=sys.stderr)
                return 1
            for col in columns:
                print(col)
            return 0
        if args.command == "query":
            result = client.query(args.sql)
            if args.json:
                print(json.dumps(json.loads(result.to_json(orient="records")), indent=2, ensure_ascii=False))
            elif result.empty:
                print("No rows returned")
            else:
                print(result.to_string(index=False))
            return 0
        if args.command == "backup":
            client.backup(str(args.destination))
            print(f"Backed up to {args.destination}")
            return 0
    raise SystemExit(f"Unknown command: {args.command}")


if __name__ == "__main__":
    sys.exit(main())
