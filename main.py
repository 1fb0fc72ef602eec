#!/usr/bin/env python
# ============================================================================
# FBSCHEMA - COMMAND LINE ENTRY POINT
# ============================================================================
# STATUS: Core - CLI entry point
# PURPOSE: build-db, export-scripts and update-db sub-commands
# USAGE:
#   fbschema build-db --db-dir /data/fb5 --scripts-dir ./scripts
#   fbschema export-scripts --connection-string "..." --output-dir ./out
#   fbschema update-db --connection-string "..." --scripts-dir ./scripts
# ============================================================================
"""
fbschema command line.

Exit codes:
    0  success
    1  failure (setup error, catalog error, or any script file failed)
    2  usage error (argparse)
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from __version__ import __version__
from core.contracts import Command, ScriptStatus
from core.errors import SchemaToolError
from core.logging import ComponentType, configure_logging, get_logger, log_context
from services.schema_service import RunReport, SchemaService

logger = get_logger("fbschema.cli", ComponentType.CLI)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fbschema",
        description="Build, update and export Firebird schemas from SQL scripts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  fbschema build-db --db-dir C:\\db\\fb5 --scripts-dir C:\\scripts
  fbschema export-scripts --connection-string "User ID=SYSDBA;Password=masterkey;Database=C:\\db\\fb5\\database.fdb;DataSource=127.0.0.1;Port=3050" --output-dir C:\\out
  fbschema update-db --connection-string "127.0.0.1/3050:/data/db.fdb" --scripts-dir ./scripts

Environment Variables:
  FIREBIRD_HOST         Server for build-db (default: 127.0.0.1)
  FIREBIRD_PORT         Port for build-db (default: 3050)
  FIREBIRD_USER         Default user (default: SYSDBA)
  FIREBIRD_PASSWORD     Default password (default: masterkey)
  FIREBIRD_CHARSET      Connection charset (default: UTF8)
  EXPORT_DOMAIN_MODE    generic | legacy (default: generic)
  LOG_LEVEL             DEBUG, INFO, WARNING, ERROR (default: INFO)
  LOG_FORMAT            json for structured output
        """
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--log-format",
        choices=["human", "json"],
        default=None,
        help="Log output format (default: LOG_FORMAT or human)"
    )

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    build = sub.add_parser(Command.BUILD_DB.value, help="Create a new database and run scripts")
    build.add_argument("--db-dir", required=True, help="Directory for the new database file")
    build.add_argument("--scripts-dir", required=True, help="Directory of .sql scripts")

    export = sub.add_parser(Command.EXPORT_SCRIPTS.value, help="Generate scripts from a database")
    export.add_argument("--connection-string", required=True, help="Connection string or DSN")
    export.add_argument("--output-dir", required=True, help="Directory for generated scripts")

    update = sub.add_parser(Command.UPDATE_DB.value, help="Run scripts against an existing database")
    update.add_argument("--connection-string", required=True, help="Connection string or DSN")
    update.add_argument("--scripts-dir", required=True, help="Directory of .sql scripts")

    return parser


def print_report(report: RunReport) -> None:
    """Console summary, one line per script file."""
    for result in report.scripts:
        marker = {
            ScriptStatus.EXECUTED: "OK  ",
            ScriptStatus.SKIPPED: "SKIP",
            ScriptStatus.FAILED: "FAIL",
        }[result.status]
        print(f"[{marker}] {result.name}: {result.message}")
        if result.error:
            print(f"       {result.error}")

    for path in report.written:
        print(f"[OK  ] wrote {path}")

    summary = report.to_dict()["summary"]
    if report.scripts:
        print(
            f"{summary['executed']} executed, {summary['skipped']} skipped, "
            f"{summary['failed']} failed"
        )


def _dispatch(service: SchemaService, command: Command, args: argparse.Namespace) -> RunReport:
    if command == Command.BUILD_DB:
        return service.build_database(Path(args.db_dir), Path(args.scripts_dir))
    if command == Command.EXPORT_SCRIPTS:
        return service.export_scripts(args.connection_string, Path(args.output_dir))
    return service.update_database(args.connection_string, Path(args.scripts_dir))


def run(args: argparse.Namespace, service: Optional[SchemaService] = None) -> int:
    """Dispatch a parsed command. Returns the process exit code."""
    command = Command(args.command)

    with log_context(command=command.value):
        try:
            # Reads the environment; bad values surface as ConfigurationError
            service = service or SchemaService()
            report = _dispatch(service, command, args)
        except SchemaToolError as e:
            logger.error(str(e))
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except Exception as e:
            # Driver and OS errors: connection refused, bad credentials, ...
            logger.exception(f"{command.value} failed")
            print(f"Error: {e}", file=sys.stderr)
            return 1

    print_report(report)

    if not report.success:
        print(f"{command.value} finished with {len(report.failed)} failed file(s).", file=sys.stderr)
        return 1

    messages = {
        Command.BUILD_DB: "Database built successfully.",
        Command.EXPORT_SCRIPTS: "Scripts exported successfully.",
        Command.UPDATE_DB: "Database updated successfully.",
    }
    print(messages[command])
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging(
        level="DEBUG" if args.verbose else os.environ.get("LOG_LEVEL", "INFO"),
        json_output=(args.log_format == "json") if args.log_format else None,
    )

    return run(args)


if __name__ == "__main__":
    sys.exit(main())
