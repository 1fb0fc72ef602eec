# ============================================================================
# SCHEMA SERVICE - BUILD / UPDATE / EXPORT ORCHESTRATION
# ============================================================================
# STATUS: Services - Orchestrator for the three schema commands
# PURPOSE: Sequence script files against a database, or catalog -> files
# CREATED: 18 OCT 2026
# ============================================================================
"""
SchemaService - Orchestrates the schema script engine.

Three operations:
1. build_database: create a new database file, then run a scripts directory
2. update_database: run a scripts directory against an existing database
3. export_scripts: read the catalog and write 01_domains.sql,
   02_tables.sql and 03_procedures.sql

Script files run strictly in case-insensitive name order, one transaction
per file. A failing file is rolled back and reported; the run continues
with the next file. The session is closed on every exit path.

Usage:
    service = SchemaService()
    report = service.update_database(connection_string, Path("scripts"))
    if not report.success:
        ...
"""

import fnmatch
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from core.config import Defaults, get_defaults
from core.contracts import Command, ScriptStatus
from core.errors import (
    DatabaseAlreadyExistsError,
    ScriptExecutionError,
    ScriptsDirectoryNotFoundError,
)
from core.logging import ComponentType, get_logger, log_checkpoint, log_context
from core.schema.ddl_writer import ScriptWriter
from infrastructure.firebird import FirebirdRepository, FirebirdSettings
from repositories.catalog_repo import CatalogRepository
from services.script_executor import ScriptExecutor

logger = get_logger(__name__, ComponentType.SERVICE)


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass
class ScriptResult:
    """Result of processing one script file."""
    name: str
    status: ScriptStatus
    statements: int = 0
    message: str = ""
    error: Optional[str] = None
    failed_line: Optional[int] = None


@dataclass
class RunReport:
    """Complete result of one command invocation."""
    command: str
    target: str
    timestamp: str
    scripts: List[ScriptResult] = field(default_factory=list)
    written: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not any(s.status.is_failure() for s in self.scripts)

    @property
    def failed(self) -> List[ScriptResult]:
        return [s for s in self.scripts if s.status.is_failure()]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "command": self.command,
            "target": self.target,
            "timestamp": self.timestamp,
            "success": self.success,
            "scripts": [
                {
                    "name": s.name,
                    "status": s.status.value,
                    "statements": s.statements,
                    "message": s.message,
                    "error": s.error,
                    "failed_line": s.failed_line,
                }
                for s in self.scripts
            ],
            "written": self.written,
            "summary": {
                "total": len(self.scripts),
                "executed": len([s for s in self.scripts if s.status == ScriptStatus.EXECUTED]),
                "skipped": len([s for s in self.scripts if s.status == ScriptStatus.SKIPPED]),
                "failed": len(self.failed),
            },
        }


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ============================================================================
# SCRIPT DISCOVERY
# ============================================================================

def list_script_files(scripts_dir: Path, pattern: str = "*.sql") -> List[Path]:
    """
    List script files in case-insensitive name order.

    Numeric prefixes (01_, 02_, 10_) therefore encode execution order.

    Raises:
        ScriptsDirectoryNotFoundError: scripts_dir is missing
    """
    scripts_dir = Path(scripts_dir)
    if not scripts_dir.is_dir():
        raise ScriptsDirectoryNotFoundError(str(scripts_dir))

    files = [
        p for p in scripts_dir.iterdir()
        if p.is_file() and fnmatch.fnmatch(p.name.lower(), pattern.lower())
    ]
    return sorted(files, key=lambda p: (p.name.upper(), p.name))


# ============================================================================
# SCHEMA SERVICE
# ============================================================================

class SchemaService:
    """
    Runs build-db, update-db and export-scripts.

    The repository factory is injectable so tests can supply fake sessions.
    """

    def __init__(
        self,
        defaults: Optional[Defaults] = None,
        repository_factory: Callable[[FirebirdSettings], FirebirdRepository] = FirebirdRepository,
    ):
        self.defaults = defaults or get_defaults()
        self.repository_factory = repository_factory
        self.executor = ScriptExecutor(
            self.defaults.scripts.default_terminator,
            self.defaults.scripts.comment_marker,
        )
        self.writer = ScriptWriter(self.defaults.scripts)

    # ========================================================================
    # SCRIPT EXECUTION
    # ========================================================================

    def execute_sql_files(self, session, scripts_dir: Path, report: RunReport) -> RunReport:
        """
        Execute every script in scripts_dir, one transaction per file.

        Failures are recorded in the report; later files still run.
        """
        files = list_script_files(scripts_dir, self.defaults.scripts.file_pattern)

        if not files:
            logger.warning(f"No script files in {scripts_dir}")
            return report

        logger.info(f"Executing {len(files)} script file(s) from {scripts_dir}")
        for path in files:
            report.scripts.append(self._execute_file(session, path))

        return report

    def _execute_file(self, session, path: Path) -> ScriptResult:
        with log_context(script=path.name):
            try:
                # utf-8-sig tolerates a BOM written by Windows editors
                raw = path.read_text(encoding="utf-8-sig")
            except UnicodeDecodeError as e:
                logger.error(f"Error in file {path}: not valid UTF-8 ({e})")
                return ScriptResult(
                    name=path.name,
                    status=ScriptStatus.FAILED,
                    message="Not valid UTF-8",
                    error=str(e),
                )

            if not raw.strip():
                logger.info(f"Skipped empty file: {path.name}")
                return ScriptResult(
                    name=path.name,
                    status=ScriptStatus.SKIPPED,
                    message="Empty file",
                )

            try:
                summary = self.executor.run_script(session, raw, name=path.name)
            except ScriptExecutionError as e:
                logger.error(f"Error in file {path}: {e.reason}")
                log_checkpoint("script_failed", {"line": e.start_line})
                return ScriptResult(
                    name=path.name,
                    status=ScriptStatus.FAILED,
                    message=f"Rolled back at line {e.start_line}",
                    error=str(e),
                    failed_line=e.start_line,
                )

            logger.info(f"Executed: {path.name} ({summary.executed} statements)")
            log_checkpoint("script_executed", {"statements": summary.executed})
            return ScriptResult(
                name=path.name,
                status=ScriptStatus.EXECUTED,
                statements=summary.executed,
                message=f"{summary.executed} statements committed",
            )

    # ========================================================================
    # COMMANDS
    # ========================================================================

    def build_database(self, database_dir: Path, scripts_dir: Path) -> RunReport:
        """
        Create a new database in database_dir and run scripts_dir against it.

        Raises:
            ScriptsDirectoryNotFoundError: scripts_dir is missing
            DatabaseAlreadyExistsError: the database file already exists
        """
        database_dir = Path(database_dir)
        scripts_dir = Path(scripts_dir)
        db_path = database_dir / self.defaults.firebird.database_filename

        # Setup checks happen before any database work
        list_script_files(scripts_dir, self.defaults.scripts.file_pattern)
        if db_path.exists():
            raise DatabaseAlreadyExistsError(str(db_path))

        database_dir.mkdir(parents=True, exist_ok=True)
        settings = FirebirdSettings.for_new_database(db_path.resolve(), self.defaults.firebird)
        report = RunReport(command=Command.BUILD_DB.value, target=settings.display_name, timestamp=_now())

        with log_context(command=Command.BUILD_DB.value, database=settings.display_name):
            with self.repository_factory(settings).create() as session:
                self.execute_sql_files(session, scripts_dir, report)

        return report

    def update_database(self, connection_string: str, scripts_dir: Path) -> RunReport:
        """
        Run scripts_dir against an existing database.

        Raises:
            ConnectionSettingsError: connection string is unusable
            ScriptsDirectoryNotFoundError: scripts_dir is missing
        """
        settings = FirebirdSettings.from_connection_string(connection_string, self.defaults.firebird)
        list_script_files(scripts_dir, self.defaults.scripts.file_pattern)
        report = RunReport(command=Command.UPDATE_DB.value, target=settings.display_name, timestamp=_now())

        with log_context(command=Command.UPDATE_DB.value, database=settings.display_name):
            with self.repository_factory(settings).session() as session:
                self.execute_sql_files(session, Path(scripts_dir), report)

        return report

    def export_scripts(self, connection_string: str, output_dir: Path) -> RunReport:
        """
        Read the catalog and write the three script files to output_dir.

        The snapshot is read completely before anything is written.

        Raises:
            ConnectionSettingsError: connection string is unusable
            CatalogReadError: a catalog query failed (nothing written)
        """
        settings = FirebirdSettings.from_connection_string(connection_string, self.defaults.firebird)
        report = RunReport(command=Command.EXPORT_SCRIPTS.value, target=settings.display_name, timestamp=_now())

        with log_context(command=Command.EXPORT_SCRIPTS.value, database=settings.display_name):
            with self.repository_factory(settings).session() as session:
                snapshot = CatalogRepository(session, self.defaults.export).read_snapshot()

            logger.info(
                f"Catalog read: {len(snapshot.domains)} domains, "
                f"{len(snapshot.tables)} tables, {len(snapshot.procedures)} procedures"
            )
            paths = self.writer.write_all(snapshot, Path(output_dir))
            report.written = [str(p) for p in paths]
            log_checkpoint("export_written", {"files": report.written})

        return report


__all__ = [
    "SchemaService",
    "ScriptResult",
    "RunReport",
    "list_script_files",
]
