# ============================================================================
# SCHEMA SERVICE TESTS
# ============================================================================
# STATUS: Tests - build-db / update-db / export-scripts orchestration
# PURPOSE: Verify file ordering, per-file isolation, setup checks and export
# CREATED: 18 OCT 2026
# ============================================================================
"""
Schema Service Tests

Uses an in-memory fake repository (session() / create() context managers)
so no Firebird server is required.

Covers:
1. Script discovery order (01_, 02_, 10_, case-insensitive)
2. Empty files skipped, failing files rolled back, later files still run
3. Setup errors before any database work
4. Export writes the three files only after a complete catalog read
5. RunReport serialization
6. Terminator reset between files, comment marker from settings

Run with:
    pytest tests/test_schema_service.py -v
"""

from contextlib import contextmanager
from pathlib import Path
from typing import List
from unittest.mock import patch

import pytest

from core.config import Defaults, ScriptDefaults
from core.contracts import ScriptStatus
from core.errors import (
    CatalogReadError,
    ConnectionSettingsError,
    DatabaseAlreadyExistsError,
    ScriptsDirectoryNotFoundError,
)
from core.models import CatalogSnapshot, Domain, Table, Column
from services.schema_service import RunReport, SchemaService, list_script_files


CONNECTION_STRING = "User ID=SYSDBA;Password=masterkey;Database=/data/test.fdb;DataSource=localhost;Port=3050"


# ============================================================================
# FAKES
# ============================================================================

class FakeTransaction:

    def __init__(self, session: "FakeSession"):
        self.session = session
        self.pending: List[str] = []

    def execute(self, text: str) -> None:
        if "BROKEN" in text:
            raise RuntimeError("Token unknown - BROKEN")
        self.pending.append(text)

    def commit(self) -> None:
        self.session.committed.extend(self.pending)

    def rollback(self) -> None:
        self.session.rollbacks += 1
        self.pending = []

    def close(self) -> None:
        pass


class FakeSession:

    def __init__(self):
        self.committed: List[str] = []
        self.rollbacks = 0
        self.transactions = 0
        self.closed = False

    def begin_transaction(self) -> FakeTransaction:
        self.transactions += 1
        return FakeTransaction(self)


class FakeRepository:
    """Stands in for FirebirdRepository; records how it was used."""

    instances: List["FakeRepository"] = []

    def __init__(self, settings):
        self.settings = settings
        self.session_obj = FakeSession()
        self.created = False
        FakeRepository.instances.append(self)

    @contextmanager
    def session(self):
        try:
            yield self.session_obj
        finally:
            self.session_obj.closed = True

    @contextmanager
    def create(self):
        self.created = True
        try:
            yield self.session_obj
        finally:
            self.session_obj.closed = True


@pytest.fixture(autouse=True)
def reset_fake_repository():
    FakeRepository.instances = []
    yield
    FakeRepository.instances = []


@pytest.fixture
def service():
    return SchemaService(defaults=Defaults(), repository_factory=FakeRepository)


def _write(directory: Path, name: str, content: str) -> Path:
    path = directory / name
    path.write_text(content, encoding="utf-8")
    return path


# ============================================================================
# DISCOVERY
# ============================================================================

class TestListScriptFiles:

    def test_name_order(self, tmp_path):
        for name in ["10_data.sql", "02_tables.sql", "01_domains.sql"]:
            _write(tmp_path, name, "")
        assert [p.name for p in list_script_files(tmp_path)] == [
            "01_domains.sql", "02_tables.sql", "10_data.sql",
        ]

    def test_case_insensitive_order_and_pattern(self, tmp_path):
        for name in ["b.sql", "A.SQL", "c.txt"]:
            _write(tmp_path, name, "")
        assert [p.name for p in list_script_files(tmp_path)] == ["A.SQL", "b.sql"]

    def test_subdirectories_ignored(self, tmp_path):
        (tmp_path / "nested.sql").mkdir()
        _write(tmp_path, "01.sql", "")
        assert [p.name for p in list_script_files(tmp_path)] == ["01.sql"]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ScriptsDirectoryNotFoundError):
            list_script_files(tmp_path / "missing")


# ============================================================================
# UPDATE-DB
# ============================================================================

class TestUpdateDatabase:

    def test_files_run_in_order(self, service, tmp_path):
        _write(tmp_path, "02_b.sql", "CREATE TABLE B (ID INTEGER);")
        _write(tmp_path, "01_a.sql", "CREATE TABLE A (ID INTEGER);")

        report = service.update_database(CONNECTION_STRING, tmp_path)

        session = FakeRepository.instances[0].session_obj
        assert session.committed == ["CREATE TABLE A (ID INTEGER)", "CREATE TABLE B (ID INTEGER)"]
        assert session.closed
        assert report.success
        assert [s.status for s in report.scripts] == [ScriptStatus.EXECUTED, ScriptStatus.EXECUTED]

    def test_failure_isolated_to_its_file(self, service, tmp_path):
        _write(tmp_path, "01_a.sql", "CREATE TABLE A (ID INTEGER);")
        _write(tmp_path, "02_bad.sql", "CREATE TABLE X (ID INTEGER);\nBROKEN STATEMENT;\n")
        _write(tmp_path, "03_c.sql", "CREATE TABLE C (ID INTEGER);")

        report = service.update_database(CONNECTION_STRING, tmp_path)

        session = FakeRepository.instances[0].session_obj
        assert session.committed == ["CREATE TABLE A (ID INTEGER)", "CREATE TABLE C (ID INTEGER)"]
        assert session.rollbacks == 1
        assert not report.success

        bad = report.scripts[1]
        assert bad.name == "02_bad.sql"
        assert bad.status == ScriptStatus.FAILED
        assert bad.failed_line == 2
        assert "BROKEN" in bad.error
        assert report.scripts[2].status == ScriptStatus.EXECUTED

    def test_empty_file_skipped(self, service, tmp_path):
        _write(tmp_path, "01_empty.sql", "  \n\n")
        _write(tmp_path, "02_a.sql", "CREATE TABLE A (ID INTEGER);")

        report = service.update_database(CONNECTION_STRING, tmp_path)

        assert report.scripts[0].status == ScriptStatus.SKIPPED
        assert report.scripts[0].message == "Empty file"
        assert FakeRepository.instances[0].session_obj.transactions == 1
        assert report.success

    def test_invalid_utf8_fails_file(self, service, tmp_path):
        (tmp_path / "01_bin.sql").write_bytes(b"CREATE TABLE \xff\xfe (ID INTEGER);")
        _write(tmp_path, "02_a.sql", "CREATE TABLE A (ID INTEGER);")

        report = service.update_database(CONNECTION_STRING, tmp_path)

        assert report.scripts[0].status == ScriptStatus.FAILED
        assert report.scripts[1].status == ScriptStatus.EXECUTED

    def test_bom_is_ignored(self, service, tmp_path):
        (tmp_path / "01.sql").write_bytes(b"\xef\xbb\xbfCREATE TABLE A (ID INTEGER);")
        service.update_database(CONNECTION_STRING, tmp_path)
        assert FakeRepository.instances[0].session_obj.committed == ["CREATE TABLE A (ID INTEGER)"]

    def test_no_scripts_is_success(self, service, tmp_path):
        report = service.update_database(CONNECTION_STRING, tmp_path)
        assert report.success
        assert report.scripts == []

    def test_missing_scripts_dir_before_connect(self, service, tmp_path):
        with pytest.raises(ScriptsDirectoryNotFoundError):
            service.update_database(CONNECTION_STRING, tmp_path / "missing")
        assert FakeRepository.instances == []

    def test_bad_connection_string(self, service, tmp_path):
        with pytest.raises(ConnectionSettingsError):
            service.update_database("User ID=SYSDBA;Password=x", tmp_path)

    def test_settings_passed_to_repository(self, service, tmp_path):
        report = service.update_database(CONNECTION_STRING, tmp_path)
        settings = FakeRepository.instances[0].settings
        assert settings.dsn == "localhost/3050:/data/test.fdb"
        assert report.target == "localhost/3050:/data/test.fdb"

    def test_terminator_resets_for_each_file(self, service, tmp_path):
        # 01 switches to '^' and never switches back
        _write(
            tmp_path, "01_proc.sql",
            "SET TERM ^ ;\n"
            "CREATE OR ALTER PROCEDURE P AS\n"
            "BEGIN\n"
            "  EXIT;\n"
            "END\n"
            "^\n",
        )
        _write(
            tmp_path, "02_tables.sql",
            "CREATE TABLE A (ID INTEGER);\nCREATE TABLE B (ID INTEGER);\n",
        )

        report = service.update_database(CONNECTION_STRING, tmp_path)

        assert [s.status for s in report.scripts] == [ScriptStatus.EXECUTED, ScriptStatus.EXECUTED]
        assert [s.statements for s in report.scripts] == [1, 2]
        assert FakeRepository.instances[0].session_obj.committed == [
            "CREATE OR ALTER PROCEDURE P AS\nBEGIN\n  EXIT;\nEND",
            "CREATE TABLE A (ID INTEGER)",
            "CREATE TABLE B (ID INTEGER)",
        ]

    def test_comment_marker_from_settings(self, tmp_path):
        defaults = Defaults(scripts=ScriptDefaults(comment_marker="#"))
        service = SchemaService(defaults=defaults, repository_factory=FakeRepository)
        _write(tmp_path, "01.sql", "# header;\nCREATE TABLE A (ID INTEGER);\n")

        report = service.update_database(CONNECTION_STRING, tmp_path)

        assert report.scripts[0].statements == 1
        assert FakeRepository.instances[0].session_obj.committed == [
            "# header;\nCREATE TABLE A (ID INTEGER)"
        ]


# ============================================================================
# BUILD-DB
# ============================================================================

class TestBuildDatabase:

    def test_creates_then_runs_scripts(self, service, tmp_path):
        scripts = tmp_path / "scripts"
        scripts.mkdir()
        _write(scripts, "01.sql", "CREATE DOMAIN DM_AGE AS INTEGER;")
        db_dir = tmp_path / "db"

        report = service.build_database(db_dir, scripts)

        repo = FakeRepository.instances[0]
        assert repo.created
        assert db_dir.is_dir()
        assert repo.settings.database == str((db_dir / "database.fdb").resolve())
        assert repo.settings.host == "127.0.0.1"
        assert repo.session_obj.committed == ["CREATE DOMAIN DM_AGE AS INTEGER"]
        assert report.command == "build-db"
        assert report.success

    def test_existing_database_refused(self, service, tmp_path):
        scripts = tmp_path / "scripts"
        scripts.mkdir()
        (tmp_path / "database.fdb").write_bytes(b"")

        with pytest.raises(DatabaseAlreadyExistsError):
            service.build_database(tmp_path, scripts)
        assert FakeRepository.instances == []

    def test_missing_scripts_dir_checked_first(self, service, tmp_path):
        db_dir = tmp_path / "db"
        with pytest.raises(ScriptsDirectoryNotFoundError):
            service.build_database(db_dir, tmp_path / "missing")
        assert not db_dir.exists()
        assert FakeRepository.instances == []


# ============================================================================
# EXPORT-SCRIPTS
# ============================================================================

SNAPSHOT = CatalogSnapshot(
    domains=[Domain(name="DM_AGE", sql_type="INTEGER")],
    tables=[Table(name="T", columns=[Column(name="AGE", sql_type="DM_AGE")])],
)


class TestExportScripts:

    def test_writes_three_files(self, service, tmp_path):
        out = tmp_path / "out"
        with patch("services.schema_service.CatalogRepository") as repo_cls:
            repo_cls.return_value.read_snapshot.return_value = SNAPSHOT
            report = service.export_scripts(CONNECTION_STRING, out)

        assert sorted(p.name for p in out.iterdir()) == [
            "01_domains.sql", "02_tables.sql", "03_procedures.sql",
        ]
        assert (out / "01_domains.sql").read_text(encoding="utf-8") == "CREATE DOMAIN DM_AGE AS INTEGER;\n"
        assert len(report.written) == 3
        assert report.success
        assert FakeRepository.instances[0].session_obj.closed

    def test_catalog_error_writes_nothing(self, service, tmp_path):
        out = tmp_path / "out"
        with patch("services.schema_service.CatalogRepository") as repo_cls:
            repo_cls.return_value.read_snapshot.side_effect = CatalogReadError("table listing failed")
            with pytest.raises(CatalogReadError):
                service.export_scripts(CONNECTION_STRING, out)

        assert not out.exists()
        assert FakeRepository.instances[0].session_obj.closed

    def test_repository_gets_export_settings(self, tmp_path):
        defaults = Defaults()
        service = SchemaService(defaults=defaults, repository_factory=FakeRepository)
        with patch("services.schema_service.CatalogRepository") as repo_cls:
            repo_cls.return_value.read_snapshot.return_value = CatalogSnapshot()
            service.export_scripts(CONNECTION_STRING, tmp_path)
        repo_cls.assert_called_once_with(FakeRepository.instances[0].session_obj, defaults.export)


# ============================================================================
# REPORT
# ============================================================================

class TestRunReport:

    def test_to_dict_summary(self, service, tmp_path):
        _write(tmp_path, "01.sql", "CREATE TABLE A (ID INTEGER);")
        _write(tmp_path, "02.sql", "")
        _write(tmp_path, "03.sql", "BROKEN;")

        data = service.update_database(CONNECTION_STRING, tmp_path).to_dict()

        assert data["command"] == "update-db"
        assert data["success"] is False
        assert data["summary"] == {"total": 3, "executed": 1, "skipped": 1, "failed": 1}
        assert data["scripts"][2]["status"] == "failed"
        assert data["scripts"][2]["failed_line"] == 1

    def test_empty_report_is_success(self):
        report = RunReport(command="update-db", target="x", timestamp="now")
        assert report.success
        assert report.failed == []
