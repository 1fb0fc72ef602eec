# ============================================================================
# LOGGING TESTS
# ============================================================================
# STATUS: Tests - Run context and component in log output
# PURPOSE: Verify context scopes, formatters and checkpoints
# CREATED: 18 OCT 2026
# ============================================================================
"""
Logging Tests

Covers:
1. Nested log_context scopes inherit and restore fields
2. JSON records carry component, context and caller data
3. Human records show the context inline
4. Checkpoints carry their name, the context and their data
5. The CLI command scope reaches service log lines

Run with:
    pytest tests/test_logging.py -v
"""

import io
import json
import logging
from unittest.mock import MagicMock

import pytest

from core.logging import (
    ComponentType,
    HumanFormatter,
    LogContext,
    StructuredFormatter,
    get_current_context,
    get_logger,
    log_checkpoint,
    log_context,
)


@pytest.fixture
def capture():
    """Attach a formatter-backed buffer to a named logger; yields (attach, buffer)."""
    buffer = io.StringIO()
    attached = []

    def attach(name, formatter):
        target = logging.getLogger(name)
        handler = logging.StreamHandler(buffer)
        handler.setFormatter(formatter)
        attached.append((target, handler, target.level, target.propagate))
        target.addHandler(handler)
        target.setLevel(logging.DEBUG)
        target.propagate = False

    yield attach, buffer

    for target, handler, level, propagate in attached:
        target.removeHandler(handler)
        target.setLevel(level)
        target.propagate = propagate


def _records(buffer):
    return [json.loads(line) for line in buffer.getvalue().splitlines() if line]


# ============================================================================
# CONTEXT
# ============================================================================

class TestLogContext:

    def test_empty_outside_scope(self):
        assert get_current_context() == LogContext()
        assert LogContext().to_dict() == {}

    def test_nested_scopes_merge_and_restore(self):
        with log_context(command="update-db", database="localhost:/x.fdb"):
            with log_context(script="01_tables.sql") as inner:
                assert inner.to_dict() == {
                    "command": "update-db",
                    "database": "localhost:/x.fdb",
                    "script": "01_tables.sql",
                }
            assert get_current_context().script is None
            assert get_current_context().command == "update-db"
        assert get_current_context() == LogContext()

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError):
            with log_context(operation="x"):
                pass


# ============================================================================
# FORMATTERS
# ============================================================================

class TestStructuredFormatter:

    def test_component_context_and_data(self, capture):
        attach, buffer = capture
        attach("fbschema.test.json", StructuredFormatter())
        logger = get_logger("fbschema.test.json", ComponentType.EXECUTOR)

        with log_context(command="build-db", database="127.0.0.1/3050:/db/database.fdb"):
            with log_context(script="02_tables.sql"):
                logger.info("Executing script", extra={"statements": 5})

        [record] = _records(buffer)
        assert record["level"] == "INFO"
        assert record["logger"] == "fbschema.test.json"
        assert record["message"] == "Executing script"
        assert record["component"] == "executor"
        assert record["context"] == {
            "command": "build-db",
            "database": "127.0.0.1/3050:/db/database.fdb",
            "script": "02_tables.sql",
        }
        assert record["data"] == {"statements": 5}
        assert record["timestamp"].endswith("Z")

    def test_bare_record_has_no_optional_keys(self, capture):
        attach, buffer = capture
        attach("fbschema.test.bare", StructuredFormatter())
        get_logger("fbschema.test.bare").warning("plain")

        [record] = _records(buffer)
        assert set(record) == {"timestamp", "level", "logger", "message"}

    def test_exception_included(self, capture):
        attach, buffer = capture
        attach("fbschema.test.exc", StructuredFormatter())
        logger = get_logger("fbschema.test.exc", ComponentType.CLI)
        try:
            raise RuntimeError("connection refused")
        except RuntimeError:
            logger.exception("update-db failed")

        [record] = _records(buffer)
        assert "RuntimeError: connection refused" in record["exception"]


class TestHumanFormatter:

    def test_context_inline(self, capture):
        attach, buffer = capture
        attach("fbschema.test.human", HumanFormatter())
        logger = get_logger("fbschema.test.human", ComponentType.SERVICE)

        with log_context(command="update-db", database="db1", script="03_procs.sql"):
            logger.info("Executing script")

        line = buffer.getvalue().strip()
        assert line.endswith(
            "fbschema.test.human [cmd=update-db, db=db1, script=03_procs.sql]: Executing script"
        )
        assert " INFO " in line

    def test_no_brackets_without_context(self, capture):
        attach, buffer = capture
        attach("fbschema.test.human2", HumanFormatter())
        get_logger("fbschema.test.human2").info("hello")
        assert buffer.getvalue().strip().endswith("fbschema.test.human2: hello")


# ============================================================================
# CHECKPOINTS
# ============================================================================

class TestCheckpoint:

    def test_name_context_and_data(self, capture):
        attach, buffer = capture
        attach("checkpoint", StructuredFormatter())

        with log_context(command="update-db", script="01_tables.sql"):
            log_checkpoint("script_executed", {"statements": 3})

        [record] = _records(buffer)
        assert record["level"] == "DEBUG"
        assert record["message"] == "CHECKPOINT: script_executed"
        assert record["data"] == {
            "checkpoint": "script_executed",
            "command": "update-db",
            "script": "01_tables.sql",
            "data": {"statements": 3},
        }


# ============================================================================
# CLI INTEGRATION
# ============================================================================

class TestCommandScope:

    def test_cli_command_reaches_service_logs(self, capture):
        from main import build_parser, run
        from services.schema_service import RunReport

        attach, buffer = capture
        attach("fbschema.test.cli", StructuredFormatter())
        service_logger = get_logger("fbschema.test.cli", ComponentType.SERVICE)

        def update_database(connection_string, scripts_dir):
            service_logger.info("running")
            return RunReport(command="update-db", target="t", timestamp="2026-10-18T00:00:00+00:00")

        service = MagicMock()
        service.update_database.side_effect = update_database
        args = build_parser().parse_args([
            "update-db", "--connection-string", "cs", "--scripts-dir", "/s",
        ])

        assert run(args, service) == 0
        [record] = _records(buffer)
        assert record["context"] == {"command": "update-db"}
        assert record["component"] == "service"
        assert get_current_context() == LogContext()
