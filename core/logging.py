# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# STATUS: Core - Logging with run context
# PURPOSE: Tag every record with the command, database and script in progress
# CREATED: 18 OCT 2026
# ============================================================================
"""
Structured Logging

Records carry the component that emitted them plus whatever run context
is active (command, database, script). The CLI opens the command scope,
the service adds the database and the script being run, so a line logged
deep inside the executor still says which file it belongs to.

Two output formats:
    human   2026-10-18 09:00:00 INFO     services.schema_service [cmd=update-db, script=02.sql]: ...
    json    one object per line with timestamp, level, logger, component,
            message, context, data and exception

Usage:
    from core.logging import ComponentType, get_logger, log_context

    logger = get_logger(__name__, ComponentType.SERVICE)

    with log_context(command="update-db", script="02_tables.sql"):
        logger.info("Executing script", extra={"statements": 5})
"""

import json
import logging
import os
import sys
import threading
from contextlib import contextmanager
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Union


class ComponentType(str, Enum):
    """Which layer emitted a record."""
    CLI = "cli"
    SERVICE = "service"
    EXECUTOR = "executor"


@dataclass(frozen=True)
class LogContext:
    """Run context attached to every record while a log_context scope is open."""
    command: Optional[str] = None
    database: Optional[str] = None
    script: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        return {key: value for key, value in asdict(self).items() if value is not None}


_local = threading.local()


def _stack() -> List[LogContext]:
    if not hasattr(_local, "stack"):
        _local.stack = []
    return _local.stack


def get_current_context() -> LogContext:
    stack = _stack()
    return stack[-1] if stack else LogContext()


@contextmanager
def log_context(**fields: str) -> Iterator[LogContext]:
    """
    Open a context scope. Fields not given are inherited from the
    enclosing scope.

    Example:
        with log_context(command="build-db"):
            with log_context(script="01_domains.sql"):
                logger.info("Executing script")   # cmd and script both set
    """
    context = replace(get_current_context(), **fields)
    stack = _stack()
    stack.append(context)
    try:
        yield context
    finally:
        stack.pop()


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": _timestamp(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        component = getattr(record, "component", None)
        if component:
            log_data["component"] = component

        context = get_current_context().to_dict()
        if context:
            log_data["context"] = context

        data = getattr(record, "data", None)
        if data:
            log_data["data"] = data

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """Console format with the run context inline."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname.ljust(8)

        context = get_current_context()
        parts = []
        if context.command:
            parts.append(f"cmd={context.command}")
        if context.database:
            parts.append(f"db={context.database}")
        if context.script:
            parts.append(f"script={context.script}")
        context_str = f" [{', '.join(parts)}]" if parts else ""

        result = f"{timestamp} {level} {record.name}{context_str}: {record.getMessage()}"
        if record.exc_info:
            result += f"\n{self.formatException(record.exc_info)}"
        return result


class ContextLogger(logging.LoggerAdapter):
    """
    Adapter that stamps the component on each record and moves caller
    extras under a single "data" attribute.
    """

    def process(self, msg, kwargs):
        kwargs["extra"] = {
            "component": self.extra.get("component"),
            "data": dict(kwargs.get("extra") or {}),
        }
        return msg, kwargs


def get_logger(name: str, component: Optional[ComponentType] = None) -> ContextLogger:
    return ContextLogger(
        logging.getLogger(name),
        {"component": component.value if component else None},
    )


def configure_logging(
    level: Union[str, int] = "INFO",
    json_output: Optional[bool] = None,
) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_output: Use JSON format; None reads LOG_FORMAT
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if json_output is None:
        json_output = os.getenv("LOG_FORMAT", "").lower() == "json"

    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if json_output else HumanFormatter())
    root.addHandler(handler)


# ============================================================================
# CHECKPOINT LOGGING
# ============================================================================

def log_checkpoint(name: str, data: Optional[Dict[str, Any]] = None) -> None:
    """
    Log a named checkpoint (script_executed, script_failed, export_written)
    at DEBUG on the "checkpoint" logger.
    """
    payload: Dict[str, Any] = {"checkpoint": name, **get_current_context().to_dict()}
    if data:
        payload["data"] = data
    logging.getLogger("checkpoint").debug(f"CHECKPOINT: {name}", extra={"data": payload})


__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
