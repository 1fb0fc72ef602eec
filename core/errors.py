# ============================================================================
# ERROR TAXONOMY
# ============================================================================
# STATUS: Foundation - Exception hierarchy
# PURPOSE: Setup, execution and catalog errors raised by the schema tool
# CREATED: 18 OCT 2026
# ============================================================================
"""
Exceptions for the schema tool.

Setup errors abort before any database work. ScriptExecutionError is
per-file: the orchestrator records it and moves on to the next file.
CatalogReadError aborts an export before anything is written.
"""

from typing import Optional


class SchemaToolError(Exception):
    """Base exception for all schema tool errors."""
    pass


# ============================================================================
# SETUP ERRORS
# ============================================================================

class ScriptsDirectoryNotFoundError(SchemaToolError):
    """Raised when the scripts directory does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Scripts directory not found: {path}")


class DatabaseAlreadyExistsError(SchemaToolError):
    """Raised when build-db would overwrite an existing database file."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Database file already exists: {path} "
            f"(remove it or use another directory)"
        )


class ConnectionSettingsError(SchemaToolError):
    """Raised when a connection string cannot be turned into a DSN."""
    pass


class ConfigurationError(SchemaToolError):
    """Raised when an environment setting has an unusable value."""

    def __init__(self, variable: str, value: str, expected: str):
        self.variable = variable
        self.value = value
        super().__init__(f"Invalid {variable}={value!r}: expected {expected}")


# ============================================================================
# EXECUTION ERRORS
# ============================================================================

class ScriptExecutionError(SchemaToolError):
    """
    A statement in a script failed; the file's transaction was rolled back.

    Attributes:
        file_name: Script file name (None when running raw text)
        statement: Statement text sent to the engine
        start_line: First source line of the statement (1-based)
        end_line: Last source line of the statement (1-based)
    """

    def __init__(
        self,
        message: str,
        statement: str,
        start_line: int,
        end_line: int,
        file_name: Optional[str] = None,
    ):
        self.statement = statement
        self.start_line = start_line
        self.end_line = end_line
        self.file_name = file_name
        self.reason = message
        super().__init__(self._format())

    def _format(self) -> str:
        where = f"lines {self.start_line}-{self.end_line}"
        if self.start_line == self.end_line:
            where = f"line {self.start_line}"
        if self.file_name:
            where = f"{self.file_name}, {where}"
        return f"Statement failed ({where}): {self.reason}"


# ============================================================================
# CATALOG ERRORS
# ============================================================================

class RepositoryError(SchemaToolError):
    """Base exception for repository operations."""

    def __init__(self, message: str, operation: str = None, entity_id: str = None):
        self.operation = operation
        self.entity_id = entity_id
        super().__init__(message)


class CatalogReadError(RepositoryError):
    """Raised when a system catalog query fails."""
    pass


__all__ = [
    "SchemaToolError",
    "ScriptsDirectoryNotFoundError",
    "DatabaseAlreadyExistsError",
    "ConnectionSettingsError",
    "ConfigurationError",
    "ScriptExecutionError",
    "RepositoryError",
    "CatalogReadError",
]
