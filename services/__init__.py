# ============================================================================
# SERVICES MODULE
# ============================================================================
# STATUS: Core - Business logic layer
# PURPOSE: Script execution and schema command orchestration
# CREATED: 18 OCT 2026
# ============================================================================
"""
Services Module

Services coordinate between the session, the catalog repository and the
script files on disk.

Usage:
    from services import SchemaService

    report = SchemaService().update_database(conn_str, Path("scripts"))
"""

from .script_executor import ScriptExecutor, ExecutionSummary
from .schema_service import SchemaService, ScriptResult, RunReport, list_script_files

__all__ = [
    "ScriptExecutor",
    "ExecutionSummary",
    "SchemaService",
    "ScriptResult",
    "RunReport",
    "list_script_files",
]
