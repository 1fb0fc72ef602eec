# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Core enums and base contracts
# PURPOSE: Status enums and the type descriptor shared by catalog and writer
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: ScriptStatus, Command, DomainExportMode, TypeDescriptor
# DEPENDENCIES: enum, pydantic
# ============================================================================
"""
Base contracts for the schema script engine.

These define the small vocabulary that crosses boundaries:
- SQL (Firebird system catalog)
- Files (generated and consumed scripts)
- Python (internal processing and reporting)
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# ============================================================================
# STATUS ENUMS
# ============================================================================

class ScriptStatus(str, Enum):
    """
    Outcome of processing one script file.

    Transitions:
        (read) -> SKIPPED   (empty or whitespace-only file)
               -> EXECUTED  (every statement ran, transaction committed)
               -> FAILED    (a statement failed, transaction rolled back)
    """
    EXECUTED = "executed"
    SKIPPED = "skipped"
    FAILED = "failed"

    def is_failure(self) -> bool:
        return self is ScriptStatus.FAILED


class Command(str, Enum):
    """CLI sub-commands."""
    BUILD_DB = "build-db"
    EXPORT_SCRIPTS = "export-scripts"
    UPDATE_DB = "update-db"


class DomainExportMode(str, Enum):
    """
    How user domains are rendered into 01_domains.sql.

    GENERIC: CREATE DOMAIN <name> AS <mapped type> for every user domain.
    LEGACY:  only the DM_NAME / DM_AGE pair, with fixed definitions.
    """
    GENERIC = "generic"
    LEGACY = "legacy"


# ============================================================================
# BASE DATA CONTRACTS
# ============================================================================

class TypeDescriptor(BaseModel):
    """
    Engine-internal storage type of a column, parameter or domain.

    Straight projection of RDB$FIELDS; None means the catalog held NULL.
    """
    field_type: int = Field(..., description="RDB$FIELD_TYPE")
    sub_type: Optional[int] = Field(default=None, description="RDB$FIELD_SUB_TYPE")
    scale: Optional[int] = Field(default=None, description="RDB$FIELD_SCALE")
    length: Optional[int] = Field(default=None, description="RDB$FIELD_LENGTH (bytes)")
    precision: Optional[int] = Field(default=None, description="RDB$FIELD_PRECISION")

    model_config = {"frozen": True}


__all__ = [
    "ScriptStatus",
    "Command",
    "DomainExportMode",
    "TypeDescriptor",
]
