# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export core contracts, models, and schema utilities
# LAST_REVIEWED: 18 OCT 2026
# ============================================================================

from core.contracts import ScriptStatus, Command, DomainExportMode, TypeDescriptor
from core.models import (
    Domain,
    Column,
    Table,
    Parameter,
    Procedure,
    CatalogSnapshot,
)
from core.schema import firebird_type_to_sql, iter_statements, ScriptWriter

__all__ = [
    # Enums
    "ScriptStatus",
    "Command",
    "DomainExportMode",
    # Models
    "TypeDescriptor",
    "Domain",
    "Column",
    "Table",
    "Parameter",
    "Procedure",
    "CatalogSnapshot",
    # Schema
    "firebird_type_to_sql",
    "iter_statements",
    "ScriptWriter",
]
