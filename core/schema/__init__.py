# ============================================================================
# SCHEMA MODULE
# ============================================================================
# STATUS: Core - Script parsing, type mapping and DDL rendering
# PURPOSE: The pure (database-free) half of the schema script engine
# LAST_REVIEWED: 18 OCT 2026
# ============================================================================

from core.schema.type_mapper import (
    FieldType,
    firebird_type_to_sql,
    descriptor_to_sql,
    varchar_character_length,
    character_corrected_sql,
)
from core.schema.script_parser import (
    ParserState,
    Statement,
    process_line,
    iter_statements,
    split_script,
)
from core.schema.ddl_writer import (
    ScriptWriter,
    render_domains,
    render_tables,
    render_procedures,
)

__all__ = [
    # Type mapping
    "FieldType",
    "firebird_type_to_sql",
    "descriptor_to_sql",
    "varchar_character_length",
    "character_corrected_sql",
    # Parser
    "ParserState",
    "Statement",
    "process_line",
    "iter_statements",
    "split_script",
    # Writer
    "ScriptWriter",
    "render_domains",
    "render_tables",
    "render_procedures",
]
