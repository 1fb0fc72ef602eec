# ============================================================================
# FIREBIRD TYPE MAPPER
# ============================================================================
# STATUS: Core - Catalog type descriptor to SQL type text
# PURPOSE: Render RDB$FIELDS type codes as CREATE-statement types
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: FieldType, firebird_type_to_sql, descriptor_to_sql, varchar_character_length
# DEPENDENCIES: none
# ============================================================================
"""
Firebird Type Mapper.

Maps the engine's (field_type, sub_type, scale, length, precision) tuple
to SQL type text. The function is total: an unknown field_type renders as
an annotated BLOB so that an export never aborts on an exotic column.

Only None is replaced by a default. A zero read from the catalog is kept.

Usage:
    from core.schema.type_mapper import firebird_type_to_sql

    firebird_type_to_sql(8, None, -2, 4, 9)     # 'NUMERIC(9,2)'
    firebird_type_to_sql(37, 0, 0, 200, None)   # 'VARCHAR(200)'
"""

from enum import IntEnum
from typing import Optional

from core.contracts import TypeDescriptor


# ============================================================================
# TYPE CODES
# ============================================================================

class FieldType(IntEnum):
    """RDB$FIELD_TYPE codes."""
    SHORT = 7
    LONG = 8
    QUAD = 9
    FLOAT = 10
    DATE = 12
    TIME = 13
    TEXT = 14
    INT64 = 16
    BOOLEAN = 23
    DOUBLE = 27
    TIMESTAMP = 35
    VARYING = 37
    CSTRING = 40
    BLOB = 261


BLOB_SUB_TYPE_TEXT = 1

# Default precision for scaled integers with no RDB$FIELD_PRECISION
NUMERIC_PRECISION_DEFAULTS = {
    FieldType.SHORT: 9,
    FieldType.LONG: 9,
    FieldType.INT64: 18,
}

# Integer types when scale >= 0
INTEGER_TYPES = {
    FieldType.SHORT: "SMALLINT",
    FieldType.LONG: "INTEGER",
    FieldType.INT64: "BIGINT",
}

# Types with no modifiers
SIMPLE_TYPES = {
    FieldType.FLOAT: "FLOAT",
    FieldType.DOUBLE: "DOUBLE PRECISION",
    FieldType.DATE: "DATE",
    FieldType.TIME: "TIME",
    FieldType.TIMESTAMP: "TIMESTAMP",
    FieldType.BOOLEAN: "BOOLEAN",
}

# Character types rendered with a length
CHARACTER_TYPES = {
    FieldType.TEXT: "CHAR",
    FieldType.VARYING: "VARCHAR",
}


def firebird_type_to_sql(
    field_type: int,
    sub_type: Optional[int] = None,
    scale: Optional[int] = None,
    length: Optional[int] = None,
    precision: Optional[int] = None,
) -> str:
    """
    Map a Firebird type descriptor to SQL type text.

    Args:
        field_type: RDB$FIELD_TYPE
        sub_type: RDB$FIELD_SUB_TYPE (BLOB text vs binary)
        scale: RDB$FIELD_SCALE, negative for NUMERIC/DECIMAL; None means 0
        length: RDB$FIELD_LENGTH in bytes; None means 1
        precision: RDB$FIELD_PRECISION; None means 9 (18 for INT64)

    Returns:
        SQL type string, never raises
    """
    sc = scale if scale is not None else 0

    if field_type in INTEGER_TYPES:
        if sc < 0:
            digits = precision if precision is not None else NUMERIC_PRECISION_DEFAULTS[field_type]
            return f"NUMERIC({digits},{-sc})"
        return INTEGER_TYPES[field_type]

    if field_type in SIMPLE_TYPES:
        return SIMPLE_TYPES[field_type]

    if field_type in CHARACTER_TYPES:
        size = length if length is not None else 1
        return f"{CHARACTER_TYPES[field_type]}({size})"

    if field_type == FieldType.BLOB:
        if sub_type == BLOB_SUB_TYPE_TEXT:
            return "BLOB SUB_TYPE TEXT"
        return "BLOB"

    return f"BLOB /* UNKNOWN_TYPE({field_type}) */"


def descriptor_to_sql(descriptor: TypeDescriptor) -> str:
    """Map a TypeDescriptor; see firebird_type_to_sql."""
    return firebird_type_to_sql(
        descriptor.field_type,
        descriptor.sub_type,
        descriptor.scale,
        descriptor.length,
        descriptor.precision,
    )


def varchar_character_length(byte_length: int, bytes_per_char: int = 4) -> int:
    """
    Convert a VARCHAR byte length to a character length.

    The catalog stores bytes; DDL wants characters. UTF8 uses up to
    four bytes per character.
    """
    return byte_length // bytes_per_char


def character_corrected_sql(descriptor: TypeDescriptor, bytes_per_char: int = 4) -> str:
    """
    Map a descriptor, re-deriving VARCHAR length in characters.

    Used for procedure parameters and generic domain export.
    """
    sql_type = descriptor_to_sql(descriptor)
    if sql_type.startswith("VARCHAR(") and descriptor.length is not None:
        chars = varchar_character_length(descriptor.length, bytes_per_char)
        return f"VARCHAR({chars})"
    return sql_type


__all__ = [
    "FieldType",
    "firebird_type_to_sql",
    "descriptor_to_sql",
    "varchar_character_length",
    "character_corrected_sql",
]
