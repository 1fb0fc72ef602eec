# ============================================================================
# CATALOG REPOSITORY
# ============================================================================
# STATUS: Repositories - Read-only Firebird system catalog access
# PURPOSE: List user domains, tables (with columns) and procedures
# CREATED: 18 OCT 2026
# ============================================================================
"""
Catalog Repository

Read-only queries against the RDB$ system tables. Each list_* method
returns immutable catalog models in a stable order (by name, columns and
parameters by position).

The repository only needs a session with fetch_all(query, params), so
tests drive it with a mocked session and canned rows.

Any driver failure is raised as CatalogReadError; an export never writes
a partial snapshot.
"""

import logging
from typing import Any, Dict, List, Optional

from core.config import ExportDefaults
from core.contracts import DomainExportMode, TypeDescriptor
from core.errors import CatalogReadError
from core.models import (
    CatalogSnapshot,
    Column,
    Domain,
    Parameter,
    Procedure,
    Table,
)
from core.schema.type_mapper import character_corrected_sql, descriptor_to_sql
from .base import BaseRepository

logger = logging.getLogger(__name__)

SYSTEM_PREFIX = "RDB$"

# Parameter direction in RDB$PROCEDURE_PARAMETERS.RDB$PARAMETER_TYPE
PARAMETER_INPUT = 0

# Fixed definitions emitted by DomainExportMode.LEGACY
LEGACY_DOMAINS = {
    "DM_NAME": "VARCHAR(50)",
    "DM_AGE": "INTEGER",
}


# ============================================================================
# QUERIES
# ============================================================================

SQL_DOMAINS = """
SELECT
    TRIM(f.RDB$FIELD_NAME) AS field_name,
    f.RDB$FIELD_TYPE AS field_type,
    f.RDB$FIELD_SUB_TYPE AS field_sub_type,
    f.RDB$FIELD_SCALE AS field_scale,
    f.RDB$FIELD_LENGTH AS field_length,
    f.RDB$FIELD_PRECISION AS field_precision,
    f.RDB$NULL_FLAG AS null_flag
FROM RDB$FIELDS f
WHERE COALESCE(f.RDB$SYSTEM_FLAG, 0) = 0
  AND f.RDB$FIELD_NAME NOT STARTING WITH 'RDB$'
ORDER BY 1
"""

SQL_TABLES = """
SELECT TRIM(r.RDB$RELATION_NAME) AS relation_name
FROM RDB$RELATIONS r
WHERE COALESCE(r.RDB$SYSTEM_FLAG, 0) = 0
  AND r.RDB$RELATION_NAME NOT STARTING WITH 'RDB$'
  AND r.RDB$VIEW_BLR IS NULL
ORDER BY 1
"""

SQL_COLUMNS = """
SELECT
    TRIM(rf.RDB$FIELD_NAME) AS column_name,
    TRIM(rf.RDB$FIELD_SOURCE) AS field_source,
    rf.RDB$NULL_FLAG AS null_flag,
    f.RDB$FIELD_TYPE AS field_type,
    f.RDB$FIELD_SUB_TYPE AS field_sub_type,
    f.RDB$FIELD_SCALE AS field_scale,
    f.RDB$FIELD_LENGTH AS field_length,
    f.RDB$FIELD_PRECISION AS field_precision
FROM RDB$RELATION_FIELDS rf
JOIN RDB$FIELDS f ON f.RDB$FIELD_NAME = rf.RDB$FIELD_SOURCE
WHERE rf.RDB$RELATION_NAME = ?
ORDER BY rf.RDB$FIELD_POSITION
"""

SQL_PROCEDURES = """
SELECT
    TRIM(p.RDB$PROCEDURE_NAME) AS procedure_name,
    p.RDB$PROCEDURE_SOURCE AS procedure_source
FROM RDB$PROCEDURES p
WHERE COALESCE(p.RDB$SYSTEM_FLAG, 0) = 0
  AND p.RDB$PROCEDURE_NAME NOT STARTING WITH 'RDB$'
ORDER BY 1
"""

SQL_PROCEDURE_PARAMETERS = """
SELECT
    TRIM(pp.RDB$PARAMETER_NAME) AS parameter_name,
    f.RDB$FIELD_TYPE AS field_type,
    f.RDB$FIELD_SUB_TYPE AS field_sub_type,
    f.RDB$FIELD_SCALE AS field_scale,
    f.RDB$FIELD_LENGTH AS field_length,
    f.RDB$FIELD_PRECISION AS field_precision
FROM RDB$PROCEDURE_PARAMETERS pp
JOIN RDB$FIELDS f ON f.RDB$FIELD_NAME = pp.RDB$FIELD_SOURCE
WHERE pp.RDB$PROCEDURE_NAME = ?
  AND pp.RDB$PARAMETER_TYPE = ?
ORDER BY pp.RDB$PARAMETER_NUMBER
"""


def _text(value: Any) -> str:
    """CHAR columns come back blank-padded; NULL becomes ''."""
    if value is None:
        return ""
    return str(value).strip()


def _descriptor(row: Dict[str, Any]) -> TypeDescriptor:
    return TypeDescriptor(
        field_type=row["field_type"],
        sub_type=row.get("field_sub_type"),
        scale=row.get("field_scale"),
        length=row.get("field_length"),
        precision=row.get("field_precision"),
    )


def is_user_domain(field_source: str) -> bool:
    """True when a field source names a user domain, not an RDB$ auto domain."""
    return bool(field_source) and not field_source.upper().startswith(SYSTEM_PREFIX)


# ============================================================================
# REPOSITORY
# ============================================================================

class CatalogRepository(BaseRepository):
    """
    Reads domains, tables and procedures from a Firebird catalog.

    Usage:
        repo = CatalogRepository(session)
        snapshot = repo.read_snapshot()
    """

    error_class = CatalogReadError

    def __init__(self, session, settings: Optional[ExportDefaults] = None):
        """
        Args:
            session: Object with fetch_all(query, params) -> list of dict rows
            settings: Export settings (domain mode, bytes per character)
        """
        super().__init__()
        self.session = session
        self.settings = settings or ExportDefaults()

    # =========================================================================
    # DOMAINS
    # =========================================================================

    def list_domains(self) -> List[Domain]:
        """
        List user domains worth re-declaring.

        GENERIC mode maps every user domain through the type mapper.
        LEGACY mode only returns DM_NAME and DM_AGE with fixed types.
        """
        with self._error_context("domain listing"):
            rows = self.session.fetch_all(SQL_DOMAINS)

        domains = []
        for row in rows:
            name = _text(row["field_name"])
            descriptor = _descriptor(row)

            if self.settings.domain_mode == DomainExportMode.LEGACY:
                legacy_type = LEGACY_DOMAINS.get(name.upper())
                if legacy_type is None:
                    continue
                domains.append(Domain(name=name.upper(), sql_type=legacy_type, descriptor=descriptor))
                continue

            domains.append(Domain(
                name=name,
                sql_type=character_corrected_sql(descriptor, self.settings.bytes_per_char),
                not_null=row.get("null_flag") == 1,
                descriptor=descriptor,
            ))

        self._log_operation("Domains read", len(domains), {"mode": self.settings.domain_mode.value})
        return domains

    # =========================================================================
    # TABLES
    # =========================================================================

    def list_tables(self) -> List[Table]:
        """List user tables (no views, no system relations) with their columns."""
        with self._error_context("table listing"):
            rows = self.session.fetch_all(SQL_TABLES)

        tables = []
        for row in rows:
            name = _text(row["relation_name"])
            tables.append(Table(name=name, columns=self.list_columns(name)))

        self._log_operation("Tables read", len(tables))
        return tables

    def list_columns(self, table_name: str) -> List[Column]:
        """
        List the columns of one table in positional order.

        A column whose field source is a user domain renders as the
        domain name, even though its primitive type is known.
        """
        with self._error_context("column listing", table_name):
            rows = self.session.fetch_all(SQL_COLUMNS, (table_name,))

        columns = []
        for row in rows:
            field_source = _text(row["field_source"])
            descriptor = _descriptor(row)
            if is_user_domain(field_source):
                sql_type = field_source
            else:
                sql_type = descriptor_to_sql(descriptor)

            columns.append(Column(
                name=_text(row["column_name"]),
                sql_type=sql_type,
                not_null=row.get("null_flag") == 1,
                field_source=field_source,
                descriptor=descriptor,
            ))
        return columns

    # =========================================================================
    # PROCEDURES
    # =========================================================================

    def list_procedures(self) -> List[Procedure]:
        """List user procedures with input parameters and body source."""
        with self._error_context("procedure listing"):
            rows = self.session.fetch_all(SQL_PROCEDURES)

        procedures = []
        for row in rows:
            name = _text(row["procedure_name"])
            source = row.get("procedure_source") or ""
            procedures.append(Procedure(
                name=name,
                parameters=self.list_input_parameters(name),
                source=str(source).rstrip(),
            ))

        self._log_operation("Procedures read", len(procedures))
        return procedures

    def list_input_parameters(self, procedure_name: str) -> List[Parameter]:
        """
        List input parameters of one procedure in declaration order.

        VARCHAR lengths are converted from bytes to characters.
        """
        with self._error_context("parameter listing", procedure_name):
            rows = self.session.fetch_all(
                SQL_PROCEDURE_PARAMETERS, (procedure_name, PARAMETER_INPUT)
            )

        return [
            Parameter(
                name=_text(row["parameter_name"]),
                sql_type=character_corrected_sql(_descriptor(row), self.settings.bytes_per_char),
                descriptor=_descriptor(row),
            )
            for row in rows
        ]

    # =========================================================================
    # SNAPSHOT
    # =========================================================================

    def read_snapshot(self) -> CatalogSnapshot:
        """Read domains, tables and procedures, in that order."""
        return CatalogSnapshot(
            domains=self.list_domains(),
            tables=self.list_tables(),
            procedures=self.list_procedures(),
        )


__all__ = [
    "CatalogRepository",
    "is_user_domain",
    "SQL_DOMAINS",
    "SQL_TABLES",
    "SQL_COLUMNS",
    "SQL_PROCEDURES",
    "SQL_PROCEDURE_PARAMETERS",
]
