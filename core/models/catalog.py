# ============================================================================
# CATALOG MODELS
# ============================================================================
# STATUS: Core model - Read-only projections of the Firebird system catalog
# PURPOSE: Domains, tables, columns, procedures and parameters as values
# CREATED: 18 OCT 2026
# EXPORTS: Domain, Column, Table, Parameter, Procedure, CatalogSnapshot
# DEPENDENCIES: pydantic
# ============================================================================
"""
Catalog Models

Immutable values produced by CatalogRepository and consumed by the DDL
writer. They are never built from user input, only reported from a live
database.

Each object carries its rendered SQL type (sql_type). Domains, columns and
parameters also keep the raw TypeDescriptor for diagnostics.
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from core.contracts import TypeDescriptor


class Domain(BaseModel):
    """
    User-defined domain (RDB$FIELDS row without the RDB$ prefix).
    """
    name: str = Field(..., description="Domain name, trimmed")
    sql_type: str = Field(..., description="Rendered SQL type")
    not_null: bool = Field(default=False, description="Domain declared NOT NULL")
    descriptor: Optional[TypeDescriptor] = Field(default=None)

    model_config = {"frozen": True}


class Column(BaseModel):
    """
    Table column in RDB$FIELD_POSITION order.

    sql_type is the domain name when the field source is a user domain,
    otherwise the mapped primitive type.
    """
    name: str
    sql_type: str
    not_null: bool = False
    field_source: Optional[str] = Field(default=None, description="RDB$FIELD_SOURCE")
    descriptor: Optional[TypeDescriptor] = None

    model_config = {"frozen": True}


class Table(BaseModel):
    """User table (never a view) with ordered columns."""
    name: str
    columns: List[Column] = Field(default_factory=list)

    model_config = {"frozen": True}


class Parameter(BaseModel):
    """Procedure input parameter. Nullability is not tracked."""
    name: str
    sql_type: str
    descriptor: Optional[TypeDescriptor] = None

    model_config = {"frozen": True}


class Procedure(BaseModel):
    """Stored procedure with ordered input parameters and its body source."""
    name: str
    parameters: List[Parameter] = Field(default_factory=list)
    source: str = Field(default="", description="RDB$PROCEDURE_SOURCE, right-trimmed")

    model_config = {"frozen": True}


class CatalogSnapshot(BaseModel):
    """
    Everything export-scripts writes, in dependency order.
    """
    domains: List[Domain] = Field(default_factory=list)
    tables: List[Table] = Field(default_factory=list)
    procedures: List[Procedure] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def object_count(self) -> int:
        return len(self.domains) + len(self.tables) + len(self.procedures)


__all__ = [
    "Domain",
    "Column",
    "Table",
    "Parameter",
    "Procedure",
    "CatalogSnapshot",
]
