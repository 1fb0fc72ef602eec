# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Model exports
# PURPOSE: Central export point for all Pydantic models
# LAST_REVIEWED: 18 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

Pydantic models for catalog objects read from a Firebird database.
"""

from core.models.catalog import (
    Domain,
    Column,
    Table,
    Parameter,
    Procedure,
    CatalogSnapshot,
)

__all__ = [
    "Domain",
    "Column",
    "Table",
    "Parameter",
    "Procedure",
    "CatalogSnapshot",
]
