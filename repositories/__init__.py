# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# STATUS: Core - Database access layer
# PURPOSE: Read-only access to the Firebird system catalog
# CREATED: 18 OCT 2026
# ============================================================================
"""
Repositories Module

Usage:
    from repositories import CatalogRepository

    with FirebirdRepository(settings).session() as session:
        snapshot = CatalogRepository(session).read_snapshot()
"""

from .base import BaseRepository
from .catalog_repo import CatalogRepository, is_user_domain

__all__ = [
    "BaseRepository",
    "CatalogRepository",
    "is_user_domain",
]
