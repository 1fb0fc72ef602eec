# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Infrastructure - Database connectivity
# PURPOSE: Firebird connection settings, sessions and transactions
# CREATED: 18 OCT 2026
# ============================================================================
"""
Infrastructure module for the schema tool.

Provides:
- FirebirdSettings: DSN and credentials from a connection string
- FirebirdRepository: session() / create() context managers
- FirebirdSession, FirebirdTransaction: the primitives the engine uses
"""

from infrastructure.firebird import (
    FirebirdSettings,
    FirebirdRepository,
    FirebirdSession,
    FirebirdTransaction,
)

__all__ = [
    "FirebirdSettings",
    "FirebirdRepository",
    "FirebirdSession",
    "FirebirdTransaction",
]
