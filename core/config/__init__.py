# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the schema tool.
"""

from core.config.defaults import (
    FirebirdDefaults,
    ScriptDefaults,
    ExportDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "FirebirdDefaults",
    "ScriptDefaults",
    "ExportDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
