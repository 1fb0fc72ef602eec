# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for connections, script files and export
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for the schema tool.
These can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from core.contracts import DomainExportMode
from core.errors import ConfigurationError


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(name, raw, "an integer")


def _env_domain_mode(name: str, default: DomainExportMode) -> DomainExportMode:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return DomainExportMode(raw.strip().lower())
    except ValueError:
        choices = " or ".join(m.value for m in DomainExportMode)
        raise ConfigurationError(name, raw, choices)


@dataclass(frozen=True)
class FirebirdDefaults:
    """
    Defaults for Firebird connections.

    Used when build-db creates a new database and when a connection
    string does not carry user, password or charset.
    """
    host: str = "127.0.0.1"
    port: int = 3050
    user: str = "SYSDBA"
    password: str = "masterkey"
    charset: str = "UTF8"

    # File name build-db creates inside --db-dir
    database_filename: str = "database.fdb"

    @classmethod
    def from_env(cls) -> "FirebirdDefaults":
        """Create from environment variables."""
        return cls(
            host=os.getenv("FIREBIRD_HOST", "127.0.0.1"),
            port=_env_int("FIREBIRD_PORT", 3050),
            user=os.getenv("FIREBIRD_USER", "SYSDBA"),
            password=os.getenv("FIREBIRD_PASSWORD", "masterkey"),
            charset=os.getenv("FIREBIRD_CHARSET", "UTF8"),
            database_filename=os.getenv("FIREBIRD_DATABASE_FILENAME", "database.fdb"),
        )


@dataclass(frozen=True)
class ScriptDefaults:
    """
    Defaults for reading and writing script files.
    """
    file_pattern: str = "*.sql"
    encoding: str = "utf-8"

    # Tokenizer
    default_terminator: str = ";"
    comment_marker: str = "--"

    # Terminator used around exported procedure bodies
    procedure_terminator: str = "^"

    # Generated files, in dependency order
    domains_filename: str = "01_domains.sql"
    tables_filename: str = "02_tables.sql"
    procedures_filename: str = "03_procedures.sql"


@dataclass(frozen=True)
class ExportDefaults:
    """
    Defaults for catalog export.
    """
    domain_mode: DomainExportMode = DomainExportMode.GENERIC

    # Catalog stores byte length; UTF8 is up to 4 bytes per character
    bytes_per_char: int = 4

    @classmethod
    def from_env(cls) -> "ExportDefaults":
        """Create from environment variables."""
        return cls(
            domain_mode=_env_domain_mode("EXPORT_DOMAIN_MODE", DomainExportMode.GENERIC),
            bytes_per_char=_env_int("EXPORT_BYTES_PER_CHAR", 4),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    firebird: FirebirdDefaults = field(default_factory=FirebirdDefaults)
    scripts: ScriptDefaults = field(default_factory=ScriptDefaults)
    export: ExportDefaults = field(default_factory=ExportDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            firebird=FirebirdDefaults.from_env(),
            scripts=ScriptDefaults(),
            export=ExportDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "FirebirdDefaults",
    "ScriptDefaults",
    "ExportDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
