# ============================================================================
# FIREBIRD CONNECTION INFRASTRUCTURE
# ============================================================================
# STATUS: Infrastructure - Firebird connection handling
# PURPOSE: Connection settings, sessions and explicit transactions
# CREATED: 18 OCT 2026
# ============================================================================
"""
Firebird Connection Infrastructure

Provides database connectivity for the schema tool:
- Connection settings from a key=value connection string or a native DSN
- Database creation for build-db
- Context managers that close the connection on every exit path
- Explicit transaction handles (one per script file)

Rows are always returned as dicts keyed by lower-cased column alias,
never accessed by tuple index.

Usage:
    repo = FirebirdRepository(FirebirdSettings.from_connection_string(cs))
    with repo.session() as session:
        rows = session.fetch_all("SELECT 1 AS one FROM RDB$DATABASE")
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence

from firebird.driver import connect, create_database

from core.config import FirebirdDefaults, get_defaults
from core.errors import ConnectionSettingsError

logger = logging.getLogger(__name__)


# ============================================================================
# CONNECTION SETTINGS
# ============================================================================

# Accepted connection-string keys (lower-case, spaces removed) -> field
_KEY_ALIASES = {
    "user": "user",
    "userid": "user",
    "username": "user",
    "uid": "user",
    "password": "password",
    "pwd": "password",
    "database": "database",
    "initialcatalog": "database",
    "datasource": "host",
    "host": "host",
    "server": "host",
    "port": "port",
    "charset": "charset",
    "characterset": "charset",
    "role": "role",
}


@dataclass(frozen=True)
class FirebirdSettings:
    """
    Everything needed to open (or create) one Firebird database.

    host None means a local/embedded connection to the database path.
    """
    database: str
    host: Optional[str] = None
    port: Optional[int] = None
    user: Optional[str] = None
    password: Optional[str] = None
    charset: Optional[str] = None
    role: Optional[str] = None

    @property
    def dsn(self) -> str:
        """Firebird DSN: host/port:database, host:database or database."""
        if not self.host:
            return self.database
        if self.port:
            return f"{self.host}/{self.port}:{self.database}"
        return f"{self.host}:{self.database}"

    @property
    def display_name(self) -> str:
        """DSN for logs (never includes credentials)."""
        return self.dsn

    @classmethod
    def for_new_database(
        cls,
        path: Path,
        defaults: Optional[FirebirdDefaults] = None,
    ) -> "FirebirdSettings":
        """Settings for build-db: server from defaults, given file path."""
        d = defaults or get_defaults().firebird
        return cls(
            database=str(path),
            host=d.host,
            port=d.port,
            user=d.user,
            password=d.password,
            charset=d.charset,
        )

    @classmethod
    def from_connection_string(
        cls,
        value: str,
        defaults: Optional[FirebirdDefaults] = None,
    ) -> "FirebirdSettings":
        """
        Parse a connection string.

        Accepts either 'User ID=SYSDBA;Password=...;Database=...;DataSource=...'
        style strings or a plain Firebird DSN. Missing user, password and
        charset fall back to defaults.

        Raises:
            ConnectionSettingsError: No database could be determined
        """
        d = defaults or get_defaults().firebird
        text = (value or "").strip()
        if not text:
            raise ConnectionSettingsError("Connection string is empty")

        if "=" not in text:
            settings = cls(database=text)
        else:
            settings = cls._parse_key_values(text)

        return replace(
            settings,
            user=settings.user or d.user,
            password=settings.password if settings.password is not None else d.password,
            charset=settings.charset or d.charset,
        )

    @classmethod
    def _parse_key_values(cls, text: str) -> "FirebirdSettings":
        fields: Dict[str, Any] = {}
        for part in text.split(";"):
            if not part.strip():
                continue
            if "=" not in part:
                raise ConnectionSettingsError(f"Malformed connection string segment: {part!r}")
            key, _, val = part.partition("=")
            normalized = key.strip().lower().replace(" ", "").replace("_", "")
            target = _KEY_ALIASES.get(normalized)
            if target is None:
                # ServerType, Pooling, Dialect... have no meaning here
                logger.debug(f"Ignoring connection string key {key.strip()!r}")
                continue
            fields[target] = val.strip()

        if not fields.get("database"):
            raise ConnectionSettingsError("Connection string has no Database entry")

        if "port" in fields:
            try:
                fields["port"] = int(fields["port"])
            except ValueError:
                raise ConnectionSettingsError(f"Invalid port: {fields['port']!r}")

        return cls(**fields)


# ============================================================================
# SESSION AND TRANSACTION
# ============================================================================

def _materialize(value: Any) -> Any:
    # Large text BLOBs arrive as BlobReader, only valid while the cursor is open
    if hasattr(value, "read"):
        try:
            return value.read()
        finally:
            value.close()
    return value


def _rows_as_dicts(cursor) -> List[Dict[str, Any]]:
    names = [d[0].strip().lower() for d in cursor.description]
    return [
        dict(zip(names, (_materialize(v) for v in row)))
        for row in cursor.fetchall()
    ]


class FirebirdTransaction:
    """
    One explicit transaction on a session.

    The script executor opens one per file and either commits it or
    rolls it back; close() releases the handle either way.
    """

    def __init__(self, manager):
        self._manager = manager
        self._manager.begin()

    def execute(self, statement: str) -> None:
        """Execute one statement (DDL or DML) without fetching results."""
        with self._manager.cursor() as cur:
            cur.execute(statement)

    def commit(self) -> None:
        self._manager.commit()

    def rollback(self) -> None:
        self._manager.rollback()

    def close(self) -> None:
        self._manager.close()


class FirebirdSession:
    """
    Wraps a firebird-driver connection.

    Exposes only what the schema tool needs: explicit transactions for
    scripts and read queries for the catalog.
    """

    def __init__(self, connection, name: str = ""):
        self._connection = connection
        self.name = name

    def begin_transaction(self) -> FirebirdTransaction:
        """Start a new transaction independent of the catalog reads."""
        return FirebirdTransaction(self._connection.transaction_manager())

    def fetch_all(self, query: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """Execute a read query and return all rows as dicts."""
        with self._connection.cursor() as cur:
            cur.execute(query, params)
            return _rows_as_dicts(cur)

    def close(self) -> None:
        if self._connection is not None and not self._connection.is_closed():
            self._connection.close()


# ============================================================================
# REPOSITORY
# ============================================================================

class FirebirdRepository:
    """
    Opens sessions for one set of FirebirdSettings.

    Usage:
        repo = FirebirdRepository(settings)
        with repo.session() as session:
            ...
    """

    def __init__(self, settings: FirebirdSettings):
        self.settings = settings

    @contextmanager
    def session(self) -> Iterator[FirebirdSession]:
        """
        Context manager for an existing database.

        Yields:
            FirebirdSession, closed on exit (also on error)
        """
        s = self.settings
        logger.debug(f"Connecting to Firebird {s.display_name}...")
        conn = connect(
            s.dsn,
            user=s.user,
            password=s.password,
            role=s.role,
            charset=s.charset,
        )
        logger.debug("Firebird connection established")
        session = FirebirdSession(conn, name=s.display_name)
        try:
            yield session
        finally:
            session.close()

    @contextmanager
    def create(self) -> Iterator[FirebirdSession]:
        """
        Context manager that creates the database, then yields a session on it.

        The caller checks for an existing file first; the engine refuses
        to overwrite one anyway.
        """
        s = self.settings
        logger.info(f"Creating Firebird database {s.display_name}")
        conn = create_database(
            s.dsn,
            user=s.user,
            password=s.password,
            role=s.role,
            charset=s.charset,
        )
        session = FirebirdSession(conn, name=s.display_name)
        try:
            yield session
        finally:
            session.close()


__all__ = [
    "FirebirdSettings",
    "FirebirdTransaction",
    "FirebirdSession",
    "FirebirdRepository",
]
