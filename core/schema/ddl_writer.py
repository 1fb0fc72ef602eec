# ============================================================================
# DDL WRITER
# ============================================================================
# STATUS: Core - Script rendering from catalog snapshots
# PURPOSE: Render domains, tables and procedures as ordered .sql files
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: ScriptWriter, render_domains, render_tables, render_procedures
# DEPENDENCIES: none
# ============================================================================
"""
DDL Writer - Catalog Snapshot to Script Files.

Output is deliberately plain text so the script parser can read it back
unchanged. Procedures are wrapped in a SET TERM envelope because their
bodies contain ';':

    SET TERM ^ ;
    CREATE OR ALTER PROCEDURE NAME
    (
        P1 INTEGER,
        P2 VARCHAR(50)
    )
    AS
    BEGIN
      ...
    END
    ^
    SET TERM ; ^

Usage:
    writer = ScriptWriter()
    paths = writer.write_all(snapshot, Path("out"))
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from core.config import ScriptDefaults
from core.models import CatalogSnapshot, Domain, Procedure, Table

logger = logging.getLogger(__name__)


# ============================================================================
# RENDERING
# ============================================================================

def render_domain(domain: Domain) -> str:
    """Render one CREATE DOMAIN statement (single line, with terminator)."""
    suffix = " NOT NULL" if domain.not_null else ""
    return f"CREATE DOMAIN {domain.name} AS {domain.sql_type}{suffix};"


def render_domains(domains: List[Domain]) -> str:
    """Render 01_domains.sql content."""
    return "".join(render_domain(d) + "\n" for d in domains)


def render_table(table: Table) -> str:
    """Render one CREATE TABLE block followed by a blank line."""
    lines = [
        f"  {col.name} {col.sql_type}" + (" NOT NULL" if col.not_null else "")
        for col in table.columns
    ]
    return (
        f"CREATE TABLE {table.name} (\n"
        + ",\n".join(lines) + "\n"
        + ");\n"
        + "\n"
    )


def render_tables(tables: List[Table]) -> str:
    """Render 02_tables.sql content."""
    return "".join(render_table(t) for t in tables)


def render_procedure(
    procedure: Procedure,
    terminator: str = "^",
    default_terminator: str = ";",
) -> str:
    """
    Render one procedure inside a SET TERM envelope.

    Args:
        procedure: Procedure to render
        terminator: Temporary terminator around the body
        default_terminator: Terminator restored afterwards
    """
    out = [
        f"SET TERM {terminator} {default_terminator}",
        f"CREATE OR ALTER PROCEDURE {procedure.name}",
    ]

    if procedure.parameters:
        params = [f"{p.name} {p.sql_type}" for p in procedure.parameters]
        out.append("(")
        out.append("    " + ",\n    ".join(params))
        out.append(")")

    out.append("AS")
    out.append(procedure.source.rstrip())
    out.append(terminator)
    out.append(f"SET TERM {default_terminator} {terminator}")
    out.append("")

    return "".join(line + "\n" for line in out)


def render_procedures(
    procedures: List[Procedure],
    terminator: str = "^",
    default_terminator: str = ";",
) -> str:
    """Render 03_procedures.sql content."""
    return "".join(
        render_procedure(p, terminator, default_terminator) for p in procedures
    )


# ============================================================================
# SCRIPT WRITER
# ============================================================================

class ScriptWriter:
    """
    Writes a CatalogSnapshot to the three ordered script files.

    Existing files with the same names are overwritten.
    """

    def __init__(self, settings: Optional[ScriptDefaults] = None):
        self.settings = settings or ScriptDefaults()

    def render_all(self, snapshot: CatalogSnapshot) -> Dict[str, str]:
        """
        Render every file without touching the filesystem.

        Returns:
            Ordered dict of file name -> content
        """
        s = self.settings
        return {
            s.domains_filename: render_domains(snapshot.domains),
            s.tables_filename: render_tables(snapshot.tables),
            s.procedures_filename: render_procedures(
                snapshot.procedures,
                terminator=s.procedure_terminator,
                default_terminator=s.default_terminator,
            ),
        }

    def write_all(self, snapshot: CatalogSnapshot, output_dir: Path) -> List[Path]:
        """
        Render and write all files into output_dir (created if missing).

        Returns:
            Paths written, in dependency order
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        written = []
        for name, content in self.render_all(snapshot).items():
            path = output_dir / name
            # newline="" keeps '\n' on every platform
            with open(path, "w", encoding=self.settings.encoding, newline="") as f:
                f.write(content)
            logger.info(f"Wrote {path} ({len(content)} chars)")
            written.append(path)

        return written


__all__ = [
    "ScriptWriter",
    "render_domain",
    "render_domains",
    "render_table",
    "render_tables",
    "render_procedure",
    "render_procedures",
]
