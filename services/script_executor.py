# ============================================================================
# SCRIPT EXECUTOR
# ============================================================================
# STATUS: Services - All-or-nothing execution of one script
# PURPOSE: Run parsed statements inside a single transaction per script
# CREATED: 18 OCT 2026
# ============================================================================
"""
Script Executor

Runs every statement of one script inside one transaction:

    1. Parse the text into statements (SET TERM aware)
    2. Begin a transaction on the session
    3. Execute statements in source order
    4. Commit when all succeeded; on the first failure roll back and
       raise ScriptExecutionError (nothing from the script persists)

Whitespace-only scripts are not executed and no transaction is opened.
Statements made only of comment lines are dropped before execution.
"""

from dataclasses import dataclass
from typing import List, Optional

from core.errors import ScriptExecutionError
from core.logging import ComponentType, get_logger, log_checkpoint
from core.schema.script_parser import (
    COMMENT_MARKER,
    DEFAULT_TERMINATOR,
    Statement,
    iter_statements,
)

logger = get_logger(__name__, ComponentType.EXECUTOR)


@dataclass
class ExecutionSummary:
    """What one successful run_script call did."""
    executed: int = 0
    dropped_comments: int = 0
    skipped: bool = False


class ScriptExecutor:
    """
    Executes script text against a session.

    The session must provide begin_transaction() returning an object with
    execute(text), commit(), rollback() and close().
    """

    def __init__(
        self,
        terminator: str = DEFAULT_TERMINATOR,
        comment_marker: str = COMMENT_MARKER,
    ):
        self.terminator = terminator
        self.comment_marker = comment_marker

    def _drop_comment_blocks(self, parsed: List[Statement]) -> List[Statement]:
        statements = []
        for statement in parsed:
            if statement.is_comment_only(self.comment_marker):
                logger.debug(
                    f"Dropping comment-only block at lines "
                    f"{statement.start_line}-{statement.end_line}"
                )
                continue
            statements.append(statement)
        return statements

    def run_script(self, session, script: str, name: Optional[str] = None) -> ExecutionSummary:
        """
        Execute a whole script in one transaction.

        Args:
            session: Open database session
            script: Raw script text
            name: Script name for error messages

        Returns:
            ExecutionSummary

        Raises:
            ScriptExecutionError: A statement failed; the transaction was rolled back
        """
        if not script or not script.strip():
            return ExecutionSummary(skipped=True)

        all_statements = list(iter_statements(script, self.terminator, self.comment_marker))
        statements = self._drop_comment_blocks(all_statements)
        summary = ExecutionSummary(dropped_comments=len(all_statements) - len(statements))

        transaction = session.begin_transaction()
        try:
            for statement in statements:
                try:
                    transaction.execute(statement.text)
                except Exception as e:
                    raise ScriptExecutionError(
                        str(e),
                        statement=statement.text,
                        start_line=statement.start_line,
                        end_line=statement.end_line,
                        file_name=name,
                    ) from e
                summary.executed += 1

            try:
                transaction.commit()
            except Exception as e:
                last_line = statements[-1].end_line if statements else 1
                raise ScriptExecutionError(
                    f"commit failed: {e}",
                    statement="COMMIT",
                    start_line=last_line,
                    end_line=last_line,
                    file_name=name,
                ) from e
        except Exception:
            logger.warning(
                f"Rolling back {name or 'script'} after "
                f"{summary.executed} of {len(statements)} statements"
            )
            transaction.rollback()
            raise
        finally:
            transaction.close()

        log_checkpoint("script_committed", {"script": name, "statements": summary.executed})
        return summary


__all__ = ["ScriptExecutor", "ExecutionSummary"]
