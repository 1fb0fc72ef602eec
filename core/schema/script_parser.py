# ============================================================================
# SCRIPT PARSER - SET TERM AWARE STATEMENT SPLITTER
# ============================================================================
# STATUS: Core - Tokenizer for multi-statement Firebird scripts
# PURPOSE: Split script text into statements with a mutable terminator
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: ParserState, Statement, process_line, iter_statements, split_script
# DEPENDENCIES: none
# ============================================================================
"""
Script Parser.

Splits isql-style script text into executable statements. The terminator
starts as ';' and can be switched by a directive line:

    SET TERM ^ ;
    CREATE OR ALTER PROCEDURE P AS BEGIN ... ; ... END
    ^
    SET TERM ; ^

The scan is a pure step function over ParserState so it can be driven
line by line in tests. Nothing here touches a database.

Lines end at '\\r\\n', '\\r' or '\\n' only. Other characters that
str.splitlines() treats as breaks (form feed, U+2028, ...) stay inside
the line, and therefore inside any string literal they belong to.

Rules per line (trimmed form):
    - empty or comment line: appended to the buffer, no terminator check
    - 'SET TERM <symbol> ...' (3+ tokens): terminator := <symbol>, line dropped
    - anything else: appended; if the buffer ends with the terminator
      (ignoring trailing whitespace) one terminator is stripped and the
      statement is emitted
"""

import re
from dataclasses import dataclass, replace
from typing import Iterator, List, Optional, Tuple

DEFAULT_TERMINATOR = ";"
COMMENT_MARKER = "--"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class ParserState:
    """
    Scan state for one script.

    start_line is the line number of the first non-blank line in the
    buffer, None while the buffer holds only blank lines or is empty.
    """
    terminator: str = DEFAULT_TERMINATOR
    buffer: str = ""
    start_line: Optional[int] = None
    comment_marker: str = COMMENT_MARKER


@dataclass(frozen=True)
class Statement:
    """One statement to execute, with the source lines it spans (1-based)."""
    text: str
    start_line: int
    end_line: int

    def is_comment_only(self, comment_marker: str = COMMENT_MARKER) -> bool:
        """True when every non-blank line is a comment."""
        return all(
            line.strip().startswith(comment_marker)
            for line in split_lines(self.text)
            if line.strip()
        )


def split_lines(text: str) -> List[str]:
    """
    Split on CR, LF and CRLF only.

    A final line ending does not produce an extra empty line.
    """
    lines = _LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def parse_terminator_directive(trimmed: str) -> Optional[str]:
    """
    Return the new terminator if the line is a SET TERM directive.

    'SET TERM ^ ;' -> '^'. Lines with fewer than three tokens are not
    directives and return None.
    """
    parts = trimmed.split()
    if len(parts) < 3:
        return None
    if parts[0].upper() != "SET" or parts[1].upper() != "TERM":
        return None
    return parts[2]


def ends_with_terminator(buffer: str, terminator: str) -> bool:
    """Check whether the buffer, ignoring trailing whitespace, ends with terminator."""
    return buffer.rstrip().endswith(terminator)


def remove_last_terminator(text: str, terminator: str) -> str:
    """Remove exactly one terminator at the end of text (ignoring whitespace)."""
    stripped = text.rstrip()
    if stripped.endswith(terminator):
        return stripped[: len(stripped) - len(terminator)]
    return text


def process_line(
    state: ParserState,
    line: str,
    line_number: int,
) -> Tuple[ParserState, Optional[Statement]]:
    """
    Advance the scan by one line.

    Args:
        state: Current scan state
        line: Raw line without its line ending
        line_number: 1-based source line number

    Returns:
        (new state, statement to execute or None)
    """
    trimmed = line.strip()

    if not trimmed or trimmed.startswith(state.comment_marker):
        start = state.start_line
        if trimmed and start is None:
            start = line_number
        return replace(state, buffer=state.buffer + line + "\n", start_line=start), None

    new_terminator = parse_terminator_directive(trimmed)
    if new_terminator is not None:
        return replace(state, terminator=new_terminator), None

    start = state.start_line if state.start_line is not None else line_number
    buffer = state.buffer + line + "\n"

    if not ends_with_terminator(buffer, state.terminator):
        return replace(state, buffer=buffer, start_line=start), None

    text = remove_last_terminator(buffer, state.terminator).strip()
    cleared = replace(state, buffer="", start_line=None)
    if not text:
        return cleared, None
    return cleared, Statement(text=text, start_line=start, end_line=line_number)


def finish(state: ParserState, last_line: int) -> Optional[Statement]:
    """Flush a trailing statement that had no terminator."""
    text = state.buffer.strip()
    if not text:
        return None
    start = state.start_line if state.start_line is not None else last_line
    return Statement(text=text, start_line=start, end_line=max(start, last_line))


def iter_statements(
    script: str,
    terminator: str = DEFAULT_TERMINATOR,
    comment_marker: str = COMMENT_MARKER,
) -> Iterator[Statement]:
    """
    Yield statements from script text in source order.

    Args:
        script: Full script text
        terminator: Initial terminator (';' unless overridden)
        comment_marker: Prefix of comment lines ('--' unless overridden)
    """
    state = ParserState(terminator=terminator, comment_marker=comment_marker)
    line_number = 0
    for line_number, line in enumerate(split_lines(script), start=1):
        state, statement = process_line(state, line, line_number)
        if statement is not None:
            yield statement

    tail = finish(state, line_number)
    if tail is not None:
        yield tail


def split_script(script: str, terminator: str = DEFAULT_TERMINATOR) -> List[str]:
    """Return the statement texts of a script as a list."""
    return [s.text for s in iter_statements(script, terminator)]


__all__ = [
    "DEFAULT_TERMINATOR",
    "COMMENT_MARKER",
    "ParserState",
    "Statement",
    "split_lines",
    "parse_terminator_directive",
    "ends_with_terminator",
    "remove_last_terminator",
    "process_line",
    "finish",
    "iter_statements",
    "split_script",
]
