"""Diagnostic lines and the sink every component reports through.

Line format
-----------
Per-object failures are tab-delimited so log scraping stays line oriented::

    dbo<TAB>usp_Orders<TAB>FAILED<TAB>Invalid object name 'Ordrs'.<TAB>Line 7
    dbo<TAB>usp_Secret<TAB>UNREADABLE<TAB>The text for object is encrypted.

Carriage returns and newlines in engine messages are replaced by spaces.

Informational lines (version, progress, summary, detail) are free text and
gated by :class:`~procaudit.schema.verbosity.Verbosity`.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from sqlalchemy.exc import DBAPIError

from procaudit.schema.catalog import CatalogObject
from procaudit.schema.verbosity import Verbosity

logger = logging.getLogger(__name__)

_LINE_NUMBER_RE = re.compile(r"\bLine (\d+)\b", re.IGNORECASE)
_DRIVER_PREFIX_RE = re.compile(r"^(?:\s*\[[^\]]*\])+")
_DRIVER_SUFFIX_RE = re.compile(r"(?: \(-?\d+\))?(?: \(SQL\w+\))*$")
_RECORD_SEPARATOR_RE = re.compile(r"; (?=\[)")


class DiagnosticStatus(str, Enum):
    FAILED = "FAILED"
    UNREADABLE = "UNREADABLE"


def single_line(text: str) -> str:
    return text.replace("\r", " ").replace("\n", " ")


def engine_message(exc: DBAPIError) -> str:
    """Return the engine's own message, without driver decoration.

    pyodbc raises with ``args == (sqlstate, message)`` where ``message``
    looks like ``[42S22] [Microsoft][ODBC Driver 18 for SQL Server][SQL
    Server]Invalid column name 'b'. (207) (SQLExecDirectW)`` and may chain
    further records after ``; ``.  Only the first record is kept, with the
    bracketed prefixes and the native-error/function suffix removed.  Other
    drivers fall back to ``str(orig)``.
    """
    orig = exc.orig
    if orig is None:
        return str(exc)
    args = getattr(orig, "args", ())
    if len(args) == 2 and all(isinstance(a, str) for a in args):
        first = _RECORD_SEPARATOR_RE.split(args[1], maxsplit=1)[0]
        message = _DRIVER_SUFFIX_RE.sub("", _DRIVER_PREFIX_RE.sub("", first))
        if message.strip():
            return message
    return str(orig)


def engine_line_number(message: str) -> int | None:
    """Extract the batch line number when the driver reports one."""
    match = _LINE_NUMBER_RE.search(message)
    return int(match.group(1)) if match else None


@dataclass(frozen=True)
class Diagnostic:
    """One per-object problem report.

    Attributes:
        schema: Schema of the object.
        name: Object name.
        status: ``FAILED`` or ``UNREADABLE``.
        message: Engine message.
        line: Batch line number, when available.
    """

    schema: str
    name: str
    status: DiagnosticStatus
    message: str
    line: int | None = None

    def format(self) -> str:
        parts = [self.schema, self.name, self.status.value, self.message]
        if self.line is not None:
            parts.append(f"Line {self.line}")
        return single_line("\t".join(parts))


class DiagnosticSink:
    """Collects diagnostic lines for a report and forwards them to logging.

    Every ``FAILED`` and ``UNREADABLE`` line is recorded regardless of
    verbosity; emission to the log follows the verbosity level.

    Args:
        verbosity: Reporting level for this pass.
    """

    def __init__(self, verbosity: Verbosity = Verbosity.NORMAL) -> None:
        self.verbosity = verbosity
        self.lines: list[str] = []

    # ------------------------------------------------------------------
    # Per-object diagnostics
    # ------------------------------------------------------------------

    def failed(self, obj: CatalogObject, exc: DBAPIError) -> str:
        """Record a compile or probe failure and return the formatted line."""
        message = engine_message(exc)
        return self._record(
            Diagnostic(
                schema=obj.schema,
                name=obj.name,
                status=DiagnosticStatus.FAILED,
                message=message,
                line=engine_line_number(message),
            ),
            logging.ERROR,
        )

    def unreadable(self, obj: CatalogObject, message: str) -> str:
        """Record a definition that could not be fetched."""
        return self._record(
            Diagnostic(
                schema=obj.schema,
                name=obj.name,
                status=DiagnosticStatus.UNREADABLE,
                message=message,
            ),
            logging.WARNING,
        )

    # ------------------------------------------------------------------
    # Informational lines
    # ------------------------------------------------------------------

    def info(self, message: str) -> None:
        """Version, progress and summary lines (normal and above)."""
        if self.verbosity.at_least(Verbosity.NORMAL):
            logger.info(message)

    def detail(self, message: str) -> None:
        """Per-object detail (verbose only)."""
        if self.verbosity.at_least(Verbosity.VERBOSE):
            logger.info(message)

    def _record(self, diagnostic: Diagnostic, level: int) -> str:
        line = diagnostic.format()
        self.lines.append(line)
        if self.verbosity.at_least(Verbosity.QUIET):
            logger.log(level, line)
        return line
