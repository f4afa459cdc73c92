"""Explicit session state for one validation pass.

SQL Server's NOEXEC, PARSEONLY, QUOTED_IDENTIFIER and ANSI_NULLS options are
scoped to the connection.  Rather than flipping them as side effects on a
shared handle, every change goes through :class:`Session`, which records the
option values it has set and the ordered list of SET commands it issued.

Baseline
--------
After a compile check the session is returned to a fixed baseline, not to
whatever was in effect before::

    NOEXEC OFF, PARSEONLY OFF, QUOTED_IDENTIFIER OFF, ANSI_NULLS ON

A check that fails part-way leaves the session *dirty*; the next call to
:meth:`Session.ensure_baseline` forces every option back to the baseline.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

from procaudit.errors import SessionResetError
from procaudit.report import engine_message

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

logger = logging.getLogger(__name__)


class SessionOption(str, Enum):
    NOEXEC = "NOEXEC"
    PARSEONLY = "PARSEONLY"
    QUOTED_IDENTIFIER = "QUOTED_IDENTIFIER"
    ANSI_NULLS = "ANSI_NULLS"


#: Option values restored after every compile check, in reset order.
BASELINE: tuple[tuple[SessionOption, bool], ...] = (
    (SessionOption.NOEXEC, False),
    (SessionOption.PARSEONLY, False),
    (SessionOption.QUOTED_IDENTIFIER, False),
    (SessionOption.ANSI_NULLS, True),
)


def set_statement(option: SessionOption, on: bool) -> str:
    return f"SET {option.value} {'ON' if on else 'OFF'}"


@dataclass
class SessionState:
    """Option values this session has set; ``None`` means never touched."""

    noexec: bool | None = None
    parseonly: bool | None = None
    quoted_identifier: bool | None = None
    ansi_nulls: bool | None = None
    dirty: bool = False

    def get(self, option: SessionOption) -> bool | None:
        return getattr(self, option.name.lower())

    def apply(self, option: SessionOption, on: bool) -> None:
        setattr(self, option.name.lower(), on)

    @property
    def at_baseline(self) -> bool:
        return not self.dirty and all(self.get(opt) == on for opt, on in BASELINE)


class Session:
    """The single connection used for a whole validation pass.

    Args:
        connection: An open SQLAlchemy connection.  Engines built by
            :func:`procaudit.connection.create_validation_engine` use
            AUTOCOMMIT, so no statement is wrapped in a transaction.
    """

    def __init__(self, connection: Connection) -> None:
        self._conn = connection
        self.state = SessionState()
        #: SET statements issued so far, in order.
        self.commands: list[str] = []

    @property
    def connection(self) -> Connection:
        return self._conn

    # ------------------------------------------------------------------
    # Statement execution
    # ------------------------------------------------------------------

    def query(self, sql: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Run a parameterized query and return its rows as dicts."""
        result = self._conn.execute(text(sql), params or {})
        return [dict(row) for row in result.mappings()]

    def execute(self, sql: str, params: dict[str, Any] | None = None) -> None:
        """Run a parameterized statement to completion, discarding any rows.

        SQL Server reports an error from a later statement of a batch only
        when the client advances to that statement's result.  A
        ``CursorResult`` releases its cursor after the first result, so the
        statement runs on a raw DBAPI cursor that is drained with
        ``nextset()`` before it is closed.

        Raises:
            DBAPIError: If any statement in the batch fails.
        """
        dialect = self._conn.dialect
        compiled = text(sql).compile(dialect=dialect)
        bound = compiled.construct_params(params or {})
        if compiled.positional:
            args: Any = tuple(bound[name] for name in compiled.positiontup or ())
        else:
            args = bound
        statement = compiled.string

        cursor = self._conn.connection.cursor()
        try:
            cursor.execute(statement, args)
            while cursor.nextset():
                pass
        except dialect.loaded_dbapi.Error as exc:
            raise DBAPIError.instance(
                statement, args, exc, dialect.loaded_dbapi.Error, dialect=dialect
            ) from exc
        finally:
            cursor.close()

    def run_batch(self, batch: str) -> None:
        """Send ``batch`` verbatim through the driver.

        Object definitions may contain ``:name`` sequences in literals or
        comments, so they bypass SQLAlchemy's bind-parameter parsing.
        """
        result = self._conn.exec_driver_sql(batch)
        result.close()

    # ------------------------------------------------------------------
    # Session options
    # ------------------------------------------------------------------

    def set_option(self, option: SessionOption, on: bool) -> None:
        statement = set_statement(option, on)
        logger.debug("session: %s", statement)
        self.commands.append(statement)
        self.run_batch(statement)
        self.state.apply(option, on)

    def mark_dirty(self) -> None:
        """Flag that a SET sequence stopped part-way."""
        self.state.dirty = True

    def reset(self) -> None:
        """Force every option back to :data:`BASELINE`.

        Raises:
            SessionResetError: If any reset statement fails.
        """
        try:
            for option, on in BASELINE:
                self.set_option(option, on)
        except DBAPIError as exc:
            raise SessionResetError(
                f"Cannot restore session options: {engine_message(exc)}"
            ) from exc
        self.state.dirty = False

    def ensure_baseline(self) -> None:
        """Reset the session only if a previous sequence left it dirty."""
        if self.state.dirty:
            logger.debug("session: dirty, forcing baseline")
            self.reset()
