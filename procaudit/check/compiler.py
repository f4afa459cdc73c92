"""Compile validator: asks the engine to compile a definition without effect.

Protocol, on the pass's single session::

    SET NOEXEC ON
    SET QUOTED_IDENTIFIER <object setting>
    SET ANSI_NULLS <object setting>
    <definition batch>
    SET QUOTED_IDENTIFIER OFF
    SET ANSI_NULLS ON
    SET NOEXEC OFF
    SET PARSEONLY OFF

With NOEXEC on, the ``CREATE`` in the definition is compiled and any syntax
or binding error is reported, but nothing is written.

The sequence stops at the first engine error.  The session is then marked
dirty and forced back to its baseline before the next check.
"""
from __future__ import annotations

from sqlalchemy.exc import DBAPIError

from procaudit.report import DiagnosticSink
from procaudit.schema.catalog import ObjectDefinition
from procaudit.schema.outcome import ValidationOutcome
from procaudit.session import Session, SessionOption


class CompileValidator:
    """Runs the non-committing compile check for one object at a time."""

    def __init__(self, session: Session, sink: DiagnosticSink) -> None:
        self._session = session
        self._sink = sink

    def check(self, definition: ObjectDefinition) -> ValidationOutcome:
        """Compile ``definition`` and report whether the engine accepted it.

        Raises:
            SessionResetError: If a dirty session cannot be reset first.
        """
        obj = definition.object
        session = self._session
        session.ensure_baseline()

        try:
            session.set_option(SessionOption.NOEXEC, True)
            session.set_option(SessionOption.QUOTED_IDENTIFIER, obj.quoted_identifier_on)
            session.set_option(SessionOption.ANSI_NULLS, obj.ansi_nulls_on)
            session.run_batch(definition.text)
            session.set_option(SessionOption.QUOTED_IDENTIFIER, False)
            session.set_option(SessionOption.ANSI_NULLS, True)
            session.set_option(SessionOption.NOEXEC, False)
            session.set_option(SessionOption.PARSEONLY, False)
        except DBAPIError as exc:
            session.mark_dirty()
            line = self._sink.failed(obj, exc)
            return ValidationOutcome(object=obj, compiled=False, diagnostic=line)

        return ValidationOutcome(object=obj, compiled=True)
