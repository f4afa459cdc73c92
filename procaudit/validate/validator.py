"""Validation orchestrator.

``DatabaseValidator`` is the public entry point.  It wires the catalog and
check components to one :class:`~procaudit.session.Session` and drives a
pass in this order::

    ObjectEnumerator.list_objects()          (version, then object list)
    for each object:
        Session.ensure_baseline()
        DefinitionFetcher.fetch()            -> skip when unreadable
        CompileValidator.check()
        ExecutionProber.probe()              (only if requested and compiled)

Only enumeration and session-reset failures stop the pass.  Every other
problem is recorded against its object and the pass continues.
"""
from __future__ import annotations

import logging

from procaudit.catalog.definition import DefinitionFetcher
from procaudit.catalog.enumerator import ObjectEnumerator
from procaudit.check.compiler import CompileValidator
from procaudit.check.prober import ExecutionProber
from procaudit.check.safety import SideEffectClassifier
from procaudit.report import DiagnosticSink
from procaudit.schema.catalog import CatalogObject
from procaudit.schema.outcome import ValidationReport, ValidationSummary
from procaudit.schema.verbosity import Verbosity
from procaudit.session import Session

logger = logging.getLogger(__name__)


class DatabaseValidator:
    """Validates every procedure, view and function reachable on a session.

    Args:
        session: The single session used for the whole pass.
        verbosity: Reporting level.
        execute: Probe objects that compile and look side-effect free.
        classifier: Optional replacement for the keyword safety scan.
    """

    def __init__(
        self,
        session: Session,
        verbosity: Verbosity = Verbosity.NORMAL,
        execute: bool = False,
        classifier: SideEffectClassifier | None = None,
    ) -> None:
        self._session = session
        self._execute = execute
        self._sink = DiagnosticSink(verbosity)
        self._enumerator = ObjectEnumerator(session, self._sink)
        self._fetcher = DefinitionFetcher(session, self._sink)
        self._compiler = CompileValidator(session, self._sink)
        self._prober = ExecutionProber(session, self._sink, classifier=classifier)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self) -> ValidationReport:
        """Run one pass and return its report.

        Raises:
            EnumerationError: If the catalog cannot be listed.
            SessionResetError: If the session cannot be returned to baseline.
        """
        report = ValidationReport()
        summary = report.summary

        for obj in self._enumerator.list_objects():
            self._validate_object(obj, report, summary)

        report.diagnostics = list(self._sink.lines)
        self._session.ensure_baseline()
        self._sink.info(
            "\nProcessing complete.  "
            f"Objects processed: {summary.objects_processed}\t"
            f"Invalid objects found: {summary.invalid_objects}"
        )
        return report

    def is_valid(self) -> bool:
        """Run one pass; True iff no object was found invalid."""
        return self.run().summary.overall_pass

    # ------------------------------------------------------------------
    # Per-object pipeline
    # ------------------------------------------------------------------

    def _validate_object(
        self, obj: CatalogObject, report: ValidationReport, summary: ValidationSummary
    ) -> None:
        self._sink.info(f"Processing {obj.display_name}")
        self._session.ensure_baseline()
        summary.objects_processed += 1

        definition = self._fetcher.fetch(obj)
        if not definition.readable:
            summary.unreadable_objects += 1
            return

        outcome = self._compiler.check(definition)
        if outcome.compiled and self._execute:
            outcome = self._prober.probe(definition)

        report.outcomes.append(outcome)
        if not outcome.valid:
            summary.invalid_objects += 1
            logger.debug("%s is invalid", obj.display_name)
