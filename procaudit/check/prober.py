"""Execution prober: one best-effort live call of an object judged safe.

Call shapes by object type::

    procedure               EXEC [dbo].[usp] @a = :p0, @b = :p1 OUTPUT
    scalar function         EXEC [dbo].[fn] @a = :p0
    table-valued function   SELECT TOP 1 * FROM [dbo].[tvf](:p0, :p1)
    view                    SELECT TOP 1 * FROM [dbo].[v]

Input parameters whose placeholder is ``None`` are written as the literal
``NULL`` so the driver never has to guess a type for an untyped null.

There is no transaction and no retry.  Side effects of an object the
classifier wrongly judged safe are not undone.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.exc import DBAPIError

from procaudit.catalog.parameters import ParameterIntrospector
from procaudit.check.safety import KeywordSafetyClassifier, SideEffectClassifier
from procaudit.check.type_registry import TypeRegistry
from procaudit.report import DiagnosticSink
from procaudit.schema.catalog import CatalogObject, FormalParameter, ObjectDefinition, ObjectType
from procaudit.schema.outcome import ValidationOutcome
from procaudit.session import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeCall:
    """A ready-to-run probe statement.

    Attributes:
        sql: Statement text with ``:pN`` bind markers.
        params: Values for the bind markers.
    """

    sql: str
    params: dict[str, Any] = field(default_factory=dict)


def build_probe_call(
    obj: CatalogObject,
    parameters: list[FormalParameter],
    registry: type[TypeRegistry] = TypeRegistry,
) -> ProbeCall:
    """Build the probe statement for ``obj``.

    Args:
        obj: The object to call.
        parameters: Its formal parameters in declaration order (ignored for views).
        registry: Source of placeholder values.

    Returns:
        A :class:`ProbeCall`.
    """
    if obj.type is ObjectType.VIEW:
        return ProbeCall(sql=f"SELECT TOP 1 * FROM {obj.qualified_name}")

    params: dict[str, Any] = {}
    arguments: list[str] = []
    for index, parameter in enumerate(parameters):
        value = registry.value_for(parameter)
        if value is None and not parameter.is_output:
            marker = "NULL"
        else:
            marker = f":p{index}"
            params[f"p{index}"] = value

        if obj.type.returns_table:
            arguments.append(marker)
        else:
            argument = f"{parameter.name} = {marker}"
            if parameter.is_output:
                argument += " OUTPUT"
            arguments.append(argument)

    if obj.type.returns_table:
        return ProbeCall(
            sql=f"SELECT TOP 1 * FROM {obj.qualified_name}({', '.join(arguments)})",
            params=params,
        )
    sql = f"EXEC {obj.qualified_name}"
    if arguments:
        sql += " " + ", ".join(arguments)
    return ProbeCall(sql=sql, params=params)


class ExecutionProber:
    """Classifies a compiled object and, if safe, calls it once.

    Args:
        session: The pass's session.
        sink: Receives ``FAILED`` lines and verbose detail.
        classifier: Decides whether the definition may be executed.
        introspector: Parameter source; defaults to one on ``session``.
        registry: Placeholder source.
    """

    def __init__(
        self,
        session: Session,
        sink: DiagnosticSink,
        classifier: SideEffectClassifier | None = None,
        introspector: ParameterIntrospector | None = None,
        registry: type[TypeRegistry] = TypeRegistry,
    ) -> None:
        self._session = session
        self._sink = sink
        self._classifier = classifier or KeywordSafetyClassifier()
        self._introspector = introspector or ParameterIntrospector(session)
        self._registry = registry

    def probe(self, definition: ObjectDefinition) -> ValidationOutcome:
        """Probe a definition that has already compiled.

        Returns:
            ``executed=None`` when the object is unsafe to run, otherwise
            whether the call succeeded.
        """
        obj = definition.object
        if not self._classifier.is_side_effect_free(definition.text):
            self._sink.detail(f"Skipping execution of {obj.display_name}: may modify data")
            return ValidationOutcome(object=obj, compiled=True)

        self._session.ensure_baseline()
        try:
            parameters = [] if obj.type is ObjectType.VIEW else self._introspector.parameters(obj)
            call = build_probe_call(obj, parameters, self._registry)
            self._sink.detail(f"Executing {call.sql}")
            logger.debug("probe params for %s: %r", obj.display_name, call.params)
            self._session.execute(call.sql, call.params)
        except DBAPIError as exc:
            line = self._sink.failed(obj, exc)
            return ValidationOutcome(object=obj, compiled=True, executed=False, diagnostic=line)

        return ValidationOutcome(object=obj, compiled=True, executed=True)
