"""Parameter introspector: declared parameters of procedures and functions."""
from __future__ import annotations

from procaudit.catalog.queries import FUNCTION_KINDS, PROCEDURE_KINDS, parameters_query
from procaudit.schema.catalog import CatalogObject, FormalParameter
from procaudit.session import Session

PROCEDURE_PARAMETERS_QUERY = parameters_query(PROCEDURE_KINDS)
FUNCTION_PARAMETERS_QUERY = parameters_query(FUNCTION_KINDS)


class ParameterIntrospector:
    """Reads formal parameters in declaration order.

    Engine errors are left to propagate; the execution prober turns them
    into a per-object failure.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def parameters(self, obj: CatalogObject) -> list[FormalParameter]:
        query = FUNCTION_PARAMETERS_QUERY if obj.type.is_function else PROCEDURE_PARAMETERS_QUERY
        rows = self._session.query(query, {"name": obj.name, "schema": obj.schema})
        return [
            FormalParameter(
                name=row["Name"],
                system_type_name=row["SystemType"] or "",
                is_output=bool(row["IsOutputParameter"]),
                declared_default=row.get("DefaultValue"),
            )
            for row in rows
        ]
