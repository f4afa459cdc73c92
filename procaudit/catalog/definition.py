"""Definition fetcher: reconstructs an object's source with ``sp_helptext``."""
from __future__ import annotations

from sqlalchemy.exc import DBAPIError

from procaudit.catalog.queries import DEFINITION_QUERY
from procaudit.report import DiagnosticSink, engine_message
from procaudit.schema.catalog import CatalogObject, ObjectDefinition
from procaudit.session import Session

#: Reported when the call succeeds but yields no text (encrypted objects).
NO_TEXT_MESSAGE = "No definition text returned; the object may be encrypted."


class DefinitionFetcher:
    """Retrieves full definition text for one object at a time.

    ``sp_helptext`` splits long definitions across rows; fragments are joined
    in the order the engine delivers them.
    """

    def __init__(self, session: Session, sink: DiagnosticSink) -> None:
        self._session = session
        self._sink = sink

    def fetch(self, obj: CatalogObject) -> ObjectDefinition:
        """Return the definition of ``obj``; empty text if it cannot be read."""
        try:
            rows = self._session.query(DEFINITION_QUERY, {"objname": obj.qualified_name})
        except DBAPIError as exc:
            self._sink.unreadable(obj, engine_message(exc))
            return ObjectDefinition(object=obj, text="")

        text = "".join(_fragment(row) for row in rows)
        if not text:
            self._sink.unreadable(obj, NO_TEXT_MESSAGE)
        return ObjectDefinition(object=obj, text=text)


def _fragment(row: dict) -> str:
    value = row.get("Text", row.get("text"))
    return "" if value is None else str(value)
