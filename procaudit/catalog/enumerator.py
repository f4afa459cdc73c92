"""Object enumerator: version-aware listing of procedures, views and functions."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import DBAPIError

from procaudit.catalog.queries import (
    SCHEMA_SEPARATION_MAJOR_VERSION,
    VERSION_QUERY,
    catalog_query,
)
from procaudit.errors import EnumerationError, VersionDetectionError
from procaudit.report import DiagnosticSink, engine_message
from procaudit.schema.catalog import CatalogObject, ObjectType
from procaudit.session import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServerVersion:
    """Parsed ``SERVERPROPERTY('productversion')``."""

    raw: str
    major: int

    @classmethod
    def parse(cls, raw: object) -> "ServerVersion":
        """Parse ``'15.0.2000.5'`` style strings.

        Raises:
            VersionDetectionError: If no integer major version can be read.
        """
        if raw is None:
            raise VersionDetectionError(raw)
        value = str(raw).strip()
        try:
            major = int(value.split(".", 1)[0])
        except ValueError as exc:
            raise VersionDetectionError(raw) from exc
        return cls(raw=value, major=major)

    @property
    def separates_schemas(self) -> bool:
        return self.major >= SCHEMA_SEPARATION_MAJOR_VERSION

    @property
    def generation(self) -> str:
        if self.separates_schemas:
            return "SQL 2005 or later"
        return "prior to SQL 2005"


class ObjectEnumerator:
    """Lists the user-defined objects to validate.

    Two round trips: one to detect the server version, one to list objects
    with the catalog query appropriate to that version.

    Args:
        session: The pass's session.
        sink: Receives the version line.
    """

    def __init__(self, session: Session, sink: DiagnosticSink) -> None:
        self._session = session
        self._sink = sink

    def detect_version(self) -> ServerVersion:
        """Query and parse the server version.

        Raises:
            EnumerationError: If the query fails or returns nothing parseable.
        """
        try:
            rows = self._session.query(VERSION_QUERY)
        except DBAPIError as exc:
            raise EnumerationError(
                f"Cannot detect server version: {engine_message(exc)}", stage="version"
            ) from exc
        if not rows:
            raise VersionDetectionError(None)
        version = ServerVersion.parse(rows[0].get("ver"))
        self._sink.info(f"Detected SQL Server version {version.generation}")
        return version

    def list_objects(self) -> list[CatalogObject]:
        """Return every validated object in catalog order.

        Raises:
            EnumerationError: On any failure; no partial list is returned.
        """
        version = self.detect_version()
        try:
            rows = self._session.query(catalog_query(version.major))
        except DBAPIError as exc:
            raise EnumerationError(
                f"Cannot list catalog objects: {engine_message(exc)}", stage="objects"
            ) from exc

        objects = [_row_to_object(row) for row in rows]
        logger.debug("enumerated %d objects", len(objects))
        return objects


def _row_to_object(row: dict) -> CatalogObject:
    return CatalogObject(
        schema=row["schema"],
        name=row["name"],
        type=ObjectType.from_code(row["type"]),
        # OBJECTPROPERTY returns NULL when the property does not apply.
        quoted_identifier_on=row.get("quoted_ident_on") == 1,
        ansi_nulls_on=row.get("ansi_nulls_on") == 1,
    )
