"""procaudit – compile-check the stored code of a SQL Server database.

Every procedure, view and function is recompiled by the server itself
under ``SET NOEXEC ON``, so nothing is created or changed.  Optionally,
objects whose text looks side-effect free are called once with synthetic
arguments to surface runtime errors such as missing tables.

Public API
----------
``validate_database``
    Run a pass on an open SQLAlchemy connection and return a
    ``ValidationReport``.

``database_is_valid``
    Open a connection from a connection string, run a pass, and return
    ``True`` when no object is invalid.

Example::

    from sqlalchemy import create_engine
    import procaudit

    engine = create_engine("mssql+pyodbc://...", isolation_level="AUTOCOMMIT")
    with engine.connect() as conn:
        report = procaudit.validate_database(conn, execute=True)
    print(report.summary.invalid_objects)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from procaudit.check.safety import KeywordSafetyClassifier, SideEffectClassifier
from procaudit.check.type_registry import TypeRegistry
from procaudit.config import ValidatorSettings
from procaudit.connection import create_validation_engine, open_connection
from procaudit.errors import (
    ConfigError,
    DatabaseConnectionError,
    EnumerationError,
    ProcAuditError,
    SessionResetError,
    VersionDetectionError,
)
from procaudit.schema.catalog import CatalogObject, FormalParameter, ObjectDefinition, ObjectType
from procaudit.schema.outcome import ValidationOutcome, ValidationReport, ValidationSummary
from procaudit.schema.verbosity import Verbosity
from procaudit.session import Session
from procaudit.validate.validator import DatabaseValidator

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

__all__ = [
    # Core pipeline
    "validate_database",
    "database_is_valid",
    "DatabaseValidator",
    "Session",
    # Model
    "CatalogObject",
    "FormalParameter",
    "ObjectDefinition",
    "ObjectType",
    "ValidationOutcome",
    "ValidationReport",
    "ValidationSummary",
    "Verbosity",
    # Extension points
    "SideEffectClassifier",
    "KeywordSafetyClassifier",
    "TypeRegistry",
    # Settings
    "ValidatorSettings",
    # Errors
    "ProcAuditError",
    "ConfigError",
    "DatabaseConnectionError",
    "EnumerationError",
    "VersionDetectionError",
    "SessionResetError",
]


def validate_database(
    connection: Connection,
    verbosity: Verbosity = Verbosity.NORMAL,
    execute: bool = False,
    classifier: SideEffectClassifier | None = None,
) -> ValidationReport:
    """Validate every procedure, view and function on ``connection``.

    The connection is used as a single session for the whole pass.  Use an
    AUTOCOMMIT connection if probe calls should not be left inside an open
    transaction.

    Args:
        connection: An open SQLAlchemy connection to SQL Server.
        verbosity: Reporting level.
        execute: Probe objects that compile and look side-effect free.
        classifier: Optional replacement for the keyword safety scan.

    Returns:
        ``ValidationReport`` with counters, diagnostic lines and outcomes.

    Raises:
        EnumerationError: If the catalog cannot be listed.
        SessionResetError: If session options cannot be restored.
    """
    validator = DatabaseValidator(Session(connection), verbosity, execute, classifier)
    return validator.run()


def database_is_valid(
    connection_string: str,
    verbosity: Verbosity = Verbosity.NORMAL,
    execute: bool = False,
) -> bool:
    """Open ``connection_string``, run one pass, and return the overall result.

    Raises:
        DatabaseConnectionError: If the connection cannot be opened.
        EnumerationError: If the catalog cannot be listed.
    """
    engine = create_validation_engine(connection_string)
    try:
        with open_connection(engine) as conn:
            return validate_database(conn, verbosity, execute).summary.overall_pass
    finally:
        engine.dispose()
