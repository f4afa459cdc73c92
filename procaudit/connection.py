"""Engine construction for SQL Server connection strings.

Accepts either a SQLAlchemy URL::

    mssql+pyodbc://user:pw@dsn_name

or a raw ODBC connection string, which is passed through ``odbc_connect``::

    Driver={ODBC Driver 18 for SQL Server};Server=db;Database=app;Trusted_Connection=yes;
"""
from __future__ import annotations

from urllib.parse import quote_plus

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from procaudit.errors import DatabaseConnectionError
from procaudit.report import engine_message


def engine_url(connection_string: str) -> str:
    """Return a SQLAlchemy URL for ``connection_string``."""
    value = connection_string.strip()
    if "://" in value:
        return value
    return "mssql+pyodbc:///?odbc_connect=" + quote_plus(value)


def create_validation_engine(connection_string: str) -> Engine:
    """Create an AUTOCOMMIT engine; nothing the validator runs is transactional."""
    try:
        return create_engine(engine_url(connection_string), isolation_level="AUTOCOMMIT")
    except (SQLAlchemyError, ImportError, ValueError) as exc:
        raise DatabaseConnectionError(f"Cannot create engine: {exc}") from exc


def open_connection(engine: Engine) -> Connection:
    """Open one connection on ``engine``.

    Raises:
        DatabaseConnectionError: If the server cannot be reached.
    """
    try:
        return engine.connect()
    except DBAPIError as exc:
        raise DatabaseConnectionError(
            f"Cannot open connection: {engine_message(exc)}"
        ) from exc
    except SQLAlchemyError as exc:
        raise DatabaseConnectionError(f"Cannot open connection: {exc}") from exc
