"""Test fixtures: a scripted stand-in for a SQL Server connection.

``FakeConnection`` implements the SQLAlchemy ``Connection`` surface the
validator uses (``execute``, ``exec_driver_sql``, ``dialect`` and the raw
DBAPI ``connection``), records every statement, and answers catalog queries
from canned rows.  Failures are raised in the pyodbc shape.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from types import SimpleNamespace
from typing import Any

from sqlalchemy.dialects.mssql.base import MSDialect
from sqlalchemy.exc import ProgrammingError

from procaudit.catalog.queries import DEFINITION_QUERY, VERSION_QUERY
from procaudit.session import Session

_FIXTURES_DIR = Path(__file__).parent


def load_ddl() -> str:
    """Return the sample T-SQL objects used by the integration tests."""
    return (_FIXTURES_DIR / "ddl_mssql.sql").read_text()


class DriverError(Exception):
    """Shaped like ``pyodbc.Error``: ``args == (sqlstate, message)``."""


def driver_text(message: str, sqlstate: str = "42000", native: int = 50000) -> str:
    """Decorate ``message`` the way the ODBC driver does."""
    return (
        f"[{sqlstate}] [Microsoft][ODBC Driver 18 for SQL Server][SQL Server]"
        f"{message} ({native}) (SQLExecDirectW)"
    )


def driver_error(message: str, sqlstate: str = "42000") -> DriverError:
    """Build the exception pyodbc raises for an engine error."""
    return DriverError(sqlstate, driver_text(message, sqlstate))


def engine_error(message: str, sqlstate: str = "42000") -> ProgrammingError:
    """Build the SQLAlchemy error a pyodbc failure would surface as."""
    return ProgrammingError("<statement>", {}, driver_error(message, sqlstate))


def catalog_row(
    name: str,
    type: str = "P ",
    schema: str = "dbo",
    quoted_ident_on: int | None = 1,
    ansi_nulls_on: int | None = 1,
) -> dict[str, Any]:
    return {
        "name": name,
        "quoted_ident_on": quoted_ident_on,
        "ansi_nulls_on": ansi_nulls_on,
        "schema": schema,
        "type": type,
    }


def param_row(name: str, system_type: str, is_output: bool = False) -> dict[str, Any]:
    return {
        "Name": name,
        "SystemType": system_type,
        "DefaultValue": None,
        "IsOutputParameter": is_output,
    }


class FakeResult:
    def __init__(self, rows: Iterable[dict[str, Any]] = ()) -> None:
        self._rows = [dict(r) for r in rows]
        self.closed = False

    def mappings(self):
        return iter(self._rows)

    def close(self) -> None:
        self.closed = True


class FakeCursor:
    """DBAPI cursor over a :class:`FakeConnection`.

    A statement matching one of the connection's ``later_failures`` succeeds
    on ``execute`` and raises from ``nextset()``, the way pyodbc surfaces an
    error from the second statement of a batch.
    """

    def __init__(self, conn: FakeConnection) -> None:
        self._conn = conn
        self._pending: DriverError | None = None
        self.closed = False

    def execute(self, statement: str, args: Any = ()) -> None:
        self._conn._answer(statement, dict(args) if isinstance(args, dict) else {})
        for marker, message in self._conn.later_failures.items():
            if marker in statement:
                self._pending = driver_error(message)

    def nextset(self) -> bool:
        self._conn.nextset_calls += 1
        if self._pending is not None:
            pending, self._pending = self._pending, None
            raise pending
        return False

    def close(self) -> None:
        self.closed = True


class _FakeDBAPIConnection:
    def __init__(self, conn: FakeConnection) -> None:
        self._conn = conn

    def cursor(self) -> FakeCursor:
        cursor = FakeCursor(self._conn)
        self._conn.cursors.append(cursor)
        return cursor


def _fake_dialect() -> MSDialect:
    dialect = MSDialect(paramstyle="named")
    dialect.dbapi = SimpleNamespace(Error=DriverError, paramstyle="named")
    return dialect


class FakeConnection:
    """Answers the validator's catalog queries from canned data.

    Args:
        version: ``productversion`` to report; ``None`` returns no row.
        objects: Rows for the object-list query.
        definitions: ``[schema].[name]`` -> list of text fragments.  Objects
            missing here make ``sp_helptext`` fail.
        parameters: ``schema.name`` -> parameter rows.
        failures: Substring -> engine message.  Any statement containing the
            substring raises.
        later_failures: Substring -> engine message raised only once the
            cursor advances past the first result (raw cursor path only).
    """

    def __init__(
        self,
        version: str | None = "15.0.2000.5",
        objects: Iterable[dict[str, Any]] = (),
        definitions: dict[str, list[str]] | None = None,
        parameters: dict[str, list[dict[str, Any]]] | None = None,
        failures: dict[str, str] | None = None,
        later_failures: dict[str, str] | None = None,
    ) -> None:
        self.version = version
        self.objects = [dict(o) for o in objects]
        self.definitions = definitions or {}
        self.parameters = parameters or {}
        self.failures = failures or {}
        self.later_failures = later_failures or {}
        self.dialect = _fake_dialect()
        self.connection = _FakeDBAPIConnection(self)
        #: Every statement, in order.
        self.statements: list[str] = []
        #: Bound parameters of every statement, aligned with ``statements``.
        self.bound: list[dict[str, Any]] = []
        #: Raw cursors handed out, in order.
        self.cursors: list[FakeCursor] = []
        self.nextset_calls = 0

    # SQLAlchemy Connection surface ----------------------------------------

    def execute(self, clause, parameters=None) -> FakeResult:
        sql, params = str(clause), dict(parameters or {})
        try:
            return self._answer(sql, params)
        except DriverError as exc:
            raise ProgrammingError(sql, params, exc) from exc

    def exec_driver_sql(self, statement, parameters=None) -> FakeResult:
        params = dict(parameters or {})
        try:
            return self._answer(statement, params)
        except DriverError as exc:
            raise ProgrammingError(statement, params, exc) from exc

    # Helpers -----------------------------------------------------------------

    def statements_matching(self, fragment: str) -> list[str]:
        return [s for s in self.statements if fragment in s]

    def set_statements(self) -> list[str]:
        return [s for s in self.statements if s.startswith("SET ")]

    def _answer(self, sql: str, params: dict[str, Any]) -> FakeResult:
        self.statements.append(sql)
        self.bound.append(params)
        for marker, message in self.failures.items():
            if marker in sql:
                raise driver_error(message)

        if sql == VERSION_QUERY:
            return FakeResult([{"ver": self.version}] if self.version is not None else [])
        if "FROM sysobjects" in sql:
            return FakeResult(self.objects)
        if sql == DEFINITION_QUERY:
            name = params["objname"]
            if name not in self.definitions:
                raise driver_error(
                    f"The object '{name}' does not exist in database 'app'\r\n"
                    "or is invalid for this operation."
                )
            return FakeResult({"Text": fragment} for fragment in self.definitions[name])
        if "sys.all_parameters" in sql:
            key = f"{params['schema']}.{params['name']}"
            return FakeResult(self.parameters.get(key, []))
        return FakeResult()


def fake_session(**kwargs: Any) -> tuple[Session, FakeConnection]:
    """Return a :class:`Session` over a new :class:`FakeConnection`."""
    conn = FakeConnection(**kwargs)
    return Session(conn), conn  # type: ignore[arg-type]
