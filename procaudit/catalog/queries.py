"""Catalog SQL for SQL Server.

All query text is either a module constant or built by a pure function, so
there is no lazily cached state.
"""
from __future__ import annotations

from collections.abc import Iterable

#: Server version, e.g. ``'15.0.2000.5'``.  SERVERPROPERTY returns sql_variant,
#: which pyodbc cannot fetch, hence the cast.
VERSION_QUERY = "SELECT CAST(SERVERPROPERTY('productversion') AS nvarchar(128)) AS ver"

#: First major version with schemas separated from owners (SQL Server 2005).
SCHEMA_SEPARATION_MAJOR_VERSION = 9

#: Catalog type codes of validated objects.
VALIDATED_TYPE_CODES: tuple[str, ...] = ("P", "V", "FN", "IF", "TF")

_OBJECTS_QUERY = (
    "SELECT name, "
    "OBJECTPROPERTY(id, 'ExecIsQuotedIdentOn') AS quoted_ident_on, "
    "OBJECTPROPERTY(id, 'ExecIsAnsiNullsOn') AS ansi_nulls_on, "
    "{schema_expr} AS [schema], "
    "[type] "
    "FROM sysobjects o "
    "WHERE type IN ({types}) AND category = 0"
)

#: Schema is resolved from the object id (SQL Server 2005 and later).
SCHEMA_BASED_OBJECTS_QUERY = _OBJECTS_QUERY.format(
    schema_expr="object_schema_name(o.id)",
    types=", ".join(f"'{code}'" for code in VALIDATED_TYPE_CODES),
)

#: The owner stands in for the schema before SQL Server 2005.
OWNER_BASED_OBJECTS_QUERY = _OBJECTS_QUERY.format(
    schema_expr="user_name(o.uid)",
    types=", ".join(f"'{code}'" for code in VALIDATED_TYPE_CODES),
)

DEFINITION_QUERY = "EXEC sp_helptext @objname = :objname"

#: Kinds whose parameters the introspector reads for procedures.
PROCEDURE_KINDS: tuple[str, ...] = ("P", "RF", "PC")

#: Kinds whose parameters the introspector reads for functions.
FUNCTION_KINDS: tuple[str, ...] = ("FN", "IF", "TF")

_PARAMETERS_QUERY = (
    "SELECT "
    "param.name AS [Name], "
    "ISNULL(baset.name, N'') AS [SystemType], "
    "null AS [DefaultValue], "
    "param.is_output AS [IsOutputParameter] "
    "FROM sys.all_objects AS sp "
    "INNER JOIN sys.all_parameters AS param ON param.object_id = sp.object_id "
    "LEFT OUTER JOIN sys.types AS baset "
    "ON baset.user_type_id = param.system_type_id "
    "AND baset.user_type_id = baset.system_type_id "
    "WHERE sp.type IN ({kinds}) "
    "AND param.parameter_id > 0 "
    "AND sp.name = :name AND SCHEMA_NAME(sp.schema_id) = :schema "
    "ORDER BY param.parameter_id ASC"
)


def catalog_query(major_version: int) -> str:
    """Return the object-list query suited to ``major_version``."""
    if major_version < SCHEMA_SEPARATION_MAJOR_VERSION:
        return OWNER_BASED_OBJECTS_QUERY
    return SCHEMA_BASED_OBJECTS_QUERY


def parameters_query(kinds: Iterable[str]) -> str:
    """Return the parameter query for objects of the given catalog kinds.

    ``parameter_id`` 0 is a scalar function's return value, not a parameter.
    Rows are ordered by declaration; callers bind in this order.
    """
    rendered = ", ".join(f"N'{kind}'" for kind in kinds)
    return _PARAMETERS_QUERY.format(kinds=rendered)
