"""Type registry: synthetic placeholder values for probe parameters.

The mapping is a closed table over SQL Server base type names.  Anything
not listed, and every binary-ish type, maps to ``None`` (SQL ``NULL``).
"""
from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Any, ClassVar

from procaudit.schema.catalog import FormalParameter

TEXT_PLACEHOLDER = "D"
NUMERIC_PLACEHOLDER = 1

_TEXT_TYPES = ("char", "varchar", "nchar", "nvarchar", "text", "ntext", "sysname")
_NUMERIC_TYPES = (
    "bit", "tinyint", "smallint", "int", "bigint",
    "decimal", "numeric", "money", "smallmoney",
    "float", "real", "sql_variant",
)
_TEMPORAL_TYPES = (
    "datetime", "smalldatetime", "timestamp",
    "date", "time", "datetime2", "datetimeoffset",
)
_NULL_TYPES = ("binary", "varbinary", "image", "xml")


def _text() -> str:
    return TEXT_PLACEHOLDER


def _numeric() -> int:
    return NUMERIC_PLACEHOLDER


def _null() -> None:
    return None


class TypeRegistry:
    """Maps base type names to placeholder factories.

    Factories are called per lookup, so temporal types get the current
    instant and ``uniqueidentifier`` gets a fresh UUID every time.

    Example::

        TypeRegistry.placeholder_for("nvarchar")          # "D"
        TypeRegistry.value_for(FormalParameter("@id", "int"))  # 1
    """

    _factories: ClassVar[dict[str, Callable[[], Any]]] = {
        **{name: _text for name in _TEXT_TYPES},
        **{name: _numeric for name in _NUMERIC_TYPES},
        **{name: datetime.now for name in _TEMPORAL_TYPES},
        "uniqueidentifier": uuid.uuid4,
        **{name: _null for name in _NULL_TYPES},
    }

    @classmethod
    def placeholder_for(cls, type_name: str) -> Any:
        """Return a synthetic value for ``type_name``; ``None`` if unknown."""
        factory = cls._factories.get(type_name.strip().lower(), _null)
        return factory()

    @classmethod
    def value_for(cls, parameter: FormalParameter) -> Any:
        """Return the value to bind for ``parameter``.

        A declared default is used verbatim; otherwise a placeholder is
        synthesized from the parameter's base type.
        """
        if parameter.declared_default is not None:
            return parameter.declared_default
        return cls.placeholder_for(parameter.system_type_name)

    @classmethod
    def known_types(cls) -> list[str]:
        """Return the sorted list of type names with an explicit mapping."""
        return sorted(cls._factories)
