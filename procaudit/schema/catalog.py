"""Catalog records produced while enumerating and introspecting a database.

These are plain frozen dataclasses rather than pydantic models: they are
built from trusted catalog rows, live for one validation pass, and carry a
``schema`` attribute that would shadow ``BaseModel.schema``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ObjectType(str, Enum):
    """Catalog type code of a validated object (``sysobjects.type``)."""

    PROCEDURE = "P"
    VIEW = "V"
    FUNCTION = "FN"
    INLINE_TABLE_FUNCTION = "IF"
    TABLE_FUNCTION = "TF"

    @classmethod
    def from_code(cls, code: str) -> "ObjectType":
        """Parse a catalog type code.

        The catalog column is ``char(2)``, so single-letter codes arrive
        padded (``'P '``).

        Raises:
            ValueError: If ``code`` is not a validated object type.
        """
        return cls(code.strip().upper())

    @property
    def is_function(self) -> bool:
        return self in _FUNCTION_TYPES

    @property
    def returns_table(self) -> bool:
        """True for table-valued functions, which are selected from, not executed."""
        return self in (ObjectType.INLINE_TABLE_FUNCTION, ObjectType.TABLE_FUNCTION)


_FUNCTION_TYPES = frozenset(
    {ObjectType.FUNCTION, ObjectType.INLINE_TABLE_FUNCTION, ObjectType.TABLE_FUNCTION}
)


def quote_name(part: str) -> str:
    """Bracket-quote one identifier part, doubling any closing bracket."""
    return "[" + part.replace("]", "]]") + "]"


@dataclass(frozen=True)
class CatalogObject:
    """A procedure, view or function listed by the object enumerator.

    Attributes:
        schema: Owning schema (the owner on servers older than SQL 2005).
        name: Object name.
        type: Catalog type of the object.
        quoted_identifier_on: QUOTED_IDENTIFIER setting recorded at create time.
        ansi_nulls_on: ANSI_NULLS setting recorded at create time.
    """

    schema: str
    name: str
    type: ObjectType
    quoted_identifier_on: bool = True
    ansi_nulls_on: bool = True

    @property
    def qualified_name(self) -> str:
        """``[schema].[name]``, safe to splice into T-SQL."""
        return f"{quote_name(self.schema)}.{quote_name(self.name)}"

    @property
    def display_name(self) -> str:
        return f"{self.schema}.{self.name}"


@dataclass(frozen=True)
class ObjectDefinition:
    """Source text of one catalog object.

    Attributes:
        object: The object the text belongs to.
        text: Full definition, or ``""`` when it could not be read.
    """

    object: CatalogObject
    text: str

    @property
    def readable(self) -> bool:
        return bool(self.text)


@dataclass(frozen=True)
class FormalParameter:
    """One declared parameter of a procedure or function.

    Attributes:
        name: Parameter name including the leading ``@``.
        system_type_name: Base system type (``'int'``, ``'nvarchar'``, ...).
        is_output: Whether the parameter is declared ``OUTPUT``.
        declared_default: A real default value, or ``None`` to synthesize one.
    """

    name: str
    system_type_name: str
    is_output: bool = False
    declared_default: Any = None
