"""procaudit data model: catalog records, outcomes, verbosity."""
from procaudit.schema.catalog import (
    CatalogObject,
    FormalParameter,
    ObjectDefinition,
    ObjectType,
    quote_name,
)
from procaudit.schema.outcome import ValidationOutcome, ValidationReport, ValidationSummary
from procaudit.schema.verbosity import Verbosity

__all__ = [
    "CatalogObject",
    "FormalParameter",
    "ObjectDefinition",
    "ObjectType",
    "ValidationOutcome",
    "ValidationReport",
    "ValidationSummary",
    "Verbosity",
    "quote_name",
]
