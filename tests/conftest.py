"""Shared pytest fixtures for procaudit unit and integration tests."""
from __future__ import annotations

import pytest

from procaudit.report import DiagnosticSink
from procaudit.schema.catalog import CatalogObject, ObjectType
from procaudit.schema.verbosity import Verbosity


@pytest.fixture()
def sink() -> DiagnosticSink:
    """A sink that emits everything."""
    return DiagnosticSink(Verbosity.VERBOSE)


@pytest.fixture()
def proc() -> CatalogObject:
    return CatalogObject(schema="dbo", name="usp_GetOrders", type=ObjectType.PROCEDURE)


@pytest.fixture()
def view() -> CatalogObject:
    return CatalogObject(schema="dbo", name="vw_Orders", type=ObjectType.VIEW)
