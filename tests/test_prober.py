"""Unit tests for probe-call building and ExecutionProber."""
from __future__ import annotations

import uuid

from procaudit.check.prober import ExecutionProber, build_probe_call
from procaudit.schema.catalog import CatalogObject, FormalParameter, ObjectDefinition, ObjectType
from tests.fixtures import fake_session, param_row

SAFE_PROC = "CREATE PROCEDURE dbo.usp_GetOrders @CustomerId int AS SELECT * FROM Orders"
UNSAFE_PROC = "CREATE PROCEDURE dbo.usp_GetOrders AS DELETE FROM Orders"


def _obj(type: ObjectType, name: str = "obj") -> CatalogObject:
    return CatalogObject(schema="dbo", name=name, type=type)


# ---------------------------------------------------------------------------
# build_probe_call
# ---------------------------------------------------------------------------


def test_view_probe_is_bounded_select():
    call = build_probe_call(_obj(ObjectType.VIEW, "vw_Orders"), [])
    assert call.sql == "SELECT TOP 1 * FROM [dbo].[vw_Orders]"
    assert call.params == {}


def test_procedure_without_parameters():
    call = build_probe_call(_obj(ObjectType.PROCEDURE, "usp_Ping"), [])
    assert call.sql == "EXEC [dbo].[usp_Ping]"


def test_procedure_binds_named_parameters_in_order():
    params = [
        FormalParameter("@CustomerId", "int"),
        FormalParameter("@Region", "nvarchar"),
        FormalParameter("@Total", "money", is_output=True),
    ]
    call = build_probe_call(_obj(ObjectType.PROCEDURE, "usp_GetOrders"), params)
    assert call.sql == (
        "EXEC [dbo].[usp_GetOrders] @CustomerId = :p0, @Region = :p1, @Total = :p2 OUTPUT"
    )
    assert call.params == {"p0": 1, "p1": "D", "p2": 1}


def test_null_placeholder_rendered_inline():
    params = [FormalParameter("@Blob", "varbinary"), FormalParameter("@Id", "uniqueidentifier")]
    call = build_probe_call(_obj(ObjectType.PROCEDURE), params)
    assert call.sql == "EXEC [dbo].[obj] @Blob = NULL, @Id = :p1"
    assert isinstance(call.params["p1"], uuid.UUID)


def test_null_output_parameter_still_bound():
    params = [FormalParameter("@Doc", "xml", is_output=True)]
    call = build_probe_call(_obj(ObjectType.PROCEDURE), params)
    assert call.sql == "EXEC [dbo].[obj] @Doc = :p0 OUTPUT"
    assert call.params == {"p0": None}


def test_scalar_function_is_explicit_invocation():
    call = build_probe_call(_obj(ObjectType.FUNCTION, "fn_Total"), [FormalParameter("@Id", "int")])
    assert call.sql == "EXEC [dbo].[fn_Total] @Id = :p0"


def test_table_function_selects_one_row_positionally():
    params = [FormalParameter("@From", "date"), FormalParameter("@Code", "char")]
    call = build_probe_call(_obj(ObjectType.TABLE_FUNCTION, "tvf_Since"), params)
    assert call.sql == "SELECT TOP 1 * FROM [dbo].[tvf_Since](:p0, :p1)"
    assert call.params["p1"] == "D"


def test_declared_default_used_verbatim():
    params = [FormalParameter("@Region", "nvarchar", declared_default="EMEA")]
    call = build_probe_call(_obj(ObjectType.PROCEDURE), params)
    assert call.params == {"p0": "EMEA"}


# ---------------------------------------------------------------------------
# ExecutionProber
# ---------------------------------------------------------------------------


def test_unsafe_definition_is_not_executed(sink, proc):
    session, conn = fake_session()
    outcome = ExecutionProber(session, sink).probe(ObjectDefinition(proc, UNSAFE_PROC))
    assert outcome.compiled and outcome.executed is None
    assert outcome.valid
    assert conn.statements == []


def test_safe_procedure_is_called_with_placeholders(sink, proc):
    session, conn = fake_session(
        parameters={"dbo.usp_GetOrders": [param_row("@CustomerId", "int")]}
    )
    outcome = ExecutionProber(session, sink).probe(ObjectDefinition(proc, SAFE_PROC))
    assert outcome.executed is True
    assert conn.statements[-1] == "EXEC [dbo].[usp_GetOrders] @CustomerId = :p0"
    assert conn.bound[-1] == {"p0": 1}


def test_view_probe_skips_parameter_lookup(sink, view):
    session, conn = fake_session()
    text = "CREATE VIEW dbo.vw_Orders AS SELECT * FROM Orders"
    outcome = ExecutionProber(session, sink).probe(ObjectDefinition(view, text))
    assert outcome.executed is True
    assert conn.statements == ["SELECT TOP 1 * FROM [dbo].[vw_Orders]"]


def test_runtime_error_is_failed_diagnostic(sink, view):
    session, _ = fake_session(failures={"TOP 1": "Invalid object name 'Orders'.\n"})
    text = "CREATE VIEW dbo.vw_Orders AS SELECT * FROM Orders"
    outcome = ExecutionProber(session, sink).probe(ObjectDefinition(view, text))
    assert outcome.executed is False
    assert not outcome.valid
    assert outcome.diagnostic == "dbo\tvw_Orders\tFAILED\tInvalid object name 'Orders'. "


def test_error_in_later_statement_fails_the_object(sink, proc):
    # First statement succeeds; the missing table is only reported on nextset().
    session, conn = fake_session(
        parameters={"dbo.usp_GetOrders": [param_row("@CustomerId", "int")]},
        later_failures={"EXEC [dbo].[usp_GetOrders]": "Invalid object name 'dbo.Missing'."},
    )
    outcome = ExecutionProber(session, sink).probe(ObjectDefinition(proc, SAFE_PROC))
    assert outcome.executed is False
    assert outcome.diagnostic == "dbo\tusp_GetOrders\tFAILED\tInvalid object name 'dbo.Missing'."
    assert conn.cursors[-1].closed


def test_every_result_set_is_consumed(sink, view):
    session, conn = fake_session()
    text = "CREATE VIEW dbo.vw_Orders AS SELECT * FROM Orders"
    ExecutionProber(session, sink).probe(ObjectDefinition(view, text))
    assert conn.nextset_calls == 1
    assert conn.cursors[-1].closed


def test_parameter_lookup_error_counts_as_probe_failure(sink, proc):
    session, _ = fake_session(failures={"sys.all_parameters": "permission denied"})
    outcome = ExecutionProber(session, sink).probe(ObjectDefinition(proc, SAFE_PROC))
    assert outcome.executed is False
    assert "permission denied" in outcome.diagnostic


class _NeverSafe:
    def is_side_effect_free(self, text: str) -> bool:
        return False


def test_classifier_is_replaceable(sink, view):
    session, conn = fake_session()
    prober = ExecutionProber(session, sink, classifier=_NeverSafe())
    outcome = prober.probe(ObjectDefinition(view, "CREATE VIEW v AS SELECT 1"))
    assert outcome.executed is None
    assert conn.statements == []
