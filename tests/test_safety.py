"""Unit tests for the safety classifier."""
from __future__ import annotations

from procaudit.check.safety import (
    KeywordSafetyClassifier,
    SideEffectClassifier,
    is_side_effect_free,
)


def test_select_only_is_safe():
    assert is_side_effect_free("CREATE VIEW dbo.v AS SELECT * FROM x")


def test_drop_table_is_unsafe():
    assert not is_side_effect_free("CREATE PROCEDURE dbo.p AS DROP TABLE x")


def test_classification_is_case_insensitive():
    assert not is_side_effect_free("create procedure dbo.p as delete from x")
    assert is_side_effect_free("create view dbo.v as select * from x")


def test_leading_create_is_ignored_after_comments():
    text = "-- header\n/* v2 */\nCREATE PROCEDURE dbo.p AS SELECT 1"
    assert is_side_effect_free(text)


def test_second_create_is_unsafe():
    assert not is_side_effect_free("CREATE PROCEDURE dbo.p AS CREATE TABLE #t (i int)")


def test_exec_is_unsafe():
    assert not is_side_effect_free("CREATE PROCEDURE dbo.p AS EXEC dbo.other")


def test_keyword_inside_identifier_is_conservatively_unsafe():
    assert not is_side_effect_free("CREATE VIEW dbo.v AS SELECT UpdatedAt FROM x")


def test_custom_keywords():
    classifier = KeywordSafetyClassifier(keywords=["merge"])
    assert classifier.is_side_effect_free("CREATE PROCEDURE p AS DELETE FROM x")
    assert not classifier.is_side_effect_free("CREATE PROCEDURE p AS MERGE x USING y ON 1=1")


def test_default_classifier_satisfies_protocol():
    assert isinstance(KeywordSafetyClassifier(), SideEffectClassifier)
