from __future__ import annotations

from core.insights import filter_insights
from core.models import InsightCriteria
from shared.enums import InsightCategory, VariableType


def _ids(insights) -> list[str]:
    return [insight.id for insight in insights]


def test_no_criteria_returns_copy_in_order(sample_insights) -> None:
    result = filter_insights(sample_insights)
    assert _ids(result) == _ids(sample_insights)
    assert result is not sample_insights


def test_empty_or_missing_collection_yields_empty() -> None:
    assert filter_insights(None, InsightCriteria(persona_id="marcus")) == []
    assert filter_insights([], InsightCriteria(min_certainty=0.5)) == []


def test_persona_filter(sample_insights) -> None:
    result = filter_insights(sample_insights, InsightCriteria(persona_id="emma"))
    assert _ids(result) == ["e-1", "e-2"]


def test_category_accepts_single_value_and_list(sample_insights) -> None:
    single = filter_insights(sample_insights, InsightCriteria(category=InsightCategory.SLEEP))
    many = filter_insights(sample_insights, InsightCriteria(category=["sleep", "cardio"]))
    assert _ids(single) == ["m-3", "m-5", "e-1"]
    assert _ids(many) == ["m-3", "m-4", "m-5", "e-1"]


def test_certainty_bounds_are_inclusive(sample_insights) -> None:
    result = filter_insights(sample_insights, InsightCriteria(min_certainty=0.81, max_certainty=0.87))
    assert _ids(result) == ["m-2", "m-3", "m-5"]


def test_holdout_presence_matches_both_ways(sample_insights) -> None:
    with_preview = filter_insights(sample_insights, InsightCriteria(has_holdout_preview=True))
    without_preview = filter_insights(sample_insights, InsightCriteria(has_holdout_preview=False))
    assert _ids(with_preview) == ["m-1", "m-3"]
    assert len(with_preview) + len(without_preview) == len(sample_insights)


def test_data_sources_need_one_shared_source(sample_insights) -> None:
    result = filter_insights(sample_insights, InsightCriteria(data_sources=["whoop", "fitbit"]))
    assert _ids(result) == ["m-1", "m-4", "e-2"]


def test_empty_category_list_matches_nothing(sample_insights) -> None:
    assert filter_insights(sample_insights, InsightCriteria(category=[])) == []


def test_empty_source_and_type_lists_impose_no_constraint(sample_insights) -> None:
    result = filter_insights(sample_insights, InsightCriteria(data_sources=[], variable_types=[]))
    assert _ids(result) == _ids(sample_insights)


def test_actionable_only(make_insight) -> None:
    insights = [make_insight("a", actionable=True), make_insight("b"), make_insight("c", actionable=True)]
    assert _ids(filter_insights(insights, InsightCriteria(actionable_only=True))) == ["a", "c"]
    assert _ids(filter_insights(insights, InsightCriteria(actionable_only=False))) == ["a", "b", "c"]


def test_min_priority_treats_missing_as_zero(make_insight) -> None:
    insights = [make_insight("a", priority=2), make_insight("b"), make_insight("c", priority=1)]
    assert _ids(filter_insights(insights, InsightCriteria(min_priority=1))) == ["a", "c"]
    assert _ids(filter_insights(insights, InsightCriteria(min_priority=0))) == ["a", "b", "c"]


def test_search_is_case_insensitive_over_text_fields(make_insight) -> None:
    insights = [
        make_insight("a", title="CAFFEINE -> DEEP SLEEP"),
        make_insight("b", headline="Alcohol elevates hsCRP"),
        make_insight("c", recommendation="Keep the bedroom at 17C"),
    ]
    assert _ids(filter_insights(insights, InsightCriteria(search_query="caffeine"))) == ["a"]
    assert _ids(filter_insights(insights, InsightCriteria(search_query="HSCRP"))) == ["b"]
    assert _ids(filter_insights(insights, InsightCriteria(search_query="bedroom"))) == ["c"]
    assert _ids(filter_insights(insights, InsightCriteria(search_query=""))) == ["a", "b", "c"]


def test_variable_type_filter(make_insight) -> None:
    insights = [
        make_insight("a", variable_type=VariableType.OUTCOME),
        make_insight("b", variable_type=VariableType.MARKER),
        make_insight("c", variable_type=VariableType.LOAD),
    ]
    result = filter_insights(insights, InsightCriteria(variable_types=[VariableType.MARKER, VariableType.LOAD]))
    assert _ids(result) == ["b", "c"]


def test_criteria_combine_with_and(sample_insights) -> None:
    criteria = InsightCriteria(persona_id="marcus", category="sleep", min_certainty=0.82, data_sources=["oura"])
    assert _ids(filter_insights(sample_insights, criteria)) == ["m-3"]


def test_unmatched_criteria_are_not_errors(sample_insights) -> None:
    assert filter_insights(sample_insights, InsightCriteria(persona_id="nobody")) == []
    assert filter_insights(sample_insights, InsightCriteria(data_sources=["garmin"])) == []
