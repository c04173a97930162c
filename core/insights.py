from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from core.metadata import category_meta
from core.models import CertaintyCounts, Insight, InsightCriteria, InsightWithDisplay
from shared.enums import InsightCategory, InsightSortField, SortDirection
from shared.numbers import round_half_up

InsightT = TypeVar("InsightT", bound=Insight)

CERTAINTY_BANDS = (
    (0.9, "Very High"),
    (0.8, "High"),
    (0.7, "Moderate"),
    (0.6, "Developing"),
)
LOWEST_BAND_LABEL = "Early"

HIGH_CERTAINTY = 0.8
PERSONALIZED_WEIGHT = 0.5

COUNT_THRESHOLDS = ("0.60", "0.70", "0.75", "0.80", "0.85", "0.90", "0.95")

Predicate = Callable[[Insight], bool]


def certainty_label(certainty: float) -> str:
    for lower_bound, label in CERTAINTY_BANDS:
        if certainty >= lower_bound:
            return label
    return LOWEST_BAND_LABEL


def evidence_label(personal_weight: float) -> str:
    personal_pct = round_half_up(personal_weight * 100)
    return f"{personal_pct}% your data, {100 - personal_pct}% population"


def meets_threshold(insight: Insight, threshold: float) -> bool:
    return insight.certainty >= threshold


def _criteria_predicates(criteria: InsightCriteria) -> list[Predicate]:
    predicates: list[Predicate] = []

    if criteria.persona_id:
        persona_id = criteria.persona_id
        predicates.append(lambda insight: insight.persona_id == persona_id)

    # an explicit empty category list matches nothing
    if criteria.category is not None:
        raw = criteria.category if isinstance(criteria.category, list) else [criteria.category]
        categories = set(raw)
        predicates.append(lambda insight: insight.category in categories)

    if criteria.variable_types:
        variable_types = set(criteria.variable_types)
        predicates.append(lambda insight: insight.variable_type in variable_types)

    if criteria.min_certainty is not None:
        min_certainty = criteria.min_certainty
        predicates.append(lambda insight: insight.certainty >= min_certainty)

    if criteria.max_certainty is not None:
        max_certainty = criteria.max_certainty
        predicates.append(lambda insight: insight.certainty <= max_certainty)

    if criteria.has_holdout_preview is not None:
        wanted = criteria.has_holdout_preview
        predicates.append(lambda insight: (insight.holdout_preview is not None) == wanted)

    if criteria.data_sources:
        sources = set(criteria.data_sources)
        predicates.append(lambda insight: any(source in sources for source in insight.data_sources))

    if criteria.actionable_only:
        predicates.append(lambda insight: insight.actionable)

    if criteria.min_priority is not None:
        min_priority = criteria.min_priority
        predicates.append(lambda insight: (insight.priority or 0) >= min_priority)

    if criteria.search_query:
        query = criteria.search_query.lower()
        predicates.append(lambda insight: any(query in text.lower() for text in _searchable_text(insight)))

    return predicates


def _searchable_text(insight: Insight) -> tuple[str, ...]:
    return (insight.title, insight.headline, insight.recommendation)


def filter_insights(
    insights: Sequence[Insight] | None,
    criteria: InsightCriteria | None = None,
) -> list[Insight]:
    if not insights:
        return []
    if criteria is None:
        return list(insights)
    predicates = _criteria_predicates(criteria)
    return [insight for insight in insights if all(check(insight) for check in predicates)]


def enhance_insight(insight: Insight) -> InsightWithDisplay:
    meta = category_meta(insight.category)
    canonical = {name: getattr(insight, name) for name in Insight.model_fields}
    personal_weight = insight.evidence.personal_weight
    return InsightWithDisplay(
        **canonical,
        category_color=meta.color,
        category_gradient=meta.gradient,
        certainty_label=certainty_label(insight.certainty),
        evidence_label=evidence_label(personal_weight),
        is_high_certainty=insight.certainty >= HIGH_CERTAINTY,
        is_personalized=personal_weight >= PERSONALIZED_WEIGHT,
    )


def _for_persona(insights: Sequence[Insight] | None, persona_id: str) -> list[Insight]:
    if not insights:
        return []
    return [insight for insight in insights if insight.persona_id == persona_id]


def ranked_for_persona(
    insights: Sequence[Insight] | None,
    persona_id: str,
    certainty_threshold: float,
) -> list[InsightWithDisplay]:
    matches = [
        insight for insight in _for_persona(insights, persona_id) if meets_threshold(insight, certainty_threshold)
    ]
    enhanced = [enhance_insight(insight) for insight in matches]
    return sorted(enhanced, key=lambda item: item.certainty, reverse=True)


def average_certainty(insights: Sequence[Insight] | None, persona_id: str) -> float:
    matches = _for_persona(insights, persona_id)
    if not matches:
        return 0.0
    return sum(insight.certainty for insight in matches) / len(matches)


def related_insights(
    insight: Insight,
    insights: Sequence[Insight] | None,
    limit: int = 3,
) -> list[Insight]:
    if not insights or limit <= 0:
        return []
    own_sources = set(insight.data_sources)
    related = [
        candidate
        for candidate in insights
        if candidate.id != insight.id
        and candidate.persona_id == insight.persona_id
        and (
            candidate.category == insight.category
            or any(source in own_sources for source in candidate.data_sources)
        )
    ]
    return related[:limit]


def counts_by_certainty_band(insights: Sequence[Insight] | None, persona_id: str) -> CertaintyCounts:
    matches = _for_persona(insights, persona_id)
    by_threshold = {
        key: sum(1 for insight in matches if insight.certainty >= float(key)) for key in COUNT_THRESHOLDS
    }
    return CertaintyCounts(total=len(matches), by_threshold=by_threshold)


def group_by_category(insights: Sequence[Insight] | None) -> dict[InsightCategory, list[Insight]]:
    grouped: dict[InsightCategory, list[Insight]] = {category: [] for category in InsightCategory}
    for insight in insights or []:
        grouped[insight.category].append(insight)
    return grouped


_INSIGHT_SORT_KEYS: dict[InsightSortField, Callable[[Insight], Any]] = {
    InsightSortField.CERTAINTY: lambda insight: insight.certainty,
    InsightSortField.PRIORITY: lambda insight: insight.priority or 0,
    InsightSortField.CATEGORY: lambda insight: insight.category.value,
}


def sort_insights(
    insights: Sequence[InsightT] | None,
    by: InsightSortField | str = InsightSortField.CERTAINTY,
    direction: SortDirection | str = SortDirection.DESC,
) -> list[InsightT]:
    """Stable sort by one field. Ties keep their input order in either direction.

    A missing priority sorts as 0.
    """
    key = _INSIGHT_SORT_KEYS[InsightSortField(by)]
    descending = SortDirection(direction) is SortDirection.DESC
    return sorted(insights or [], key=key, reverse=descending)


def top_insights(insights: Sequence[Insight] | None, persona_id: str, limit: int = 3) -> list[Insight]:
    if limit <= 0:
        return []
    ordered = sorted(_for_persona(insights, persona_id), key=lambda item: item.certainty, reverse=True)
    return ordered[:limit]


def find_insight(insights: Sequence[Insight] | None, insight_id: str) -> Insight | None:
    for insight in insights or []:
        if insight.id == insight_id:
            return insight
    return None
