from __future__ import annotations

from typing import Any

import pytest

from core.models import Evidence, HoldoutPreview, Insight, Protocol
from insight_console.fixtures import FixtureBundle, load_fixtures
from shared.enums import InsightCategory


def build_insight(
    insight_id: str,
    *,
    persona_id: str = "marcus",
    category: InsightCategory | str = InsightCategory.SLEEP,
    certainty: float = 0.8,
    personal_weight: float = 0.6,
    data_sources: list[str] | None = None,
    holdout: bool = False,
    **extra: Any,
) -> Insight:
    return Insight(
        id=insight_id,
        persona_id=persona_id,
        category=InsightCategory(category),
        certainty=certainty,
        evidence=Evidence(personal_weight=personal_weight),
        data_sources=list(data_sources or []),
        holdout_preview=(
            HoldoutPreview(metric="hrv", expected_change=5, unit="ms", horizon="7 days") if holdout else None
        ),
        **extra,
    )


def build_protocol(
    actions: list[dict[str, Any]],
    *,
    baseline: float = 60,
    states: list[dict[str, Any]] | None = None,
    triggers: list[dict[str, Any]] | None = None,
    protocol_id: str = "protocol-1",
    persona_id: str = "marcus",
    **extra: Any,
) -> Protocol:
    return Protocol.model_validate(
        {
            "id": protocol_id,
            "persona_id": persona_id,
            "name": "Test Protocol",
            "outcome": "hrv",
            "baseline": {"value": baseline, "unit": "ms"},
            "actions": [{"category": "recovery", "label": item["id"], **item} for item in actions],
            "states": states or [],
            "triggers": triggers or [],
            **extra,
        }
    )


@pytest.fixture()
def make_insight():
    return build_insight


@pytest.fixture()
def make_protocol():
    return build_protocol


@pytest.fixture()
def sample_insights() -> list[Insight]:
    return [
        build_insight("m-1", category="recovery", certainty=0.91, data_sources=["whoop", "oura"], holdout=True),
        build_insight("m-2", category="recovery", certainty=0.87, data_sources=["oura", "apple-watch"]),
        build_insight("m-3", category="sleep", certainty=0.83, data_sources=["oura"], holdout=True),
        build_insight("m-4", category="cardio", certainty=0.74, data_sources=["whoop"]),
        build_insight("m-5", category="sleep", certainty=0.81, data_sources=["eight-sleep"]),
        build_insight("e-1", persona_id="emma", category="sleep", certainty=0.62, data_sources=["apple-watch"]),
        build_insight("e-2", persona_id="emma", category="activity", certainty=0.55, data_sources=["fitbit"]),
    ]


@pytest.fixture()
def end_to_end_protocol() -> Protocol:
    return build_protocol(
        [
            {"id": "a1", "impact": 8},
            {"id": "a2", "impact": -3},
            {"id": "a3", "impact": 5},
        ],
        baseline=60,
    )


@pytest.fixture()
def trigger_protocol() -> Protocol:
    return build_protocol(
        [{"id": "a1", "impact": 5}, {"id": "a2", "impact": -2}],
        states=[{"id": "s1", "is_active": True}, {"id": "s2", "is_active": False}],
        triggers=[{"if": ["s1"], "then": ["a1"]}, {"if": ["s1", "s2"], "then": ["a2"]}],
    )


@pytest.fixture()
def demo_bundle() -> FixtureBundle:
    return load_fixtures()
