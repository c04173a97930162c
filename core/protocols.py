from __future__ import annotations

from collections.abc import Callable, Collection, Iterable, Mapping, Sequence
from typing import Any

from core.models import (
    ActionWithState,
    ConfidenceInterval,
    Protocol,
    ProtocolAction,
    ProtocolCriteria,
    ProtocolSummary,
    SimulatorProjection,
    SimulatorResult,
)
from shared.enums import ProtocolSortField, SortDirection
from shared.numbers import round_half_up, safe_percent

PROJECTION_BASE_CERTAINTY = 0.75
PROJECTION_CERTAINTY_PER_ACTION = 0.02
PROJECTION_TIME_TO_EFFECT = "3-7 days"
PROJECTION_INTERVAL_HALF_WIDTH = 2.0

PERCENT_UNITS = {"efficiency", "%"}
SCORE_UNIT = "score"

ALL_CATEGORIES = "all"
DEFAULT_DIFFICULTY = 1
DEFAULT_EVIDENCE_LEVEL = 0


def max_impact(protocol: Protocol) -> float:
    return sum(action.impact for action in protocol.actions)


def current_impact(protocol: Protocol, active_action_ids: Collection[str]) -> float:
    active = set(active_action_ids)
    return sum(action.impact for action in protocol.actions if action.id in active)


def predicted_outcome(protocol: Protocol, active_action_ids: Collection[str]) -> float:
    return protocol.baseline.value + current_impact(protocol, active_action_ids)


def simulate(protocol: Protocol, active_action_ids: Collection[str]) -> SimulatorResult:
    baseline = protocol.baseline.value
    predicted_value = predicted_outcome(protocol, active_action_ids)
    delta = predicted_value - baseline
    ceiling = max_impact(protocol)
    return SimulatorResult(
        predicted_value=predicted_value,
        delta_from_baseline=delta,
        active_actions_count=len(set(active_action_ids)),
        max_possible_delta=ceiling,
        percent_of_max=safe_percent(delta, ceiling),
    )


def project_outcome(protocol: Protocol, active_action_ids: Collection[str]) -> SimulatorProjection:
    """Simulate plus the display projection shown next to the what-if toggles.

    The certainty and interval are presentation heuristics, not model output:
    certainty grows by a fixed step per engaged action and the interval is a
    fixed band around the predicted value.
    """
    result = simulate(protocol, active_action_ids)
    baseline = protocol.baseline.value
    predicted = result.predicted_value
    return SimulatorProjection(
        **result.model_dump(),
        metric=protocol.outcome,
        baseline=baseline,
        projected=predicted,
        change=result.delta_from_baseline,
        change_percent=safe_percent(result.delta_from_baseline, baseline),
        certainty=PROJECTION_BASE_CERTAINTY + result.active_actions_count * PROJECTION_CERTAINTY_PER_ACTION,
        time_to_effect=PROJECTION_TIME_TO_EFFECT,
        confidence_interval=ConfidenceInterval(
            low=predicted - PROJECTION_INTERVAL_HALF_WIDTH,
            high=predicted + PROJECTION_INTERVAL_HALF_WIDTH,
        ),
    )


def actions_with_state(
    protocol: Protocol,
    toggle_overrides: Mapping[str, bool] | None = None,
) -> list[ActionWithState]:
    overrides = toggle_overrides or {}
    ceiling = max_impact(protocol)
    output: list[ActionWithState] = []
    for action in protocol.actions:
        output.append(
            ActionWithState(
                **action.model_dump(include=set(ProtocolAction.model_fields)),
                is_toggled=bool(overrides.get(action.id, action.is_active)),
                contribution_percent=safe_percent(action.impact, ceiling),
            )
        )
    return output


def active_action_ids(actions: Iterable[ActionWithState]) -> set[str]:
    return {action.id for action in actions if action.is_toggled}


def recommended_actions(protocol: Protocol) -> list[ProtocolAction]:
    active_states = {state.id for state in protocol.states if state.is_active}
    recommended: set[str] = set()
    for trigger in protocol.triggers:
        if all(state_id in active_states for state_id in trigger.if_states):
            recommended.update(trigger.then_actions)
    return [action for action in protocol.actions if action.id in recommended]


def adherence(protocol: Protocol, completed_action_ids: Collection[str]) -> float:
    total = len(protocol.actions)
    if total == 0:
        return 0.0
    completed = set(completed_action_ids)
    done = sum(1 for action in protocol.actions if action.id in completed)
    return (done / total) * 100.0


def sort_actions_by_impact(actions: Sequence[ProtocolAction]) -> list[ProtocolAction]:
    return sorted(actions, key=lambda action: action.impact, reverse=True)


def top_impact_actions(protocol: Protocol, limit: int = 3) -> list[ProtocolAction]:
    if limit <= 0:
        return []
    return sort_actions_by_impact(protocol.actions)[:limit]


def find_action(protocol: Protocol, action_id: str) -> ProtocolAction | None:
    for action in protocol.actions:
        if action.id == action_id:
            return action
    return None


def protocol_summary(protocol: Protocol) -> ProtocolSummary:
    return ProtocolSummary(
        id=protocol.id,
        persona_id=protocol.persona_id,
        name=protocol.name,
        outcome=protocol.outcome,
        action_count=len(protocol.actions),
        active_action_count=sum(1 for action in protocol.actions if action.is_active),
        potential_impact=max_impact(protocol),
    )


def protocols_for_persona(protocols: Sequence[Protocol] | None, persona_id: str) -> list[Protocol]:
    return [protocol for protocol in protocols or [] if protocol.persona_id == persona_id]


def _difficulty(protocol: Protocol) -> int:
    return protocol.difficulty or DEFAULT_DIFFICULTY


def _evidence(protocol: Protocol) -> int:
    return protocol.evidence_level or DEFAULT_EVIDENCE_LEVEL


def filter_protocols(
    protocols: Sequence[Protocol] | None,
    criteria: ProtocolCriteria | None = None,
) -> list[Protocol]:
    """AND-combine the protocol criteria; order is preserved.

    A category of "all" (or empty) imposes no constraint. A protocol without a
    difficulty counts as 1 and one without an evidence level as 0.
    """
    if not protocols:
        return []
    if criteria is None:
        return list(protocols)

    checks: list[Callable[[Protocol], bool]] = []
    if criteria.category and criteria.category != ALL_CATEGORIES:
        category = criteria.category
        checks.append(lambda protocol: protocol.category == category)
    if criteria.status is not None:
        status = criteria.status
        checks.append(lambda protocol: protocol.status == status)
    if criteria.max_difficulty is not None:
        max_difficulty = criteria.max_difficulty
        checks.append(lambda protocol: _difficulty(protocol) <= max_difficulty)
    if criteria.min_evidence is not None:
        min_evidence = criteria.min_evidence
        checks.append(lambda protocol: _evidence(protocol) >= min_evidence)
    if criteria.search_query:
        query = criteria.search_query.lower()
        checks.append(lambda protocol: query in protocol.name.lower() or query in protocol.description.lower())

    return [protocol for protocol in protocols if all(check(protocol) for check in checks)]


_PROTOCOL_SORT_KEYS: dict[ProtocolSortField, Callable[[Protocol], Any]] = {
    ProtocolSortField.DIFFICULTY: _difficulty,
    ProtocolSortField.EVIDENCE: _evidence,
    ProtocolSortField.NAME: lambda protocol: protocol.name.casefold(),
    ProtocolSortField.CATEGORY: lambda protocol: (protocol.category or "").casefold(),
}


def sort_protocols(
    protocols: Sequence[Protocol] | None,
    by: ProtocolSortField | str = ProtocolSortField.DIFFICULTY,
    direction: SortDirection | str = SortDirection.ASC,
) -> list[Protocol]:
    key = _PROTOCOL_SORT_KEYS[ProtocolSortField(by)]
    descending = SortDirection(direction) is SortDirection.DESC
    return sorted(protocols or [], key=key, reverse=descending)


def find_protocol(protocols: Sequence[Protocol] | None, protocol_id: str) -> Protocol | None:
    for protocol in protocols or []:
        if protocol.id == protocol_id:
            return protocol
    return None


def format_outcome_value(value: float, unit: str) -> str:
    if unit in PERCENT_UNITS:
        return f"{round_half_up(value * 100)}%"
    if unit == SCORE_UNIT:
        return f"{round_half_up(value)}"
    return f"{value:.1f} {unit}"


def format_delta(delta: float, unit: str) -> str:
    sign = "+" if delta >= 0 else ""
    if unit in PERCENT_UNITS:
        return f"{sign}{round_half_up(delta * 100)}%"
    if unit == SCORE_UNIT:
        return f"{sign}{round_half_up(delta)}"
    return f"{sign}{delta:.1f} {unit}"
