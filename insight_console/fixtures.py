from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.metadata import validate_metadata_tables
from core.models import Insight, Persona, Protocol

logger = logging.getLogger("insight_console.fixtures")

DEFAULT_FIXTURES_PATH = Path(__file__).resolve().parent / "data" / "demo.json"


class FixtureBundle(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    personas: list[Persona] = Field(default_factory=list)
    insights: list[Insight] = Field(default_factory=list)
    protocols: list[Protocol] = Field(default_factory=list)

    def persona_ids(self) -> set[str]:
        return {persona.id for persona in self.personas}


def _duplicate_ids(ids: list[str]) -> list[str]:
    seen: set[str] = set()
    duplicates: list[str] = []
    for item in ids:
        if item in seen and item not in duplicates:
            duplicates.append(item)
        seen.add(item)
    return duplicates


def find_reference_problems(bundle: FixtureBundle) -> list[str]:
    """Describe references that do not resolve. These degrade to "no match" at query time."""
    problems: list[str] = []
    persona_ids = bundle.persona_ids()
    insight_ids = {insight.id for insight in bundle.insights}

    for kind, ids in (
        ("persona", [persona.id for persona in bundle.personas]),
        ("insight", [insight.id for insight in bundle.insights]),
        ("protocol", [protocol.id for protocol in bundle.protocols]),
    ):
        for duplicate in _duplicate_ids(ids):
            problems.append(f"duplicate {kind} id {duplicate}")

    for insight in bundle.insights:
        if persona_ids and insight.persona_id not in persona_ids:
            problems.append(f"insight {insight.id} references unknown persona {insight.persona_id}")

    for protocol in bundle.protocols:
        if persona_ids and protocol.persona_id not in persona_ids:
            problems.append(f"protocol {protocol.id} references unknown persona {protocol.persona_id}")
        action_ids = {action.id for action in protocol.actions}
        state_ids = {state.id for state in protocol.states}
        for index, trigger in enumerate(protocol.triggers):
            for state_id in trigger.if_states:
                if state_id not in state_ids:
                    problems.append(f"protocol {protocol.id} trigger {index} references unknown state {state_id}")
            for action_id in trigger.then_actions:
                if action_id not in action_ids:
                    problems.append(f"protocol {protocol.id} trigger {index} references unknown action {action_id}")
        for action in protocol.actions:
            if action.linked_insight_id and action.linked_insight_id not in insight_ids:
                problems.append(
                    f"protocol {protocol.id} action {action.id} links unknown insight {action.linked_insight_id}"
                )
    return problems


def load_fixtures(path: Path | None = None) -> FixtureBundle:
    source = (path or DEFAULT_FIXTURES_PATH).expanduser().resolve(strict=False)
    validate_metadata_tables()
    try:
        raw = json.loads(source.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValueError(f"fixtures not found at {source}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid fixtures at {source}: {exc}") from exc

    try:
        bundle = FixtureBundle.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"invalid fixtures at {source}: {exc}") from exc

    for problem in find_reference_problems(bundle):
        logger.warning("fixture reference problem: %s", problem, extra={"fixtures_path": str(source)})

    logger.debug(
        "loaded fixtures",
        extra={
            "fixtures_path": str(source),
            "personas": len(bundle.personas),
            "insights": len(bundle.insights),
            "protocols": len(bundle.protocols),
        },
    )
    return bundle
