from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

from core.insights import (
    average_certainty,
    counts_by_certainty_band,
    filter_insights,
    find_insight,
    ranked_for_persona,
    related_insights,
    sort_insights,
)
from core.models import InsightCriteria, ProtocolCriteria
from core.protocols import (
    adherence,
    filter_protocols,
    find_protocol,
    format_delta,
    format_outcome_value,
    project_outcome,
    protocol_summary,
    protocols_for_persona,
    recommended_actions,
    sort_protocols,
    top_impact_actions,
)
from insight_console.config import DEFAULT_CONFIG_PATH, ConsoleConfig, ensure_config_file, load_config
from insight_console.fixtures import FixtureBundle, load_fixtures
from insight_console.logging import configure_logging
from insight_console.state import ViewState
from shared.enums import InsightSortField, ProtocolSortField, ProtocolStatus, SortDirection
from shared.serialization import canonical_json_text

logger = logging.getLogger("insight_console")


def _apply_cli_overrides(config: ConsoleConfig, args: argparse.Namespace) -> ConsoleConfig:
    updates: dict[str, Any] = {}
    if getattr(args, "persona", None) is not None:
        updates["persona_id"] = str(args.persona)
    if getattr(args, "threshold", None) is not None:
        updates["certainty_threshold"] = int(args.threshold)
    if getattr(args, "fixtures", None) is not None:
        updates["fixtures_path"] = str(args.fixtures)
    if not updates:
        return config
    merged = config.model_dump()
    merged.update(updates)
    return ConsoleConfig.model_validate(merged)


def _load(args: argparse.Namespace) -> tuple[ConsoleConfig, FixtureBundle, ViewState]:
    config_path = Path(args.config).expanduser() if getattr(args, "config", None) else None
    config = _apply_cli_overrides(load_config(config_path), args)
    fixtures_path = Path(config.fixtures_path) if config.fixtures_path else None
    bundle = load_fixtures(fixtures_path)
    state = ViewState(persona_id=config.persona_id, certainty_threshold=config.certainty_threshold)
    return config, bundle, state


def _emit(payload: Any) -> None:
    print(canonical_json_text(payload))


def cmd_init(args: argparse.Namespace) -> int:
    path = ensure_config_file(Path(args.config).expanduser() if args.config else DEFAULT_CONFIG_PATH)
    logger.info("initialized config at %s", path)
    return 0


def cmd_insights(args: argparse.Namespace) -> int:
    _, bundle, state = _load(args)
    criteria = InsightCriteria(
        category=args.category or None,
        data_sources=args.source or None,
        actionable_only=args.actionable,
        min_priority=args.min_priority,
        search_query=args.search,
    )
    candidates = filter_insights(bundle.insights, criteria)
    ranked = ranked_for_persona(candidates, state.persona_id, state.threshold_fraction)
    if args.sort:
        ranked = sort_insights(ranked, args.sort, args.direction)
    logger.debug("ranked insights", extra={"persona_id": state.persona_id, "matched": len(ranked)})
    _emit(
        {
            "persona_id": state.persona_id,
            "certainty_threshold": state.threshold_fraction,
            "average_certainty": average_certainty(bundle.insights, state.persona_id),
            "insights": ranked,
        }
    )
    return 0


def cmd_counts(args: argparse.Namespace) -> int:
    _, bundle, state = _load(args)
    _emit(counts_by_certainty_band(bundle.insights, state.persona_id))
    return 0


def cmd_related(args: argparse.Namespace) -> int:
    config, bundle, _ = _load(args)
    insight = find_insight(bundle.insights, args.insight_id)
    if insight is None:
        logger.error("unknown insight %s", args.insight_id)
        return 1
    _emit({"insight_id": insight.id, "related": related_insights(insight, bundle.insights, config.related_limit)})
    return 0


def cmd_protocols(args: argparse.Namespace) -> int:
    config, bundle, state = _load(args)
    criteria = ProtocolCriteria(
        category=args.category,
        status=args.status,
        max_difficulty=args.max_difficulty,
        min_evidence=args.min_evidence,
        search_query=args.search,
    )
    protocols = filter_protocols(protocols_for_persona(bundle.protocols, state.persona_id), criteria)
    if args.sort:
        protocols = sort_protocols(protocols, args.sort, args.direction)
    output = []
    for protocol in protocols:
        output.append(
            {
                "summary": protocol_summary(protocol),
                "top_actions": top_impact_actions(protocol, config.top_actions_limit),
            }
        )
    _emit({"persona_id": state.persona_id, "protocols": output})
    return 0


def cmd_simulate(args: argparse.Namespace) -> int:
    _, bundle, state = _load(args)
    protocol = find_protocol(bundle.protocols, args.protocol_id)
    if protocol is None:
        logger.error("unknown protocol %s", args.protocol_id)
        return 1
    for action_id in args.on or []:
        state.set_action(action_id, True)
    for action_id in args.off or []:
        state.set_action(action_id, False)

    active = state.active_actions(protocol)
    projection = project_outcome(protocol, active)
    unit = protocol.baseline.unit
    logger.debug("simulated protocol", extra={"protocol_id": protocol.id, "active_actions": sorted(active)})
    _emit(
        {
            "protocol_id": protocol.id,
            "actions": state.actions(protocol),
            "projection": projection,
            "display": {
                "baseline": format_outcome_value(projection.baseline, unit),
                "predicted": format_outcome_value(projection.predicted_value, unit),
                "delta": format_delta(projection.delta_from_baseline, unit),
            },
        }
    )
    return 0


def cmd_recommend(args: argparse.Namespace) -> int:
    _, bundle, _ = _load(args)
    protocol = find_protocol(bundle.protocols, args.protocol_id)
    if protocol is None:
        logger.error("unknown protocol %s", args.protocol_id)
        return 1
    _emit(
        {
            "protocol_id": protocol.id,
            "active_states": [state.id for state in protocol.states if state.is_active],
            "recommended": recommended_actions(protocol),
            "adherence": adherence(protocol, set(args.completed or [])),
        }
    )
    return 0


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", type=str, default=None, help="path to config.toml")
    parser.add_argument("--fixtures", type=str, default=None, help="path to a fixtures JSON file")
    parser.add_argument("--persona", type=str, default=None, help="persona id override")
    parser.add_argument("--threshold", type=int, default=None, help="certainty threshold, 0-100")
    parser.add_argument("--verbose", action="store_true")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="insight-console")
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="write a default config file")
    init_parser.add_argument("--config", type=str, default=None, help="path to config.toml")
    init_parser.add_argument("--verbose", action="store_true")
    init_parser.set_defaults(func=cmd_init)

    insights_parser = subparsers.add_parser("insights", help="ranked insights for the selected persona")
    _add_common(insights_parser)
    insights_parser.add_argument("--category", action="append", default=None, help="restrict to a category")
    insights_parser.add_argument("--source", action="append", default=None, help="restrict to a data source")
    insights_parser.add_argument("--actionable", action="store_true", help="only actionable insights")
    insights_parser.add_argument("--min-priority", type=int, default=None)
    insights_parser.add_argument("--search", type=str, default=None, help="case-insensitive text match")
    insights_parser.add_argument("--sort", choices=[field.value for field in InsightSortField], default=None)
    insights_parser.add_argument("--direction", choices=[item.value for item in SortDirection], default="desc")
    insights_parser.set_defaults(func=cmd_insights)

    counts_parser = subparsers.add_parser("counts", help="insight counts per certainty band")
    _add_common(counts_parser)
    counts_parser.set_defaults(func=cmd_counts)

    related_parser = subparsers.add_parser("related", help="insights related to one insight")
    _add_common(related_parser)
    related_parser.add_argument("insight_id")
    related_parser.set_defaults(func=cmd_related)

    protocols_parser = subparsers.add_parser("protocols", help="protocol summaries for the selected persona")
    _add_common(protocols_parser)
    protocols_parser.add_argument("--category", type=str, default=None, help="protocol category or 'all'")
    protocols_parser.add_argument("--status", choices=[status.value for status in ProtocolStatus], default=None)
    protocols_parser.add_argument("--max-difficulty", type=int, default=None)
    protocols_parser.add_argument("--min-evidence", type=int, default=None)
    protocols_parser.add_argument("--search", type=str, default=None, help="case-insensitive text match")
    protocols_parser.add_argument("--sort", choices=[field.value for field in ProtocolSortField], default=None)
    protocols_parser.add_argument("--direction", choices=[item.value for item in SortDirection], default="asc")
    protocols_parser.set_defaults(func=cmd_protocols)

    simulate_parser = subparsers.add_parser("simulate", help="what-if projection for a protocol")
    _add_common(simulate_parser)
    simulate_parser.add_argument("protocol_id")
    simulate_parser.add_argument("--on", action="append", default=None, help="force an action on")
    simulate_parser.add_argument("--off", action="append", default=None, help="force an action off")
    simulate_parser.set_defaults(func=cmd_simulate)

    recommend_parser = subparsers.add_parser("recommend", help="trigger-based recommendations for a protocol")
    _add_common(recommend_parser)
    recommend_parser.add_argument("protocol_id")
    recommend_parser.add_argument("--completed", action="append", default=None, help="completed action id")
    recommend_parser.set_defaults(func=cmd_recommend)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(bool(getattr(args, "verbose", False)), command=args.command)
    try:
        return int(args.func(args))
    except (ValueError, LookupError) as exc:
        logger.error("command failed: %s", exc)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
