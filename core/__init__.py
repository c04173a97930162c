"""Pure insight ranking and protocol simulation engine."""

from core.insights import enhance_insight, filter_insights, ranked_for_persona
from core.metadata import ConfigurationError
from core.models import Insight, InsightWithDisplay, Protocol, SimulatorResult
from core.protocols import recommended_actions, simulate

__all__ = [
    "ConfigurationError",
    "Insight",
    "InsightWithDisplay",
    "Protocol",
    "SimulatorResult",
    "enhance_insight",
    "filter_insights",
    "ranked_for_persona",
    "recommended_actions",
    "simulate",
]
