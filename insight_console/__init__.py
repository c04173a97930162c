"""Console front-end over the insight and protocol engine."""

from insight_console.config import ConsoleConfig, load_config
from insight_console.fixtures import FixtureBundle, load_fixtures
from insight_console.state import ViewState

__all__ = ["ConsoleConfig", "load_config", "FixtureBundle", "load_fixtures", "ViewState"]
