from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_DATA_DIR = Path.home() / ".insight_console"
DEFAULT_CONFIG_PATH = DEFAULT_DATA_DIR / "config.toml"


class ConsoleConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    persona_id: str = "marcus"
    certainty_threshold: int = Field(default=75, ge=0, le=100)
    fixtures_path: str | None = None
    related_limit: int = Field(default=3, ge=0, le=50)
    top_actions_limit: int = Field(default=3, ge=0, le=50)

    @field_validator("persona_id")
    @classmethod
    def validate_persona(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("persona_id cannot be empty")
        return cleaned

    @field_validator("fixtures_path")
    @classmethod
    def normalize_fixtures_path(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return str(Path(value.strip()).expanduser().resolve(strict=False))


def _env_overrides() -> dict[str, Any]:
    mapping: dict[str, tuple[str, str]] = {
        "INSIGHT_CONSOLE_PERSONA": ("persona_id", "str"),
        "INSIGHT_CONSOLE_THRESHOLD": ("certainty_threshold", "int"),
        "INSIGHT_CONSOLE_FIXTURES": ("fixtures_path", "str"),
        "INSIGHT_CONSOLE_RELATED_LIMIT": ("related_limit", "int"),
        "INSIGHT_CONSOLE_TOP_ACTIONS": ("top_actions_limit", "int"),
    }
    out: dict[str, Any] = {}
    for env_name, (field_name, kind) in mapping.items():
        raw = os.getenv(env_name)
        if raw is None:
            continue
        if kind == "int":
            try:
                out[field_name] = int(raw)
            except ValueError as exc:
                raise ValueError(f"{env_name} must be an integer, got {raw!r}") from exc
        else:
            out[field_name] = raw
    return out


def default_config_toml() -> str:
    return """persona_id = \"marcus\"
certainty_threshold = 75
related_limit = 3
top_actions_limit = 3
"""


def ensure_config_file(config_path: Path = DEFAULT_CONFIG_PATH) -> Path:
    raw_path = config_path.expanduser()
    if raw_path.is_symlink():
        raise ValueError(f"refusing symlinked config file: {raw_path}")
    path = raw_path.resolve(strict=False)
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        path.write_text(default_config_toml(), encoding="utf-8")
    return path


def load_config(config_path: Path | None = None) -> ConsoleConfig:
    path = (config_path or DEFAULT_CONFIG_PATH).expanduser().resolve(strict=False)
    parsed: dict[str, Any] = {}
    if path.exists():
        try:
            with path.open("rb") as handle:
                parsed = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"invalid config at {path}: {exc}") from exc
    parsed.update(_env_overrides())
    try:
        return ConsoleConfig.model_validate(parsed)
    except ValidationError as exc:
        raise ValueError(f"invalid config at {path}: {exc}") from exc
