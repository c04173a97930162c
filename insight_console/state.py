from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from core.models import ActionWithState, Protocol, ProtocolAction
from core.protocols import actions_with_state, active_action_ids


class ViewState(BaseModel):
    """The user's current selections. Core calls receive these as explicit arguments."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    persona_id: str = Field(min_length=1)
    certainty_threshold: int = Field(default=75, ge=0, le=100)
    simulator_actions: dict[str, bool] = Field(default_factory=dict)

    @property
    def threshold_fraction(self) -> float:
        return self.certainty_threshold / 100

    def select_persona(self, persona_id: str) -> None:
        self.persona_id = persona_id

    def set_certainty_threshold(self, value: int) -> None:
        self.certainty_threshold = value

    def effective_toggle(self, action: ProtocolAction) -> bool:
        return self.simulator_actions.get(action.id, action.is_active)

    def toggle_action(self, action: ProtocolAction) -> bool:
        value = not self.effective_toggle(action)
        self.set_action(action.id, value)
        return value

    def set_action(self, action_id: str, value: bool) -> None:
        self.simulator_actions = {**self.simulator_actions, action_id: value}

    def reset_simulator(self) -> None:
        self.simulator_actions = {}

    def actions(self, protocol: Protocol) -> list[ActionWithState]:
        return actions_with_state(protocol, self.simulator_actions)

    def active_actions(self, protocol: Protocol) -> set[str]:
        return active_action_ids(self.actions(protocol))
