from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from shared.enums import (
    ActionType,
    CausalStatus,
    CurveType,
    InsightCategory,
    ProtocolStatus,
    VariableType,
)


class Persona(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(min_length=1)
    name: str
    archetype: str = ""
    narrative: str = ""
    days_of_data: int = Field(default=0, ge=0)
    devices: list[str] = Field(default_factory=list)


class Evidence(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    personal_days: int = Field(default=0, ge=0)
    personal_weight: float = Field(ge=0, le=1)
    population_weight: float = Field(default=0.0, ge=0, le=1)
    stability: float = Field(default=0.0, ge=0, le=1)


class HoldoutPreview(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    metric: str
    expected_change: float
    unit: str
    horizon: str


class Threshold(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    value: float
    unit: str
    low: float
    high: float
    display_value: str


class EffectSize(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    value: float
    unit: str
    description: str = ""


class CausalParams(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    source: str
    target: str
    curve_type: CurveType = CurveType.LINEAR
    theta: Threshold
    beta_below: EffectSize
    beta_above: EffectSize
    observations: int = Field(default=0, ge=0)
    complete_pct: float = Field(default=0.0, ge=0, le=100)
    changepoint_prob: float = Field(default=0.0, ge=0, le=1)
    current_value: float | None = None
    current_status: CausalStatus | None = None


class Insight(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(min_length=1)
    persona_id: str = Field(min_length=1)
    category: InsightCategory
    variable_type: VariableType = VariableType.OUTCOME
    title: str = ""
    headline: str = ""
    recommendation: str = ""
    certainty: float = Field(ge=0, le=1)
    evidence: Evidence
    data_sources: list[str] = Field(default_factory=list)
    holdout_preview: HoldoutPreview | None = None
    causal_params: CausalParams | None = None
    actionable: bool = False
    priority: int | None = None


class InsightWithDisplay(Insight):
    category_color: str
    category_gradient: str
    certainty_label: str
    evidence_label: str
    is_high_certainty: bool
    is_personalized: bool


class InsightCriteria(BaseModel):
    model_config = ConfigDict(extra="forbid")

    persona_id: str | None = None
    category: InsightCategory | list[InsightCategory] | None = None
    variable_types: list[VariableType] | None = None
    min_certainty: float | None = None
    max_certainty: float | None = None
    has_holdout_preview: bool | None = None
    data_sources: list[str] | None = None
    actionable_only: bool = False
    min_priority: int | None = None
    search_query: str | None = None


class CertaintyCounts(BaseModel):
    model_config = ConfigDict(extra="forbid")

    total: int = Field(ge=0)
    by_threshold: dict[str, int]


class Baseline(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    value: float
    unit: str = ""


class ProtocolAction(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(min_length=1)
    label: str = ""
    category: InsightCategory
    impact: float
    is_active: bool = False
    action_type: ActionType | None = None
    time: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    linked_insight_id: str | None = None


class ProtocolState(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(min_length=1)
    label: str = ""
    is_active: bool = False


class ProtocolTrigger(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    if_states: list[str] = Field(default_factory=list, alias="if")
    then_actions: list[str] = Field(default_factory=list, alias="then")
    reason: str = ""


class Protocol(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(min_length=1)
    persona_id: str = Field(min_length=1)
    name: str
    outcome: str
    baseline: Baseline
    actions: list[ProtocolAction] = Field(default_factory=list)
    states: list[ProtocolState] = Field(default_factory=list)
    triggers: list[ProtocolTrigger] = Field(default_factory=list)
    description: str = ""
    category: str | None = None
    status: ProtocolStatus | None = None
    difficulty: int | None = Field(default=None, ge=1, le=5)
    evidence_level: int | None = Field(default=None, ge=0, le=100)


class ProtocolCriteria(BaseModel):
    model_config = ConfigDict(extra="forbid")

    category: str | None = None
    status: ProtocolStatus | None = None
    max_difficulty: int | None = None
    min_evidence: int | None = None
    search_query: str | None = None


class ActionWithState(ProtocolAction):
    is_toggled: bool
    contribution_percent: float


class SimulatorResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    predicted_value: float
    delta_from_baseline: float
    active_actions_count: int = Field(ge=0)
    max_possible_delta: float
    percent_of_max: float


class ConfidenceInterval(BaseModel):
    model_config = ConfigDict(extra="forbid")

    low: float
    high: float


class SimulatorProjection(SimulatorResult):
    metric: str
    baseline: float
    projected: float
    change: float
    change_percent: float
    certainty: float
    time_to_effect: str
    confidence_interval: ConfidenceInterval


class ProtocolSummary(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    persona_id: str
    name: str
    outcome: str
    action_count: int = Field(ge=0)
    active_action_count: int = Field(ge=0)
    potential_impact: float
