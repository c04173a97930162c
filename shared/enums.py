from __future__ import annotations

from enum import Enum


class InsightCategory(str, Enum):
    SLEEP = "sleep"
    METABOLIC = "metabolic"
    CARDIO = "cardio"
    RECOVERY = "recovery"
    MOOD = "mood"
    NUTRITION = "nutrition"
    COGNITIVE = "cognitive"
    ACTIVITY = "activity"
    STRESS = "stress"


class VariableType(str, Enum):
    OUTCOME = "outcome"
    LOAD = "load"
    MARKER = "marker"


class CausalStatus(str, Enum):
    BELOW_OPTIMAL = "below_optimal"
    AT_OPTIMAL = "at_optimal"
    ABOVE_OPTIMAL = "above_optimal"


class CurveType(str, Enum):
    PLATEAU_UP = "plateau_up"
    PLATEAU_DOWN = "plateau_down"
    V_MIN = "v_min"
    V_MAX = "v_max"
    LINEAR = "linear"


class ActionType(str, Enum):
    CUTOFF = "cutoff"
    DURATION = "duration"
    TARGET = "target"


class ProtocolStatus(str, Enum):
    ACTIVE = "active"
    SUGGESTED = "suggested"
    COMPLETED = "completed"
    PAUSED = "paused"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class InsightSortField(str, Enum):
    CERTAINTY = "certainty"
    PRIORITY = "priority"
    CATEGORY = "category"


class ProtocolSortField(str, Enum):
    DIFFICULTY = "difficulty"
    EVIDENCE = "evidence"
    NAME = "name"
    CATEGORY = "category"
