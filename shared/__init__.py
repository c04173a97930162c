"""Shared enumerations and helpers for the insight console."""

from shared.enums import (
    ActionType,
    CausalStatus,
    CurveType,
    InsightCategory,
    InsightSortField,
    ProtocolSortField,
    ProtocolStatus,
    SortDirection,
    VariableType,
)
from shared.serialization import canonical_json_bytes, canonical_json_text

__all__ = [
    "InsightCategory",
    "VariableType",
    "CausalStatus",
    "CurveType",
    "ActionType",
    "ProtocolStatus",
    "SortDirection",
    "InsightSortField",
    "ProtocolSortField",
    "canonical_json_bytes",
    "canonical_json_text",
]
