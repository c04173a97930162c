"""Closed lookup tables for insight categories and variable types."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from shared.enums import InsightCategory, VariableType


class ConfigurationError(LookupError):
    """An enumeration value has no metadata entry; the fixture data is out of step with the schema."""


class CategoryMeta(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: InsightCategory
    label: str
    color: str
    gradient: str
    icon: str


class VariableTypeMeta(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: VariableType
    label: str
    short_label: str
    description: str
    color: str
    bg_color: str
    border_color: str
    icon: str
    domains: list[InsightCategory] = Field(default_factory=list)


CATEGORY_META: dict[InsightCategory, CategoryMeta] = {
    InsightCategory.SLEEP: CategoryMeta(
        id=InsightCategory.SLEEP, label="Sleep", color="#8B5CF6", gradient="bg-gradient-sleep", icon="Moon"
    ),
    InsightCategory.METABOLIC: CategoryMeta(
        id=InsightCategory.METABOLIC,
        label="Metabolic",
        color="#F97316",
        gradient="bg-gradient-metabolic",
        icon="Flame",
    ),
    InsightCategory.CARDIO: CategoryMeta(
        id=InsightCategory.CARDIO, label="Cardio", color="#EC4899", gradient="bg-gradient-cardio", icon="Heart"
    ),
    InsightCategory.RECOVERY: CategoryMeta(
        id=InsightCategory.RECOVERY,
        label="Recovery",
        color="#06B6D4",
        gradient="bg-gradient-recovery",
        icon="Battery",
    ),
    InsightCategory.MOOD: CategoryMeta(
        id=InsightCategory.MOOD, label="Mood", color="#10B981", gradient="bg-gradient-mood", icon="Smile"
    ),
    InsightCategory.NUTRITION: CategoryMeta(
        id=InsightCategory.NUTRITION,
        label="Nutrition",
        color="#EAB308",
        gradient="bg-gradient-nutrition",
        icon="Apple",
    ),
    InsightCategory.COGNITIVE: CategoryMeta(
        id=InsightCategory.COGNITIVE,
        label="Cognitive",
        color="#6366F1",
        gradient="bg-gradient-cognitive",
        icon="Brain",
    ),
    InsightCategory.ACTIVITY: CategoryMeta(
        id=InsightCategory.ACTIVITY,
        label="Activity",
        color="#22C55E",
        gradient="bg-gradient-activity",
        icon="Zap",
    ),
    InsightCategory.STRESS: CategoryMeta(
        id=InsightCategory.STRESS,
        label="Stress",
        color="#EF4444",
        gradient="bg-gradient-stress",
        icon="AlertTriangle",
    ),
}

VARIABLE_TYPE_META: dict[VariableType, VariableTypeMeta] = {
    VariableType.OUTCOME: VariableTypeMeta(
        id=VariableType.OUTCOME,
        label="Outcomes",
        short_label="Outcomes",
        description="Daily metrics you care about optimizing",
        color="#10B981",
        bg_color="bg-emerald-50",
        border_color="border-emerald-200",
        icon="Target",
        domains=[
            InsightCategory.SLEEP,
            InsightCategory.RECOVERY,
            InsightCategory.MOOD,
            InsightCategory.COGNITIVE,
            InsightCategory.ACTIVITY,
            InsightCategory.STRESS,
        ],
    ),
    VariableType.LOAD: VariableTypeMeta(
        id=VariableType.LOAD,
        label="Loads",
        short_label="Loads",
        description="Accumulated state from recent choices",
        color="#F59E0B",
        bg_color="bg-amber-50",
        border_color="border-amber-200",
        icon="TrendingUp",
        domains=[
            InsightCategory.ACTIVITY,
            InsightCategory.RECOVERY,
            InsightCategory.STRESS,
            InsightCategory.SLEEP,
        ],
    ),
    VariableType.MARKER: VariableTypeMeta(
        id=VariableType.MARKER,
        label="Markers",
        short_label="Markers",
        description="Slow-changing biological markers",
        color="#8B5CF6",
        bg_color="bg-violet-50",
        border_color="border-violet-200",
        icon="Activity",
        domains=[InsightCategory.METABOLIC, InsightCategory.CARDIO, InsightCategory.NUTRITION],
    ),
}


def _missing_entries(table: dict, enum_type: type[Enum]) -> list[str]:
    return [member.value for member in enum_type if member not in table]


def validate_metadata_tables(
    categories: dict[InsightCategory, CategoryMeta] | None = None,
    variable_types: dict[VariableType, VariableTypeMeta] | None = None,
) -> None:
    category_table = CATEGORY_META if categories is None else categories
    variable_table = VARIABLE_TYPE_META if variable_types is None else variable_types

    missing = _missing_entries(category_table, InsightCategory)
    if missing:
        raise ConfigurationError(f"category metadata missing for: {', '.join(missing)}")
    missing = _missing_entries(variable_table, VariableType)
    if missing:
        raise ConfigurationError(f"variable type metadata missing for: {', '.join(missing)}")


def category_meta(
    value: InsightCategory | str,
    table: dict[InsightCategory, CategoryMeta] | None = None,
) -> CategoryMeta:
    lookup = CATEGORY_META if table is None else table
    try:
        category = InsightCategory(value)
    except ValueError as exc:
        raise ConfigurationError(f"unknown insight category {value!r}") from exc
    meta = lookup.get(category)
    if meta is None:
        raise ConfigurationError(f"no metadata for insight category {category.value!r}")
    return meta


def variable_type_meta(
    value: VariableType | str,
    table: dict[VariableType, VariableTypeMeta] | None = None,
) -> VariableTypeMeta:
    lookup = VARIABLE_TYPE_META if table is None else table
    try:
        variable_type = VariableType(value)
    except ValueError as exc:
        raise ConfigurationError(f"unknown variable type {value!r}") from exc
    meta = lookup.get(variable_type)
    if meta is None:
        raise ConfigurationError(f"no metadata for variable type {variable_type.value!r}")
    return meta


def domains_for_variable_type(value: VariableType | str) -> list[InsightCategory]:
    return list(variable_type_meta(value).domains)


validate_metadata_tables()
