from __future__ import annotations

import pytest

from core.metadata import (
    CATEGORY_META,
    VARIABLE_TYPE_META,
    ConfigurationError,
    category_meta,
    domains_for_variable_type,
    validate_metadata_tables,
    variable_type_meta,
)
from shared.enums import InsightCategory, VariableType


def test_every_category_has_metadata() -> None:
    assert set(CATEGORY_META) == set(InsightCategory)
    assert category_meta("sleep").color == "#8B5CF6"
    assert category_meta(InsightCategory.STRESS).gradient == "bg-gradient-stress"


def test_unknown_category_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        category_meta("bogus")


def test_missing_table_entry_is_a_configuration_error() -> None:
    partial = {key: value for key, value in CATEGORY_META.items() if key is not InsightCategory.MOOD}
    with pytest.raises(ConfigurationError, match="mood"):
        category_meta(InsightCategory.MOOD, partial)


def test_configuration_error_is_a_lookup_error() -> None:
    with pytest.raises(LookupError):
        variable_type_meta("habit")


def test_validate_metadata_tables_rejects_incomplete_tables() -> None:
    validate_metadata_tables()

    partial = dict(VARIABLE_TYPE_META)
    partial.pop(VariableType.LOAD)
    with pytest.raises(ConfigurationError, match="load"):
        validate_metadata_tables(variable_types=partial)

    with pytest.raises(ConfigurationError):
        validate_metadata_tables(categories={})


def test_domains_for_variable_type() -> None:
    assert domains_for_variable_type("marker") == [
        InsightCategory.METABOLIC,
        InsightCategory.CARDIO,
        InsightCategory.NUTRITION,
    ]
    domains = domains_for_variable_type(VariableType.LOAD)
    domains.append(InsightCategory.MOOD)
    assert InsightCategory.MOOD not in VARIABLE_TYPE_META[VariableType.LOAD].domains
