from __future__ import annotations

import pytest

from formbridge.typing.enums import CHOICE_FIELD_TYPES, FieldType, FindingType, FixActionType, Severity


def test_severity_from_str() -> None:
    assert Severity.from_str(" Error ") == Severity.ERROR


def test_finding_type_from_str_raises_on_invalid_value() -> None:
    with pytest.raises(ValueError, match="Unsupported FindingType value"):
        FindingType.from_str("spelling_mismatch")


def test_fix_action_type_round_trips_through_str() -> None:
    assert FixActionType.from_str("update_field_options").to_str() == "update_field_options"


def test_choice_field_types() -> None:
    assert {FieldType.RADIO, FieldType.SELECT, FieldType.OPTION, FieldType.ENUM} == CHOICE_FIELD_TYPES
    assert "radio" in CHOICE_FIELD_TYPES
    assert FieldType.CHECKBOX not in CHOICE_FIELD_TYPES
