from __future__ import annotations

import pytest

from formbridge.exceptions import ValidationBlockedError
from formbridge.typing.enums import FieldOrigin, FindingType, Severity
from formbridge.typing.models import FieldDescriptor, ValidationRule
from formbridge.validator import (
    FieldMappingValidator,
    ensure_completable,
    summarize_findings,
    validate,
)


def _target(name: str, field_type: str | None = "text", **kwargs) -> FieldDescriptor:
    return FieldDescriptor(name=name, type=field_type, origin=FieldOrigin.TARGET, **kwargs)


def test_clean_mapping_has_no_findings(pdf_fields, bubble_fields) -> None:
    assert validate(pdf_fields, bubble_fields) == []


def test_validation_is_deterministic(pdf_fields, bubble_fields) -> None:
    targets = bubble_fields[:2]

    assert validate(pdf_fields, targets) == validate(pdf_fields, targets)


def test_missing_field_is_an_error_with_suggestions() -> None:
    source = FieldDescriptor(name="first_name", type="text")

    findings = validate([source], [_target("firstname")])

    assert [(f.type, f.severity) for f in findings] == [
        (FindingType.MISSING_FIELD, Severity.ERROR),
        (FindingType.UNUSED_FIELD, Severity.WARNING),
    ]
    missing, unused = findings
    assert missing.field == source
    assert missing.message == "No matching Bubble field found"
    assert missing.suggestions == ["Map to firstname (90% match)"]
    assert unused.message == "Unused Bubble field"
    assert unused.suggestions == ["Map to first_name (90% match)"]


def test_missing_field_skips_remaining_checks() -> None:
    source = FieldDescriptor(name="zip", type="number", required=True)

    findings = validate([source], [])

    assert [f.type for f in findings] == [FindingType.MISSING_FIELD]
    assert findings[0].suggestions == []


def test_identity_key_pairs_renamed_fields() -> None:
    source = FieldDescriptor(name="Name", type="text", identity_key="f1")
    target = _target("full_name", identity_key="f1")

    assert validate([source], [target]) == []


def test_fields_without_identity_keys_only_pair_by_name() -> None:
    source = FieldDescriptor(name="Name", type="text")
    target = _target("full_name")

    types = [f.type for f in validate([source], [target])]

    assert types == [FindingType.MISSING_FIELD, FindingType.UNUSED_FIELD]


def test_type_mismatch_message_and_suggestions() -> None:
    source = FieldDescriptor(name="age", type="number")

    findings = validate([source], [_target("age", "text")])

    assert len(findings) == 1
    finding = findings[0]
    assert finding.type == FindingType.TYPE_MISMATCH
    assert finding.severity == Severity.ERROR
    assert finding.message == "Incompatible field types: PDF (number) ↔ Bubble (text)"
    assert finding.suggestions == ["Convert age to text", "Change Bubble field type to number"]


def test_missing_type_is_reported_as_incompatible() -> None:
    source = FieldDescriptor(name="notes")

    findings = validate([source], [_target("notes")])

    assert findings[0].type == FindingType.TYPE_MISMATCH
    assert findings[0].message == "Incompatible field types: PDF (unknown) ↔ Bubble (text)"


def test_required_mismatch_is_a_warning() -> None:
    source = FieldDescriptor(name="email", type="text", required=True)

    findings = validate([source], [_target("email", "email")])

    assert [(f.type, f.severity, f.message) for f in findings] == [
        (FindingType.CONSTRAINT_MISMATCH, Severity.WARNING, "Required in PDF but optional in Bubble"),
    ]
    assert findings[0].suggestions == ["Make Bubble field required"]


def test_optional_source_with_required_target_is_clean() -> None:
    source = FieldDescriptor(name="email", type="text")

    assert validate([source], [_target("email", required=True)]) == []


def test_missing_validation_rule_is_a_warning() -> None:
    rule = ValidationRule(pattern=r"^\d{5}$", message="Five digits")
    source = FieldDescriptor(name="zip", type="text", validation=rule)

    findings = validate([source], [_target("zip")])

    assert [f.type for f in findings] == [FindingType.VALIDATION_MISMATCH]
    assert findings[0].message == "PDF validation rules not enforced in Bubble"
    assert findings[0].suggestions == ["Add validation rules to Bubble field"]


def test_any_target_rule_satisfies_validation_check() -> None:
    rule = ValidationRule(pattern=r"^\d{5}$", message="Five digits")
    source = FieldDescriptor(name="zip", type="text", validation=rule)
    target = _target("zip", validation=ValidationRule(min=1, message="Too short"))

    assert validate([source], [target]) == []


def test_missing_options_are_listed_in_source_order() -> None:
    source = FieldDescriptor(name="plan", type="select", options=["gold", "basic", "pro", "gold"])
    target = _target("plan", "option", options=["basic"])

    findings = validate([source], [target])

    assert [f.type for f in findings] == [FindingType.OPTIONS_MISMATCH]
    assert findings[0].message == "Missing options in Bubble field"
    assert findings[0].suggestions == ["Add missing options to Bubble field: gold, pro"]


def test_options_are_only_compared_against_option_targets() -> None:
    source = FieldDescriptor(name="plan", type="radio", options=["basic", "pro"])

    assert validate([source], [_target("plan", "enum")]) == []


def test_field_checks_are_independent() -> None:
    source = FieldDescriptor(
        name="code",
        type="number",
        required=True,
        validation=ValidationRule(min=0, message="Must be positive"),
    )

    types = [f.type for f in validate([source], [_target("code", "text")])]

    assert types == [
        FindingType.TYPE_MISMATCH,
        FindingType.CONSTRAINT_MISMATCH,
        FindingType.VALIDATION_MISMATCH,
    ]


def test_findings_follow_source_then_target_order() -> None:
    sources = [
        FieldDescriptor(name="b", type="text"),
        FieldDescriptor(name="a", type="number"),
    ]
    targets = [_target("z"), _target("a", "date"), _target("y")]

    findings = validate(sources, targets)

    assert [(f.type, f.field.name) for f in findings] == [
        (FindingType.MISSING_FIELD, "b"),
        (FindingType.TYPE_MISMATCH, "a"),
        (FindingType.UNUSED_FIELD, "z"),
        (FindingType.UNUSED_FIELD, "y"),
    ]


def test_empty_inputs() -> None:
    source = FieldDescriptor(name="a", type="text")
    target = _target("a")

    assert validate([], []) == []
    assert [f.type for f in validate([source], [])] == [FindingType.MISSING_FIELD]
    assert [f.type for f in validate([], [target])] == [FindingType.UNUSED_FIELD]


def test_threshold_controls_suggestions() -> None:
    source = FieldDescriptor(name="first_name", type="text")
    validator = FieldMappingValidator(similarity_threshold=0.95)

    findings = validator.validate([source], [_target("firstname")])

    assert all(f.suggestions == [] for f in findings)


def test_summarize_findings_counts_by_severity() -> None:
    findings = validate([FieldDescriptor(name="a", type="text")], [_target("b")])

    summary = summarize_findings(findings)

    assert (summary.errors, summary.warnings, summary.total, summary.blocking) == (1, 1, 2, True)


def test_ensure_completable_blocks_on_errors() -> None:
    findings = validate([FieldDescriptor(name="a", type="text")], [])

    with pytest.raises(ValidationBlockedError, match="1 error\\(s\\) must be resolved"):
        ensure_completable(findings, ignore_warnings=True)


def test_ensure_completable_requires_warning_acknowledgement() -> None:
    findings = validate([], [_target("extra")])

    with pytest.raises(ValidationBlockedError):
        ensure_completable(findings)
    assert ensure_completable(findings, ignore_warnings=True) == findings


def test_ensure_completable_accepts_clean_mapping(pdf_fields, bubble_fields) -> None:
    assert ensure_completable(validate(pdf_fields, bubble_fields)) == []


def test_age_text_against_number_yields_single_type_mismatch() -> None:
    findings = validate(
        [FieldDescriptor(name="age", type="text", required=True)],
        [_target("age", "number", required=True)],
    )

    assert [(f.type, f.severity) for f in findings] == [(FindingType.TYPE_MISMATCH, Severity.ERROR)]


def test_untyped_fields_still_get_name_suggestions() -> None:
    source = FieldDescriptor(name="firstName", required=True)

    findings = validate([source], [_target("first_name", None)])

    assert findings[0].type == FindingType.MISSING_FIELD
    assert any("first_name" in suggestion for suggestion in findings[0].suggestions)
    assert [f.type for f in findings].count(FindingType.UNUSED_FIELD) == 1
