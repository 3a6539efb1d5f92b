"""Field mapping validation between PDF form fields and Bubble fields."""

from __future__ import annotations

from typing import TYPE_CHECKING

from formbridge import logger
from formbridge.compatibility import DEFAULT_TYPE_COMPATIBILITY, TypeCompatibilityTable
from formbridge.exceptions import ValidationBlockedError
from formbridge.matcher import DEFAULT_SIMILARITY_THRESHOLD, find_similar_fields
from formbridge.typing.enums import FieldType, FindingType, Severity
from formbridge.typing.models import FieldDescriptor, ValidationFinding, ValidationSummary

if TYPE_CHECKING:
    from collections.abc import Sequence

_OPTION_SOURCE_TYPES = frozenset({FieldType.SELECT, FieldType.RADIO})
_UNKNOWN_TYPE = "unknown"


def _find_counterpart(
    field: FieldDescriptor,
    candidates: Sequence[FieldDescriptor],
) -> FieldDescriptor | None:
    """Return the first candidate that corresponds exactly to `field`."""
    for candidate in candidates:
        if candidate.corresponds_to(field):
            return candidate
    return None


class FieldMappingValidator:
    """Compare a source field set with a target field set.

    Findings are produced in a fixed order: for each source field (in input order) the
    presence check, then the type, required, validation-rule and options checks; then
    one `unused_field` finding per unmatched target field (in input order).
    """

    def __init__(
        self,
        table: TypeCompatibilityTable = DEFAULT_TYPE_COMPATIBILITY,
        *,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    ) -> None:
        self.table = table
        self.similarity_threshold = similarity_threshold

    def validate(
        self,
        source_fields: Sequence[FieldDescriptor],
        target_fields: Sequence[FieldDescriptor],
    ) -> list[ValidationFinding]:
        """Run every check and return the ordered findings.

        Args:
            source_fields (Sequence[FieldDescriptor]): Fields detected in the PDF form.
            target_fields (Sequence[FieldDescriptor]): Fields of the Bubble data type.

        Returns:
            list[ValidationFinding]: Findings, empty when the mapping is clean.
        """
        findings: list[ValidationFinding] = []

        for source in source_fields:
            target = _find_counterpart(source, target_fields)
            if target is None:
                findings.append(
                    ValidationFinding(
                        severity=Severity.ERROR,
                        field=source,
                        type=FindingType.MISSING_FIELD,
                        message="No matching Bubble field found",
                        suggestions=find_similar_fields(
                            source,
                            target_fields,
                            threshold=self.similarity_threshold,
                        ),
                    ),
                )
                continue

            for check in (
                self._check_type,
                self._check_required,
                self._check_validation_rule,
                self._check_options,
            ):
                finding = check(source, target)
                if finding is not None:
                    findings.append(finding)

        for target in target_fields:
            if _find_counterpart(target, source_fields) is None:
                findings.append(
                    ValidationFinding(
                        severity=Severity.WARNING,
                        field=target,
                        type=FindingType.UNUSED_FIELD,
                        message="Unused Bubble field",
                        suggestions=find_similar_fields(
                            target,
                            source_fields,
                            threshold=self.similarity_threshold,
                        ),
                    ),
                )

        logger.debug(
            "Field mapping validated",
            extra={
                "source_fields": len(source_fields),
                "target_fields": len(target_fields),
                "findings": len(findings),
            },
        )
        return findings

    def _check_type(self, source: FieldDescriptor, target: FieldDescriptor) -> ValidationFinding | None:
        if self.table.is_compatible(source.type, target.type):
            return None
        source_type = source.type or _UNKNOWN_TYPE
        target_type = target.type or _UNKNOWN_TYPE
        return ValidationFinding(
            severity=Severity.ERROR,
            field=source,
            type=FindingType.TYPE_MISMATCH,
            message=f"Incompatible field types: PDF ({source_type}) ↔ Bubble ({target_type})",
            suggestions=[
                f"Convert {source.name} to {target_type}",
                f"Change Bubble field type to {source_type}",
            ],
        )

    @staticmethod
    def _check_required(source: FieldDescriptor, target: FieldDescriptor) -> ValidationFinding | None:
        if not source.required or target.required:
            return None
        return ValidationFinding(
            severity=Severity.WARNING,
            field=source,
            type=FindingType.CONSTRAINT_MISMATCH,
            message="Required in PDF but optional in Bubble",
            suggestions=["Make Bubble field required"],
        )

    @staticmethod
    def _check_validation_rule(source: FieldDescriptor, target: FieldDescriptor) -> ValidationFinding | None:
        if source.validation is None or target.validation is not None:
            return None
        return ValidationFinding(
            severity=Severity.WARNING,
            field=source,
            type=FindingType.VALIDATION_MISMATCH,
            message="PDF validation rules not enforced in Bubble",
            suggestions=["Add validation rules to Bubble field"],
        )

    @staticmethod
    def _check_options(source: FieldDescriptor, target: FieldDescriptor) -> ValidationFinding | None:
        if source.type not in _OPTION_SOURCE_TYPES or target.type != FieldType.OPTION:
            return None
        known = set(target.options)
        missing = [option for option in dict.fromkeys(source.options) if option not in known]
        if not missing:
            return None
        return ValidationFinding(
            severity=Severity.WARNING,
            field=source,
            type=FindingType.OPTIONS_MISMATCH,
            message="Missing options in Bubble field",
            suggestions=[f"Add missing options to Bubble field: {', '.join(missing)}"],
        )


def validate(
    source_fields: Sequence[FieldDescriptor],
    target_fields: Sequence[FieldDescriptor],
    *,
    table: TypeCompatibilityTable | None = None,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[ValidationFinding]:
    """Validate a field mapping with a one-off validator.

    Args:
        source_fields (Sequence[FieldDescriptor]): Fields detected in the PDF form.
        target_fields (Sequence[FieldDescriptor]): Fields of the Bubble data type.
        table (TypeCompatibilityTable | None): Compatibility table, default table when None.
        similarity_threshold (float): Exclusive minimum score for suggestions.

    Returns:
        list[ValidationFinding]: Ordered findings.
    """
    validator = FieldMappingValidator(
        table or DEFAULT_TYPE_COMPATIBILITY,
        similarity_threshold=similarity_threshold,
    )
    return validator.validate(source_fields, target_fields)


def summarize_findings(findings: Sequence[ValidationFinding]) -> ValidationSummary:
    """Count findings by severity.

    Args:
        findings (Sequence[ValidationFinding]): Findings of one run.

    Returns:
        ValidationSummary: Counts and whether errors block completion.
    """
    errors = sum(1 for finding in findings if finding.severity == Severity.ERROR)
    warnings = sum(1 for finding in findings if finding.severity == Severity.WARNING)
    return ValidationSummary(errors=errors, warnings=warnings, total=len(findings), blocking=errors > 0)


def ensure_completable(
    findings: Sequence[ValidationFinding],
    *,
    ignore_warnings: bool = False,
) -> list[ValidationFinding]:
    """Check that a mapping can be marked complete.

    Args:
        findings (Sequence[ValidationFinding]): Findings of the latest run.
        ignore_warnings (bool): Acknowledge outstanding warnings.

    Raises:
        ValidationBlockedError: If errors remain, or warnings remain unacknowledged.

    Returns:
        list[ValidationFinding]: Warnings acknowledged by the caller.
    """
    summary = summarize_findings(findings)
    if summary.blocking:
        raise ValidationBlockedError(error_count=summary.errors, warning_count=summary.warnings)
    warnings = [finding for finding in findings if finding.severity == Severity.WARNING]
    if warnings and not ignore_warnings:
        raise ValidationBlockedError(error_count=0, warning_count=len(warnings))
    return warnings
