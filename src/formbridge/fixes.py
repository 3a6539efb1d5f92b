"""Turn validation findings into executable fix actions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from formbridge.compatibility import DEFAULT_TYPE_COMPATIBILITY, TypeCompatibilityTable
from formbridge.matcher import DEFAULT_SIMILARITY_THRESHOLD, match_similar_fields
from formbridge.typing.enums import FieldType, FindingType, FixActionType, FixType
from formbridge.typing.models import FieldDescriptor, FixAction, FixInstruction, ValidationFinding

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


def _target_name_for(source: FieldDescriptor, target_fields: Sequence[FieldDescriptor]) -> str:
    """Name of the target field corresponding to `source`, or the source name."""
    for target in target_fields:
        if target.corresponds_to(source):
            return target.name
    return source.name


def _unmapped_targets(
    findings: Sequence[ValidationFinding],
    target_fields: Sequence[FieldDescriptor],
    source_fields: Sequence[FieldDescriptor] | None,
) -> list[FieldDescriptor]:
    """Targets no source field corresponds to, in target order."""
    if source_fields is None:
        unused = {finding.field.name for finding in findings if finding.type == FindingType.UNUSED_FIELD}
        return [target for target in target_fields if target.name in unused]
    return [
        target for target in target_fields if not any(target.corresponds_to(source) for source in source_fields)
    ]


class FixGenerator:
    """Build one fix per actionable finding.

    `unused_field` and `name_mismatch` findings need a human decision and yield no fix.
    """

    def __init__(
        self,
        table: TypeCompatibilityTable = DEFAULT_TYPE_COMPATIBILITY,
        *,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    ) -> None:
        self.table = table
        self.similarity_threshold = similarity_threshold
        self._builders: dict[
            FindingType,
            Callable[[ValidationFinding, Sequence[FieldDescriptor]], FixAction],
        ] = {
            FindingType.MISSING_FIELD: self._missing_field_fix,
            FindingType.TYPE_MISMATCH: self._type_mismatch_fix,
            FindingType.CONSTRAINT_MISMATCH: self._constraint_mismatch_fix,
            FindingType.VALIDATION_MISMATCH: self._validation_mismatch_fix,
            FindingType.OPTIONS_MISMATCH: self._options_mismatch_fix,
        }

    def generate(
        self,
        findings: Sequence[ValidationFinding],
        target_fields: Sequence[FieldDescriptor],
        *,
        source_fields: Sequence[FieldDescriptor] | None = None,
    ) -> list[FixAction]:
        """Generate fixes in finding order.

        A missing field is only mapped onto a target that no source field corresponds to,
        and each such target is claimed at most once per batch.

        Args:
            findings (Sequence[ValidationFinding]): Validator output.
            target_fields (Sequence[FieldDescriptor]): Current Bubble fields.
            source_fields (Sequence[FieldDescriptor] | None): Validated PDF fields. When None,
                the targets of `unused_field` findings are the unmapped ones.

        Returns:
            list[FixAction]: Fix actions.
        """
        candidates = _unmapped_targets(findings, target_fields, source_fields)
        fixes: list[FixAction] = []
        for finding in findings:
            builder = self._builders.get(finding.type)
            if builder is None:
                continue
            if finding.type != FindingType.MISSING_FIELD:
                fixes.append(builder(finding, target_fields))
                continue
            fix = builder(finding, candidates)
            if fix.type == FixType.MAP_TO_EXISTING:
                claimed = fix.action.data["target_field_name"]
                candidates = [target for target in candidates if target.name != claimed]
            fixes.append(fix)
        return fixes

    def _missing_field_fix(
        self,
        finding: ValidationFinding,
        target_fields: Sequence[FieldDescriptor],
    ) -> FixAction:
        field = finding.field
        matches = match_similar_fields(field, target_fields, threshold=self.similarity_threshold)
        if matches:
            best = matches[0]
            return FixAction(
                type=FixType.MAP_TO_EXISTING,
                field=field,
                suggestion=best.text,
                action=FixInstruction(
                    type=FixActionType.UPDATE_MAPPING,
                    data={
                        "source_field_name": field.name,
                        "source_field_id": field.identity_key,
                        "target_field_name": best.candidate.name,
                    },
                ),
            )

        target_type = self.table.canonical_target_type(field.type)
        return FixAction(
            type=FixType.CREATE_FIELD,
            field=field,
            suggestion=f"Create new Bubble field '{field.name}'",
            action=FixInstruction(
                type=FixActionType.CREATE_TARGET_FIELD,
                data={
                    "name": field.name,
                    "type": target_type,
                    "required": field.required,
                    "validation": field.validation.model_dump() if field.validation else None,
                    "options": list(field.options) if target_type == FieldType.OPTION else [],
                },
            ),
        )

    def _type_mismatch_fix(
        self,
        finding: ValidationFinding,
        target_fields: Sequence[FieldDescriptor],
    ) -> FixAction:
        field = finding.field
        return FixAction(
            type=FixType.TYPE_CONVERSION,
            field=field,
            suggestion="Convert field type to match Bubble requirements",
            action=FixInstruction(
                type=FixActionType.UPDATE_FIELD_TYPE,
                data={
                    "field_id": field.identity_key,
                    "field_name": _target_name_for(field, target_fields),
                    "new_type": self.table.canonical_target_type(field.type),
                },
            ),
        )

    @staticmethod
    def _constraint_mismatch_fix(
        finding: ValidationFinding,
        target_fields: Sequence[FieldDescriptor],
    ) -> FixAction:
        field = finding.field
        return FixAction(
            type=FixType.UPDATE_CONSTRAINTS,
            field=field,
            suggestion="Update field constraints to match PDF requirements",
            action=FixInstruction(
                type=FixActionType.UPDATE_FIELD_CONSTRAINTS,
                data={
                    "field_id": field.identity_key,
                    "field_name": _target_name_for(field, target_fields),
                    "required": field.required,
                },
            ),
        )

    @staticmethod
    def _validation_mismatch_fix(
        finding: ValidationFinding,
        target_fields: Sequence[FieldDescriptor],
    ) -> FixAction:
        field = finding.field
        return FixAction(
            type=FixType.ADD_VALIDATION,
            field=field,
            suggestion="Add validation rules to match PDF requirements",
            action=FixInstruction(
                type=FixActionType.UPDATE_FIELD_VALIDATION,
                data={
                    "field_id": field.identity_key,
                    "field_name": _target_name_for(field, target_fields),
                    "validation": field.validation.model_dump() if field.validation else None,
                },
            ),
        )

    @staticmethod
    def _options_mismatch_fix(
        finding: ValidationFinding,
        target_fields: Sequence[FieldDescriptor],
    ) -> FixAction:
        field = finding.field
        return FixAction(
            type=FixType.UPDATE_OPTIONS,
            field=field,
            suggestion="Update field options to match PDF requirements",
            action=FixInstruction(
                type=FixActionType.UPDATE_FIELD_OPTIONS,
                data={
                    "field_id": field.identity_key,
                    "field_name": _target_name_for(field, target_fields),
                    "options": list(field.options),
                },
            ),
        )


def generate_fixes(
    findings: Sequence[ValidationFinding],
    target_fields: Sequence[FieldDescriptor],
    *,
    source_fields: Sequence[FieldDescriptor] | None = None,
    table: TypeCompatibilityTable | None = None,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[FixAction]:
    """Generate fixes with a one-off generator.

    Args:
        findings (Sequence[ValidationFinding]): Validator output.
        target_fields (Sequence[FieldDescriptor]): Current Bubble fields.
        source_fields (Sequence[FieldDescriptor] | None): Validated PDF fields.
        table (TypeCompatibilityTable | None): Compatibility table, default table when None.
        similarity_threshold (float): Exclusive minimum score for map-to-existing fixes.

    Returns:
        list[FixAction]: Fix actions in finding order.
    """
    generator = FixGenerator(table or DEFAULT_TYPE_COMPATIBILITY, similarity_threshold=similarity_threshold)
    return generator.generate(findings, target_fields, source_fields=source_fields)
