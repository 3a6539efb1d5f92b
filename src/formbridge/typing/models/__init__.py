"""Core domain model exports."""

from formbridge.typing.models.fields import FieldDescriptor, FieldMapping, ValidationRule
from formbridge.typing.models.findings import ValidationFinding, ValidationSummary
from formbridge.typing.models.fixes import (
    CreateTargetFieldData,
    FixAction,
    FixInstruction,
    FixResult,
    TargetFieldUpdateData,
    UpdateFieldConstraintsData,
    UpdateFieldOptionsData,
    UpdateFieldTypeData,
    UpdateFieldValidationData,
    UpdateMappingData,
)
from formbridge.typing.models.report import ReconcileRequest, ReconciliationReport
from formbridge.typing.models.store import MappingDocument

__all__ = [
    "CreateTargetFieldData",
    "FieldDescriptor",
    "FieldMapping",
    "FixAction",
    "FixInstruction",
    "FixResult",
    "MappingDocument",
    "ReconcileRequest",
    "ReconciliationReport",
    "TargetFieldUpdateData",
    "UpdateFieldConstraintsData",
    "UpdateFieldOptionsData",
    "UpdateFieldTypeData",
    "UpdateFieldValidationData",
    "UpdateMappingData",
    "ValidationFinding",
    "ValidationRule",
    "ValidationSummary",
]
