"""Typing-centric domain modules."""

from formbridge.typing.enums import (
    FieldOrigin,
    FieldType,
    FindingType,
    FixActionType,
    FixType,
    Severity,
)
from formbridge.typing.models import (
    FieldDescriptor,
    FieldMapping,
    FixAction,
    FixInstruction,
    FixResult,
    MappingDocument,
    ValidationFinding,
    ValidationRule,
    ValidationSummary,
)
from formbridge.typing.protocol import MappingStore

__all__ = [
    "FieldDescriptor",
    "FieldMapping",
    "FieldOrigin",
    "FieldType",
    "FindingType",
    "FixAction",
    "FixActionType",
    "FixInstruction",
    "FixResult",
    "FixType",
    "MappingDocument",
    "MappingStore",
    "Severity",
    "ValidationFinding",
    "ValidationRule",
    "ValidationSummary",
]
