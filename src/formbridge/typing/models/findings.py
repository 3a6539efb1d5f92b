"""Validation finding models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from formbridge.typing.enums import FindingType, Severity
from formbridge.typing.models.fields import FieldDescriptor


class ValidationFinding(BaseModel):
    """One diagnostic emitted by the validator."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    severity: Severity
    field: FieldDescriptor
    type: FindingType
    message: str
    suggestions: list[str] = Field(default_factory=list)


class ValidationSummary(BaseModel):
    """Finding counts for a validation run."""

    model_config = ConfigDict(extra="forbid")

    errors: int = 0
    warnings: int = 0
    total: int = 0
    blocking: bool = False
