"""Fix action, instruction payload and result models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from formbridge.typing.enums import FixType
from formbridge.typing.models.fields import FieldDescriptor, ValidationRule


class FixInstruction(BaseModel):
    """Machine-executable part of a fix."""

    model_config = ConfigDict(extra="forbid")

    type: str
    data: dict[str, Any] = Field(default_factory=dict)


class FixAction(BaseModel):
    """Corrective action derived from a finding."""

    model_config = ConfigDict(extra="forbid")

    type: FixType
    field: FieldDescriptor
    suggestion: str
    action: FixInstruction


class FixResult(BaseModel):
    """Outcome of applying one fix."""

    model_config = ConfigDict(extra="forbid")

    success: bool
    message: str
    fix_type: str | None = None
    action_type: str | None = None
    field_name: str | None = None


class UpdateMappingData(BaseModel):
    """Payload of an `update_mapping` instruction."""

    model_config = ConfigDict(extra="forbid")

    source_field_name: str
    source_field_id: str | None = None
    target_field_name: str


class CreateTargetFieldData(BaseModel):
    """Payload of a `create_target_field` instruction."""

    model_config = ConfigDict(extra="forbid")

    name: str
    type: str | None = None
    required: bool = False
    validation: ValidationRule | None = None
    options: list[str] = Field(default_factory=list)


class TargetFieldUpdateData(BaseModel):
    """Common addressing of instructions that modify an existing target field."""

    model_config = ConfigDict(extra="forbid")

    field_id: str | None = None
    field_name: str


class UpdateFieldTypeData(TargetFieldUpdateData):
    """Payload of an `update_field_type` instruction."""

    new_type: str


class UpdateFieldConstraintsData(TargetFieldUpdateData):
    """Payload of an `update_field_constraints` instruction."""

    required: bool


class UpdateFieldValidationData(TargetFieldUpdateData):
    """Payload of an `update_field_validation` instruction."""

    validation: ValidationRule


class UpdateFieldOptionsData(TargetFieldUpdateData):
    """Payload of an `update_field_options` instruction."""

    options: list[str]
