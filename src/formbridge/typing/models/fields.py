"""Field descriptor and mapping models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from formbridge.typing.enums import CHOICE_FIELD_TYPES, FieldOrigin


class ValidationRule(BaseModel):
    """Validation constraint attached to a field.

    Bounds keep their JSON type: integers stay integers, dates stay strings.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    pattern: str | None = None
    min: int | float | str | None = None
    max: int | float | str | None = None
    message: str


class FieldDescriptor(BaseModel):
    """Source or target field as seen by the reconciliation engine."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    type: str | None = None
    required: bool = False
    options: list[str] = Field(default_factory=list)
    validation: ValidationRule | None = None
    identity_key: str | None = Field(default=None, alias="identityKey")
    origin: FieldOrigin = FieldOrigin.SOURCE

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: object) -> object:
        """Lower-case field types and treat blanks as missing.

        Args:
            value (object): Raw type value.

        Returns:
            object: Normalized type, or None when missing.
        """
        if value is None:
            return None
        if isinstance(value, str):
            normalized = value.strip().lower()
            return normalized or None
        return value

    @property
    def is_choice(self) -> bool:
        """Return whether the field type is an option list.

        Other types may still carry options, such as checkbox export values; those
        are kept but never compared.
        """
        return self.type in CHOICE_FIELD_TYPES

    def corresponds_to(self, other: FieldDescriptor) -> bool:
        """Return whether two descriptors denote the same field.

        Only exact name equality or a shared identity key counts.

        Args:
            other (FieldDescriptor): Descriptor from the opposite field set.

        Returns:
            bool: True when the fields correspond.
        """
        if self.name == other.name:
            return True
        return self.identity_key is not None and self.identity_key == other.identity_key


class FieldMapping(BaseModel):
    """Confirmed correspondence between a source field and a target field."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    source_field_name: str = Field(min_length=1, alias="sourceFieldName")
    target_field_name: str = Field(min_length=1, alias="targetFieldName")
    transformations: list[str] = Field(default_factory=list)
