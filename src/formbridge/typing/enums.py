"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class FieldOrigin(_EnumMixin):
    """Side of the mapping a field descriptor comes from."""

    SOURCE = "source"
    TARGET = "target"


class FieldType(_EnumMixin):
    """Field types known to the PDF detector and the Bubble schema."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SELECT = "select"
    BOOLEAN = "boolean"
    OPTION = "option"
    STRING = "string"
    EMAIL = "email"
    PHONE = "phone"
    INTEGER = "integer"
    FLOAT = "float"
    DATETIME = "datetime"
    ENUM = "enum"


CHOICE_FIELD_TYPES = frozenset({FieldType.RADIO, FieldType.SELECT, FieldType.OPTION, FieldType.ENUM})


class Severity(_EnumMixin):
    """Finding severity. Errors block completion, warnings can be acknowledged."""

    ERROR = "error"
    WARNING = "warning"


class FindingType(_EnumMixin):
    """Kind of mismatch reported by the validator."""

    MISSING_FIELD = "missing_field"
    UNUSED_FIELD = "unused_field"
    TYPE_MISMATCH = "type_mismatch"
    CONSTRAINT_MISMATCH = "constraint_mismatch"
    VALIDATION_MISMATCH = "validation_mismatch"
    OPTIONS_MISMATCH = "options_mismatch"
    NAME_MISMATCH = "name_mismatch"


class FixType(_EnumMixin):
    """Remediation strategy of a generated fix."""

    MAP_TO_EXISTING = "map_to_existing"
    CREATE_FIELD = "create_field"
    TYPE_CONVERSION = "type_conversion"
    UPDATE_CONSTRAINTS = "update_constraints"
    ADD_VALIDATION = "add_validation"
    UPDATE_OPTIONS = "update_options"


class FixActionType(_EnumMixin):
    """Executable instruction understood by the fix applicator."""

    UPDATE_MAPPING = "update_mapping"
    CREATE_TARGET_FIELD = "create_target_field"
    UPDATE_FIELD_TYPE = "update_field_type"
    UPDATE_FIELD_CONSTRAINTS = "update_field_constraints"
    UPDATE_FIELD_VALIDATION = "update_field_validation"
    UPDATE_FIELD_OPTIONS = "update_field_options"
