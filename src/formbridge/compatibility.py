"""Source-to-target type compatibility rules."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from formbridge.typing.enums import FieldType

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

_FALLBACK_TARGET_TYPE = FieldType.TEXT.value


def _normalize(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    return normalized or None


class TypeCompatibilityTable:
    """Immutable table of which target types accept each source type.

    The same object carries the canonical conversion used when a fix has to pick
    one target type for a source type.
    """

    __slots__ = ("_allowed", "_canonical")

    def __init__(
        self,
        allowed: Mapping[str, Iterable[str]],
        canonical: Mapping[str, str],
    ) -> None:
        self._allowed = MappingProxyType(
            {
                source.lower(): frozenset(target.lower() for target in targets)
                for source, targets in allowed.items()
            },
        )
        self._canonical = MappingProxyType(
            {source.lower(): target.lower() for source, target in canonical.items()},
        )

    @property
    def source_types(self) -> frozenset[str]:
        """Return source types with at least one compatible target type."""
        return frozenset(self._allowed)

    def allowed_targets(self, source_type: str | None) -> frozenset[str]:
        """Return target types accepted for a source type.

        Args:
            source_type (str | None): Source field type, any case.

        Returns:
            frozenset[str]: Accepted target types; empty for unknown or missing types.
        """
        key = _normalize(source_type)
        if key is None:
            return frozenset()
        return self._allowed.get(key, frozenset())

    def is_compatible(self, source_type: str | None, target_type: str | None) -> bool:
        """Return whether a target type accepts values of a source type.

        Args:
            source_type (str | None): Source field type.
            target_type (str | None): Target field type.

        Returns:
            bool: False when either type is missing or the pair is not listed.
        """
        target = _normalize(target_type)
        if target is None:
            return False
        return target in self.allowed_targets(source_type)

    def canonical_target_type(self, source_type: str | None) -> str:
        """Return the target type a fix should convert to for a source type.

        Args:
            source_type (str | None): Source field type.

        Returns:
            str: Canonical target type, `text` when the source type is unknown.
        """
        key = _normalize(source_type)
        if key is None:
            return _FALLBACK_TARGET_TYPE
        return self._canonical.get(key, _FALLBACK_TARGET_TYPE)

    def __repr__(self) -> str:
        return f"TypeCompatibilityTable(sources={sorted(self._allowed)!r})"


_CHOICE_TARGETS = (FieldType.OPTION, FieldType.SELECT, FieldType.ENUM)

DEFAULT_TYPE_COMPATIBILITY = TypeCompatibilityTable(
    allowed={
        FieldType.TEXT: (FieldType.TEXT, FieldType.STRING, FieldType.EMAIL, FieldType.PHONE),
        FieldType.NUMBER: (FieldType.NUMBER, FieldType.INTEGER, FieldType.FLOAT),
        FieldType.DATE: (FieldType.DATE, FieldType.DATETIME),
        FieldType.CHECKBOX: (FieldType.BOOLEAN, FieldType.CHECKBOX),
        FieldType.RADIO: _CHOICE_TARGETS,
        FieldType.SELECT: _CHOICE_TARGETS,
    },
    canonical={
        FieldType.TEXT: FieldType.TEXT,
        FieldType.NUMBER: FieldType.NUMBER,
        FieldType.DATE: FieldType.DATE,
        FieldType.CHECKBOX: FieldType.BOOLEAN,
        FieldType.RADIO: FieldType.OPTION,
        FieldType.SELECT: FieldType.OPTION,
    },
)
