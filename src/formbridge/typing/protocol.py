"""Persistence collaborator interface."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from formbridge.typing.models import FieldDescriptor, FieldMapping


class MappingStore(Protocol):
    """Target-side persistence used by the fix applicator and the reconciler.

    Implementations may additionally expose `a`-prefixed coroutine variants of the
    write methods (`asave_mapping`, `acreate_target_field`, `aupdate_target_field`);
    the applicator awaits those when present.
    """

    def list_target_fields(self) -> list[FieldDescriptor]:
        """Return the current target fields.

        Returns:
            list[FieldDescriptor]: Target descriptors in schema order.
        """

    def list_mappings(self) -> list[FieldMapping]:
        """Return confirmed mappings.

        Returns:
            list[FieldMapping]: Stored mappings.
        """

    def save_mapping(self, mapping: FieldMapping) -> None:
        """Store a confirmed mapping, replacing any mapping of the same source field.

        Args:
            mapping: Mapping to store.
        """

    def create_target_field(self, field: FieldDescriptor) -> FieldDescriptor:
        """Provision a new target field.

        Args:
            field: Descriptor of the field to create.

        Returns:
            FieldDescriptor: Stored descriptor.
        """

    def update_target_field(self, name: str, changes: dict[str, Any]) -> FieldDescriptor:
        """Apply attribute changes to an existing target field.

        Args:
            name: Target field name.
            changes: Attribute values to replace.

        Returns:
            FieldDescriptor: Updated descriptor.
        """
