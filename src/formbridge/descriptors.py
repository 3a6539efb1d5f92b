"""Boundary parsing of raw field payloads into descriptors."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from formbridge import logger
from formbridge.exceptions import DescriptorError
from formbridge.typing.enums import FieldOrigin
from formbridge.typing.models import FieldDescriptor, FieldMapping

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

_DESCRIPTOR_KEYS = frozenset({"name", "type", "required", "options", "validation"})
_IDENTITY_KEYS = ("identity_key", "identityKey")


def _pick_identity(payload: Mapping[str, Any], *fallbacks: object) -> str | None:
    for key in _IDENTITY_KEYS:
        value = payload.get(key)
        if value is not None:
            return str(value)
    for value in fallbacks:
        if value is not None:
            return str(value)
    return None


def _source_payload(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Reduce a PDF detector payload to descriptor attributes.

    The detector's own `_id` becomes the identity key.
    """
    cleaned = {key: value for key, value in payload.items() if key in _DESCRIPTOR_KEYS}
    cleaned["identity_key"] = _pick_identity(payload, payload.get("_id"))
    cleaned["origin"] = FieldOrigin.SOURCE
    return cleaned


def _target_payload(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Reduce a Bubble schema payload to descriptor attributes.

    `metadata.pdfFieldId` links the target to the source field it was mapped from.
    """
    cleaned = {key: value for key, value in payload.items() if key in _DESCRIPTOR_KEYS}
    metadata = payload.get("metadata")
    linked_id = metadata.get("pdfFieldId") if isinstance(metadata, dict) else None
    cleaned["identity_key"] = _pick_identity(payload, linked_id)
    cleaned["origin"] = FieldOrigin.TARGET
    return cleaned


def _parse_field_set(
    payloads: Iterable[Mapping[str, Any] | FieldDescriptor],
    *,
    origin: FieldOrigin,
) -> list[FieldDescriptor]:
    """Parse a field set and enforce unique names.

    Options on a non-choice field, such as checkbox export values, are kept and logged.

    Args:
        payloads (Iterable[Mapping[str, Any] | FieldDescriptor]): Raw payloads or descriptors.
        origin (FieldOrigin): Side of the mapping the set belongs to.

    Raises:
        DescriptorError: If a payload is invalid or names repeat.

    Returns:
        list[FieldDescriptor]: Parsed descriptors in input order.
    """
    to_payload = _source_payload if origin == FieldOrigin.SOURCE else _target_payload
    fields: list[FieldDescriptor] = []
    for index, payload in enumerate(payloads):
        if isinstance(payload, FieldDescriptor):
            fields.append(payload.model_copy(update={"origin": origin}))
            continue
        try:
            fields.append(FieldDescriptor.model_validate(to_payload(payload)))
        except ValidationError as exc:
            label = payload.get("name") or f"#{index}"
            raise DescriptorError(
                message=f"Invalid {origin} field {label}: {exc.errors()[0]['msg']}",
            ) from exc

    duplicates = sorted(name for name, count in Counter(field.name for field in fields).items() if count > 1)
    if duplicates:
        raise DescriptorError(message=f"Duplicate {origin} field names", field_names=duplicates)

    unchecked = [field.name for field in fields if field.options and not field.is_choice]
    if unchecked:
        logger.warning(
            "Options on non-choice fields are kept but not compared",
            extra={"origin": str(origin), "fields": unchecked},
        )
    return fields


def parse_source_fields(payloads: Iterable[Mapping[str, Any] | FieldDescriptor]) -> list[FieldDescriptor]:
    """Parse fields reported by the PDF form detector.

    Args:
        payloads (Iterable[Mapping[str, Any] | FieldDescriptor]): Detector output.

    Returns:
        list[FieldDescriptor]: Source descriptors.
    """
    return _parse_field_set(payloads, origin=FieldOrigin.SOURCE)


def parse_target_fields(payloads: Iterable[Mapping[str, Any] | FieldDescriptor]) -> list[FieldDescriptor]:
    """Parse fields reported by the Bubble schema provider.

    Args:
        payloads (Iterable[Mapping[str, Any] | FieldDescriptor]): Schema fields.

    Returns:
        list[FieldDescriptor]: Target descriptors.
    """
    return _parse_field_set(payloads, origin=FieldOrigin.TARGET)


def parse_mappings(payloads: Iterable[Mapping[str, Any]]) -> list[FieldMapping]:
    """Parse stored mapping records.

    Args:
        payloads (Iterable[Mapping[str, Any]]): Raw mapping records.

    Raises:
        DescriptorError: If a record is invalid.

    Returns:
        list[FieldMapping]: Parsed mappings.
    """
    try:
        return [FieldMapping.model_validate(payload) for payload in payloads]
    except ValidationError as exc:
        raise DescriptorError(message=f"Invalid mapping record: {exc.errors()[0]['msg']}") from exc


def bind_mappings(
    source_fields: Sequence[FieldDescriptor],
    target_fields: Sequence[FieldDescriptor],
    mappings: Sequence[FieldMapping],
) -> tuple[list[FieldDescriptor], list[FieldDescriptor]]:
    """Express confirmed mappings as shared identity keys.

    A mapped source field without an identity key is keyed by its name. Mappings that
    reference unknown fields are ignored.

    Args:
        source_fields (Sequence[FieldDescriptor]): Source descriptors.
        target_fields (Sequence[FieldDescriptor]): Target descriptors.
        mappings (Sequence[FieldMapping]): Confirmed mappings.

    Returns:
        tuple[list[FieldDescriptor], list[FieldDescriptor]]: Bound copies of both sets.
    """
    sources = {field.name: field for field in source_fields}
    target_names = {field.name for field in target_fields}

    source_keys: dict[str, str] = {}
    target_keys: dict[str, str] = {}
    for mapping in mappings:
        source = sources.get(mapping.source_field_name)
        if source is None or mapping.target_field_name not in target_names:
            continue
        key = source.identity_key or source.name
        source_keys[source.name] = key
        target_keys[mapping.target_field_name] = key

    bound_sources = [
        field.model_copy(update={"identity_key": source_keys[field.name]}) if field.name in source_keys else field
        for field in source_fields
    ]
    bound_targets = [
        field.model_copy(update={"identity_key": target_keys[field.name]}) if field.name in target_keys else field
        for field in target_fields
    ]
    return bound_sources, bound_targets
