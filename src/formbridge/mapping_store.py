"""Mapping stores holding Bubble fields and confirmed mappings per template."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from formbridge import logger
from formbridge.exceptions import MappingStoreError
from formbridge.typing.enums import FieldOrigin
from formbridge.typing.models import FieldDescriptor, FieldMapping, MappingDocument

_MAPPING_FILE_VERSION = 2
_MAPPING_FILE_SUFFIX = ".mapping.json"


class InMemoryMappingStore(BaseModel):
    """Mapping store kept in process memory."""

    model_config = ConfigDict(extra="forbid")

    document: MappingDocument = Field(default_factory=lambda: MappingDocument(template_id="default"))

    @classmethod
    def from_fields(
        cls,
        target_fields: list[FieldDescriptor],
        *,
        mappings: list[FieldMapping] | None = None,
        template_id: str = "default",
    ) -> InMemoryMappingStore:
        """Build a store seeded with target fields.

        Args:
            target_fields (list[FieldDescriptor]): Bubble fields.
            mappings (list[FieldMapping] | None): Confirmed mappings.
            template_id (str): Template identifier.

        Returns:
            InMemoryMappingStore: Seeded store.
        """
        return cls(
            document=MappingDocument(
                template_id=template_id,
                target_fields=list(target_fields),
                mappings=list(mappings or []),
            ),
        )

    def list_target_fields(self) -> list[FieldDescriptor]:
        """Return a snapshot of the target fields."""
        return list(self.document.target_fields)

    def list_mappings(self) -> list[FieldMapping]:
        """Return a snapshot of the confirmed mappings."""
        return list(self.document.mappings)

    def save_mapping(self, mapping: FieldMapping) -> None:
        """Store a mapping, replacing any mapping of the same source field.

        Args:
            mapping (FieldMapping): Mapping to store.
        """
        kept = [
            existing
            for existing in self.document.mappings
            if existing.source_field_name != mapping.source_field_name
        ]
        kept.append(mapping)
        self.document.mappings = kept
        self._committed()

    def create_target_field(self, field: FieldDescriptor) -> FieldDescriptor:
        """Add a target field.

        Args:
            field (FieldDescriptor): Field to create.

        Raises:
            MappingStoreError: If a target field with the same name exists.

        Returns:
            FieldDescriptor: Stored descriptor tagged as target.
        """
        if any(existing.name == field.name for existing in self.document.target_fields):
            raise MappingStoreError(message=f"Target field already exists: {field.name}")
        created = field.model_copy(update={"origin": FieldOrigin.TARGET})
        self.document.target_fields = [*self.document.target_fields, created]
        self._committed()
        return created

    def update_target_field(self, name: str, changes: dict[str, Any]) -> FieldDescriptor:
        """Replace attributes of a target field, re-validating the result.

        Args:
            name (str): Target field name.
            changes (dict[str, Any]): Attribute values to replace.

        Raises:
            MappingStoreError: If the field is unknown or the change is invalid.

        Returns:
            FieldDescriptor: Updated descriptor.
        """
        fields = list(self.document.target_fields)
        for index, existing in enumerate(fields):
            if existing.name != name:
                continue
            payload = {**existing.model_dump(), **changes, "origin": FieldOrigin.TARGET}
            try:
                updated = FieldDescriptor.model_validate(payload)
            except ValidationError as exc:
                raise MappingStoreError(message=f"Invalid update for target field {name}: {exc}") from exc
            fields[index] = updated
            self.document.target_fields = fields
            self._committed()
            return updated
        raise MappingStoreError(message=f"Unknown target field: {name}")

    def _committed(self) -> None:
        """Hook run after every successful mutation."""


class FileMappingStore(InMemoryMappingStore):
    """Mapping store persisted as one JSON document per template."""

    root: Path = Field(description="Directory holding mapping documents.")
    template_id: str = Field(default="default", description="Template whose document is loaded.")

    def model_post_init(self, __context: object, /) -> None:
        """Create the store directory and load the template document when present.

        Args:
            __context (object): Pydantic model context.
        """
        self.root.mkdir(parents=True, exist_ok=True)
        path = self.path
        if path.exists():
            self.document = self.load(path)
        else:
            self.document = MappingDocument(template_id=self.template_id)

    @property
    def path(self) -> Path:
        """Return the document path for the configured template."""
        safe_name = re.sub(r"[^a-z0-9._-]+", "-", self.template_id.lower()).strip("-")
        if not safe_name:
            safe_name = "template"
        return self.root / f"{safe_name}{_MAPPING_FILE_SUFFIX}"

    def replace_target_fields(self, target_fields: list[FieldDescriptor]) -> None:
        """Replace the stored Bubble fields, keeping confirmed mappings.

        Args:
            target_fields (list[FieldDescriptor]): Fresh schema fields.
        """
        self.document.target_fields = [
            field.model_copy(update={"origin": FieldOrigin.TARGET}) for field in target_fields
        ]
        self._committed()

    @staticmethod
    def load(path: Path) -> MappingDocument:
        """Load a mapping document.

        Args:
            path (Path): Document path.

        Raises:
            MappingStoreError: If the file is not a valid mapping document.

        Returns:
            MappingDocument: Loaded document.
        """
        _validate_mapping_file_path(path)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            return MappingDocument.model_validate(_migrate_mapping_payload(payload, path))
        except (json.JSONDecodeError, ValidationError) as exc:
            raise MappingStoreError(message=f"Invalid mapping document {path}: {exc}") from exc

    def save(self) -> Path:
        """Persist the current document.

        Returns:
            Path: Written file path.
        """
        path = self.path
        envelope = {
            "mapping_file_version": _MAPPING_FILE_VERSION,
            "document": self.document.model_dump(mode="json"),
        }
        path.write_text(json.dumps(envelope, indent=2, sort_keys=True), encoding="utf-8")
        logger.info("Mapping document saved", extra={"mapping_path": str(path)})
        return path

    def list_documents(self) -> list[Path]:
        """List mapping documents in the store directory.

        Returns:
            list[Path]: Document paths.
        """
        return sorted(self.root.glob(f"*{_MAPPING_FILE_SUFFIX}"))

    def _committed(self) -> None:
        self.save()


def _migrate_mapping_payload(payload: object, path: Path) -> dict[str, object]:
    """Migrate a mapping file payload to the current document format.

    Version 1 files hold the bare document, without envelope or template id.

    Args:
        payload (object): Raw JSON payload.
        path (Path): Source path, used to derive a missing template id.

    Raises:
        MappingStoreError: If payload is not a JSON object.

    Returns:
        dict[str, object]: Document payload.
    """
    if not isinstance(payload, dict):
        raise MappingStoreError(message="Mapping payload must be a JSON object")

    payload_obj = cast("dict[str, object]", payload)
    document = payload_obj
    embedded = payload_obj.get("document")
    if isinstance(embedded, dict):
        document = cast("dict[str, object]", embedded)

    migrated = dict(document)
    if "template_id" not in migrated:
        migrated["template_id"] = path.name.removesuffix(_MAPPING_FILE_SUFFIX)
    if "version" not in migrated:
        migrated["version"] = 1
    return migrated


def _validate_mapping_file_path(path: Path) -> None:
    """Validate a mapping file path before loading.

    Args:
        path (Path): Mapping file path.

    Raises:
        MappingStoreError: If path is not a `pathlib.Path` or not a mapping JSON file.
    """
    if not isinstance(path, Path):
        raise MappingStoreError(message=f"Mapping path must be a pathlib.Path instance, got: {type(path)!r}")
    if not path.is_file():
        raise MappingStoreError(message=f"Mapping path is not a file: {path}")
    if not path.name.endswith(_MAPPING_FILE_SUFFIX):
        raise MappingStoreError(message=f"Mapping path must end with '{_MAPPING_FILE_SUFFIX}': {path}")
