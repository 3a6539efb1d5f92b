"""Persisted mapping document model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from formbridge.typing.models.fields import FieldDescriptor, FieldMapping


class MappingDocument(BaseModel):
    """Target-side state of one template: Bubble fields and confirmed mappings."""

    model_config = ConfigDict(extra="forbid")

    template_id: str
    version: int = 1
    target_fields: list[FieldDescriptor] = Field(default_factory=list)
    mappings: list[FieldMapping] = Field(default_factory=list)
