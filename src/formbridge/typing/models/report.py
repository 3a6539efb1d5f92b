"""Reconciliation request and report models."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from formbridge.typing.models.findings import ValidationFinding, ValidationSummary
from formbridge.typing.models.fixes import FixAction, FixResult


class ReconciliationReport(BaseModel):
    """Outcome of a validate, fix and re-validate run."""

    model_config = ConfigDict(extra="forbid")

    template_id: str | None = None
    initial_findings: list[ValidationFinding] = Field(default_factory=list)
    fixes: list[FixAction] = Field(default_factory=list)
    results: list[FixResult] = Field(default_factory=list)
    findings: list[ValidationFinding] = Field(default_factory=list)
    summary: ValidationSummary = Field(default_factory=ValidationSummary)
    applied: bool = False


class ReconcileRequest(BaseModel):
    """Reconciliation request settings."""

    model_config = ConfigDict(extra="forbid")

    source_path: Path
    target_path: Path | None = None
    mappings_path: Path | None = None
    template_id: str = "default"
    store_dir: Path | None = None
    output_path: Path | None = None
    generate_fixes: bool = False
    apply_fixes: bool = False

    @field_validator("source_path", "target_path", "mappings_path")
    @classmethod
    def _validate_input_file(cls, value: Path | None) -> Path | None:
        """Ensure input files exist.

        Args:
            value (Path | None): Input path.

        Raises:
            ValueError: If the path does not exist or is not a file.

        Returns:
            Path | None: Validated input path.
        """
        if value is None:
            return value
        if not value.exists():
            raise ValueError(f"Input path does not exist: {value}")  # noqa: TRY003
        if not value.is_file():
            raise ValueError(f"Input path is not a file: {value}")  # noqa: TRY003
        return value
