"""Reconciliation orchestration: validate, fix, re-validate."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from structlog.contextvars import bound_contextvars

from formbridge import logger
from formbridge.applicator import FixApplicator
from formbridge.async_runner import run_async
from formbridge.descriptors import bind_mappings, parse_mappings, parse_source_fields, parse_target_fields
from formbridge.exceptions import DescriptorError
from formbridge.fixes import FixGenerator
from formbridge.mapping_store import FileMappingStore
from formbridge.typing.models import (
    FieldDescriptor,
    ReconciliationReport,
    ReconcileRequest,
    ValidationFinding,
)
from formbridge.validator import FieldMappingValidator, summarize_findings

if TYPE_CHECKING:
    from collections.abc import Sequence

    from formbridge.settings import Settings
    from formbridge.typing.protocol import MappingStore


def load_field_payloads(path: Path, *, key: str = "fields") -> list[dict[str, Any]]:
    """Read a JSON list of records, bare or wrapped in an object under `key`.

    Args:
        path (Path): JSON file path.
        key (str): Wrapper key holding the list.

    Raises:
        DescriptorError: If the file does not hold a list of objects.

    Returns:
        list[dict[str, Any]]: Raw records.
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise DescriptorError(message=f"Invalid JSON in {path}: {exc}") from exc
    if isinstance(payload, dict):
        payload = payload.get(key)
    if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
        raise DescriptorError(message=f"Expected a list of objects in {path}")
    return payload


def _bound_fields(
    source_fields: Sequence[FieldDescriptor],
    store: MappingStore,
) -> tuple[list[FieldDescriptor], list[FieldDescriptor]]:
    """Return both field sets with the store's mappings bound as identity keys."""
    return bind_mappings(source_fields, store.list_target_fields(), store.list_mappings())


def validate_against_store(
    source_fields: Sequence[FieldDescriptor],
    store: MappingStore,
    *,
    validator: FieldMappingValidator | None = None,
) -> list[ValidationFinding]:
    """Validate source fields against the store's current target fields and mappings.

    Args:
        source_fields (Sequence[FieldDescriptor]): PDF form fields.
        store (MappingStore): Mapping store.
        validator (FieldMappingValidator | None): Validator, default one when None.

    Returns:
        list[ValidationFinding]: Ordered findings.
    """
    bound_sources, bound_targets = _bound_fields(source_fields, store)
    return (validator or FieldMappingValidator()).validate(bound_sources, bound_targets)


async def arun_auto_fix(
    source_fields: Sequence[FieldDescriptor],
    store: MappingStore,
    *,
    apply: bool = False,
    validator: FieldMappingValidator | None = None,
    generator: FixGenerator | None = None,
) -> ReconciliationReport:
    """Validate, generate fixes and optionally apply them, then re-validate.

    Re-validation starts only after every fix of the batch has completed.

    Args:
        source_fields (Sequence[FieldDescriptor]): PDF form fields.
        store (MappingStore): Mapping store receiving the fixes.
        apply (bool): Apply generated fixes.
        validator (FieldMappingValidator | None): Validator, default one when None.
        generator (FixGenerator | None): Fix generator, default one when None.

    Returns:
        ReconciliationReport: Findings before and after, fixes and their results.
    """
    validator = validator or FieldMappingValidator()
    generator = generator or FixGenerator(validator.table, similarity_threshold=validator.similarity_threshold)

    bound_sources, bound_targets = _bound_fields(source_fields, store)
    initial = validator.validate(bound_sources, bound_targets)
    fixes = generator.generate(initial, bound_targets, source_fields=bound_sources)
    if not apply:
        return ReconciliationReport(
            initial_findings=initial,
            fixes=fixes,
            findings=initial,
            summary=summarize_findings(initial),
        )

    results = await FixApplicator(store).aapply_fixes(fixes)
    findings = validate_against_store(source_fields, store, validator=validator)
    logger.info(
        "Auto-fix completed",
        extra={"fixes": len(fixes), "findings_before": len(initial), "findings_after": len(findings)},
    )
    return ReconciliationReport(
        initial_findings=initial,
        fixes=fixes,
        results=results,
        findings=findings,
        summary=summarize_findings(findings),
        applied=True,
    )


def run_auto_fix(
    source_fields: Sequence[FieldDescriptor],
    store: MappingStore,
    *,
    apply: bool = False,
    settings: Settings | None = None,
) -> ReconciliationReport:
    """Sync entry point for `arun_auto_fix`.

    Args:
        source_fields (Sequence[FieldDescriptor]): PDF form fields.
        store (MappingStore): Mapping store receiving the fixes.
        apply (bool): Apply generated fixes.
        settings (Settings | None): Runtime settings providing the similarity threshold.

    Returns:
        ReconciliationReport: Reconciliation outcome.
    """
    validator = None
    if settings is not None:
        validator = FieldMappingValidator(similarity_threshold=settings.similarity_threshold)
    return run_async(arun_auto_fix(source_fields, store, apply=apply, validator=validator), operation="auto-fix")


def _open_store(request: ReconcileRequest, settings: Settings) -> FileMappingStore:
    """Open the template store and seed it from the request's input files."""
    store = FileMappingStore(
        root=request.store_dir or Path(settings.store_dir),
        template_id=request.template_id,
    )
    if request.target_path is not None:
        store.replace_target_fields(parse_target_fields(load_field_payloads(request.target_path)))
    if request.mappings_path is not None:
        for mapping in parse_mappings(load_field_payloads(request.mappings_path, key="mappings")):
            store.save_mapping(mapping)
    return store


def run_reconcile(request: ReconcileRequest, settings: Settings) -> ReconciliationReport:
    """Top-level reconciliation flow used by CLI.

    Log records emitted during the run carry the template id.

    Args:
        request (ReconcileRequest): Reconciliation request.
        settings (Settings): Runtime settings.

    Returns:
        ReconciliationReport: Reconciliation outcome.
    """
    with bound_contextvars(template_id=request.template_id):
        store = _open_store(request, settings)
        source_fields = parse_source_fields(load_field_payloads(request.source_path))

        if request.generate_fixes:
            report = run_auto_fix(source_fields, store, apply=request.apply_fixes, settings=settings)
        else:
            validator = FieldMappingValidator(similarity_threshold=settings.similarity_threshold)
            findings = validate_against_store(source_fields, store, validator=validator)
            report = ReconciliationReport(
                initial_findings=findings,
                findings=findings,
                summary=summarize_findings(findings),
            )
        logger.info(
            "Reconciliation finished",
            extra={"errors": report.summary.errors, "warnings": report.summary.warnings, "applied": report.applied},
        )
    return report.model_copy(update={"template_id": request.template_id})


def persist_report(report: ReconciliationReport, path: Path) -> None:
    """Persist a reconciliation report as JSON.

    Args:
        report (ReconciliationReport): Report payload.
        path (Path): Output path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report.model_dump_json(indent=2), encoding="utf-8")
