"""Execute fix actions against a mapping store."""

from __future__ import annotations

import asyncio
import inspect
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from formbridge import logger
from formbridge.async_runner import run_async
from formbridge.exceptions import FixApplicationError, PackageError
from formbridge.typing.enums import CHOICE_FIELD_TYPES, FieldOrigin, FixActionType
from formbridge.typing.models import (
    CreateTargetFieldData,
    FieldDescriptor,
    FieldMapping,
    FixAction,
    FixResult,
    TargetFieldUpdateData,
    UpdateFieldConstraintsData,
    UpdateFieldOptionsData,
    UpdateFieldTypeData,
    UpdateFieldValidationData,
    UpdateMappingData,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping, Sequence

    from formbridge.typing.protocol import MappingStore

    FixPayload = FixAction | Mapping[str, Any]


class FixApplicator:
    """Apply fixes one by one; a failing fix never prevents the others.

    Results only reflect the store writes. Callers re-validate against the store once
    the whole batch has completed.
    """

    def __init__(self, store: MappingStore) -> None:
        self.store = store
        self._handlers: dict[str, Callable[[dict[str, Any]], Awaitable[str]]] = {
            FixActionType.UPDATE_MAPPING: self._update_mapping,
            FixActionType.CREATE_TARGET_FIELD: self._create_target_field,
            FixActionType.UPDATE_FIELD_TYPE: self._update_field_type,
            FixActionType.UPDATE_FIELD_CONSTRAINTS: self._update_field_constraints,
            FixActionType.UPDATE_FIELD_VALIDATION: self._update_field_validation,
            FixActionType.UPDATE_FIELD_OPTIONS: self._update_field_options,
        }

    async def aapply_fix(self, fix: FixPayload) -> FixResult:
        """Apply one fix and report the outcome.

        Args:
            fix (FixPayload): Fix action or its raw payload.

        Returns:
            FixResult: `success=False` with the reason when the fix cannot be applied.
        """
        try:
            action = fix if isinstance(fix, FixAction) else FixAction.model_validate(fix)
        except ValidationError as exc:
            logger.warning("Malformed fix rejected", extra={"errors": exc.error_count()})
            return FixResult(success=False, message=f"Malformed fix: {exc.errors()[0]['msg']}")

        action_type = str(action.action.type)
        result = FixResult(
            success=False,
            message="",
            fix_type=action.type.value,
            action_type=action_type,
            field_name=action.field.name,
        )
        try:
            handler = self._handlers.get(action_type)
            if handler is None:
                raise FixApplicationError(
                    action_type=action_type,
                    message=f"Unknown fix action type: {action_type}",
                )
            message = await handler(action.action.data)
        except (PackageError, ValidationError) as exc:
            logger.warning(
                "Failed to apply fix",
                extra={"action_type": action_type, "field": action.field.name, "error": str(exc)},
            )
            return result.model_copy(update={"message": str(exc)})
        except Exception as exc:
            logger.exception("Unexpected error while applying fix", extra={"action_type": action_type})
            return result.model_copy(update={"message": f"Failed to apply fix: {exc}"})

        logger.info("Fix applied", extra={"action_type": action_type, "field": action.field.name})
        return result.model_copy(update={"success": True, "message": message})

    async def aapply_fixes(self, fixes: Sequence[FixPayload]) -> list[FixResult]:
        """Apply a batch of fixes concurrently and wait for all of them.

        Args:
            fixes (Sequence[FixPayload]): Fix actions.

        Returns:
            list[FixResult]: One result per fix, in input order.
        """
        results = await asyncio.gather(*[self.aapply_fix(fix) for fix in fixes])
        failed = sum(1 for result in results if not result.success)
        logger.info("Fix batch applied", extra={"fixes": len(results), "failed": failed})
        return list(results)

    def apply_fix(self, fix: FixPayload) -> FixResult:
        """Sync variant of `aapply_fix`."""
        return run_async(self.aapply_fix(fix), operation="apply fix")

    def apply_fixes(self, fixes: Sequence[FixPayload]) -> list[FixResult]:
        """Sync variant of `aapply_fixes`; returns once every fix has completed."""
        return run_async(self.aapply_fixes(fixes), operation="apply fixes")

    async def _call_store(self, method: str, *args: object) -> Any:
        """Call a store method, preferring its `a`-prefixed coroutine variant."""
        async_method = getattr(self.store, f"a{method}", None)
        if async_method is not None:
            return await async_method(*args)
        outcome = getattr(self.store, method)(*args)
        if inspect.isawaitable(outcome):
            return await outcome
        return outcome

    async def _update_target(self, data: TargetFieldUpdateData, changes: dict[str, Any]) -> FieldDescriptor:
        return await self._call_store("update_target_field", data.field_name, changes)

    async def _update_mapping(self, raw: dict[str, Any]) -> str:
        data = UpdateMappingData.model_validate(raw)
        await self._call_store(
            "save_mapping",
            FieldMapping(source_field_name=data.source_field_name, target_field_name=data.target_field_name),
        )
        if data.source_field_id is not None:
            await self._call_store(
                "update_target_field",
                data.target_field_name,
                {"identity_key": data.source_field_id},
            )
        return "Field mapping updated"

    async def _create_target_field(self, raw: dict[str, Any]) -> str:
        data = CreateTargetFieldData.model_validate(raw)
        field = FieldDescriptor(
            name=data.name,
            type=data.type,
            required=data.required,
            validation=data.validation,
            options=data.options,
            origin=FieldOrigin.TARGET,
        )
        await self._call_store("create_target_field", field)
        return "Bubble field created"

    async def _update_field_type(self, raw: dict[str, Any]) -> str:
        data = UpdateFieldTypeData.model_validate(raw)
        changes: dict[str, Any] = {"type": data.new_type}
        if data.new_type.strip().lower() not in CHOICE_FIELD_TYPES:
            changes["options"] = []
        await self._update_target(data, changes)
        return "Field type updated"

    async def _update_field_constraints(self, raw: dict[str, Any]) -> str:
        data = UpdateFieldConstraintsData.model_validate(raw)
        await self._update_target(data, {"required": data.required})
        return "Field constraints updated"

    async def _update_field_validation(self, raw: dict[str, Any]) -> str:
        data = UpdateFieldValidationData.model_validate(raw)
        await self._update_target(data, {"validation": data.validation})
        return "Field validation updated"

    async def _update_field_options(self, raw: dict[str, Any]) -> str:
        data = UpdateFieldOptionsData.model_validate(raw)
        current = next(
            (field for field in await self._call_store("list_target_fields") if field.name == data.field_name),
            None,
        )
        existing = list(current.options) if current is not None else []
        known = set(existing)
        merged = existing + [option for option in dict.fromkeys(data.options) if option not in known]
        await self._update_target(data, {"options": merged})
        return "Field options updated"


def apply_fixes(fixes: Sequence[FixPayload], store: MappingStore) -> list[FixResult]:
    """Apply fixes against a store with a one-off applicator.

    Args:
        fixes (Sequence[FixPayload]): Fix actions.
        store (MappingStore): Persistence collaborator.

    Returns:
        list[FixResult]: One result per fix, in input order.
    """
    return FixApplicator(store).apply_fixes(fixes)
