"""Pytest marker auto-assignment by folder and shared field fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from formbridge import logger
from formbridge.typing.enums import FieldOrigin
from formbridge.typing.models import FieldDescriptor, ValidationRule


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    """Mark collected tests located under tests/<marker>/."""
    target_dir = Path(config.rootpath) / "tests" / marker
    target_dir = target_dir.resolve()

    for item in items:
        try:
            path = Path(str(item.fspath)).resolve()
        except OSError:
            logger.warning(
                f"Could not resolve path for test item {item.name!s}; skipping {marker!s} marker assignment",
            )
            continue

        if path == target_dir or target_dir in path.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Apply directory-based markers to test items."""
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")


@pytest.fixture
def pdf_fields() -> list[FieldDescriptor]:
    """Fields detected on a small registration form."""
    return [
        FieldDescriptor(name="first_name", type="text", required=True, identity_key="pdf-1"),
        FieldDescriptor(
            name="email",
            type="text",
            required=True,
            validation=ValidationRule(pattern=r"^[^@]+@[^@]+$", message="Invalid email"),
            identity_key="pdf-2",
        ),
        FieldDescriptor(name="age", type="number", identity_key="pdf-3"),
        FieldDescriptor(name="plan", type="radio", options=["basic", "pro"], identity_key="pdf-4"),
    ]


@pytest.fixture
def bubble_fields() -> list[FieldDescriptor]:
    """Bubble data type matching the registration form exactly."""
    return [
        FieldDescriptor(name="first_name", type="text", required=True, origin=FieldOrigin.TARGET),
        FieldDescriptor(
            name="email",
            type="email",
            required=True,
            validation=ValidationRule(pattern=r"^[^@]+@[^@]+$", message="Enter a valid email"),
            origin=FieldOrigin.TARGET,
        ),
        FieldDescriptor(name="age", type="integer", origin=FieldOrigin.TARGET),
        FieldDescriptor(name="plan", type="option", options=["basic", "pro"], origin=FieldOrigin.TARGET),
    ]
