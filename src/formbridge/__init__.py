"""formbridge: reconcile PDF form fields with Bubble.io data types."""

from formbridge.async_runner import run_async
from formbridge.exceptions import (
    AsyncExecutionError,
    DescriptorError,
    FixApplicationError,
    MappingStoreError,
    PackageError,
    SettingsError,
    ValidationBlockedError,
)
from formbridge.logging import configure_logging, get_logger
from formbridge.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("formbridge")

__all__ = [
    "AsyncExecutionError",
    "DescriptorError",
    "FixApplicationError",
    "MappingStoreError",
    "PackageError",
    "Settings",
    "SettingsError",
    "ValidationBlockedError",
    "__version__",
    "configure_logging",
    "get_logger",
    "get_settings",
    "logger",
    "run_async",
]
