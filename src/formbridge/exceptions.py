"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass, field


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class AsyncExecutionError(PackageError):
    """Raised when a coroutine driven from sync code fails."""

    result: BaseException
    operation: str = "async operation"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.operation} failed: {self.result}"


@dataclass(frozen=True)
class DescriptorError(PackageError):
    """Raised when a field set cannot be parsed into descriptors."""

    message: str
    field_names: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        """Return error message payload."""
        if self.field_names:
            return f"{self.message}: {', '.join(self.field_names)}"
        return self.message


@dataclass
class MappingStoreError(PackageError):
    """Raised when a mapping store read or write is rejected."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class FixApplicationError(PackageError):
    """Raised when a fix action cannot be executed."""

    action_type: str
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class ValidationBlockedError(PackageError):
    """Raised when a mapping cannot be completed because of outstanding findings."""

    error_count: int
    warning_count: int = 0

    def __str__(self) -> str:
        """Return error message payload."""
        if self.error_count:
            return f"Cannot complete with errors: {self.error_count} error(s) must be resolved"
        return f"Cannot complete with unacknowledged warnings: {self.warning_count} warning(s)"
