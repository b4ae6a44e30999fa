"""
Custom exception types and result values for the UR5e PMP planning pipeline.
Keep this focused and non-redundant; prefer built-ins where appropriate.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Kinds of planning failure reported to callers."""

    DIMENSION_MISMATCH = "DimensionMismatch"
    INVALID_DURATION = "InvalidDuration"
    SINGULAR_SYSTEM = "SingularSystem"
    VALIDATION = "ValidationError"


class PlanningError(RuntimeError):
    """Trajectory generation/planning failure."""

    kind: ErrorKind

    def __init__(self, message: str):
        self.original_message = message
        super().__init__(f"{self.kind.value}: {message}")

    def __str__(self):
        return f"{self.kind.value}: {self.original_message}"


class DimensionMismatchError(PlanningError):
    """Vector or matrix lengths disagree."""

    kind = ErrorKind.DIMENSION_MISMATCH


class InvalidDurationError(PlanningError):
    """Duration at or below the numeric floor."""

    kind = ErrorKind.INVALID_DURATION


class SingularSystemError(PlanningError):
    """Pivot magnitude below tolerance during elimination."""

    kind = ErrorKind.SINGULAR_SYSTEM


class ValidationError(ValueError):
    """Malformed external request, rejected before planning."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str):
        self.original_message = message
        super().__init__(message)


@dataclass(frozen=True)
class PlanResult:
    """
    Outcome of a planning call as a value.

    Exactly one of ``value`` or ``error_kind`` is set.
    """

    value: Any = None
    error_kind: ErrorKind | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, value: Any) -> PlanResult:
        return cls(value=value)

    @classmethod
    def failure(cls, error: PlanningError) -> PlanResult:
        return cls(error_kind=error.kind, message=error.original_message)

    def unwrap(self) -> Any:
        """Return the value or re-raise the typed error it stands for."""
        if self.error_kind is None:
            return self.value
        raise _ERROR_TYPES[self.error_kind](self.message)


_ERROR_TYPES: dict[ErrorKind, type[PlanningError]] = {
    ErrorKind.DIMENSION_MISMATCH: DimensionMismatchError,
    ErrorKind.INVALID_DURATION: InvalidDurationError,
    ErrorKind.SINGULAR_SYSTEM: SingularSystemError,
}
