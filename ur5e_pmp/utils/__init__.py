from .errors import (
    DimensionMismatchError,
    ErrorKind,
    InvalidDurationError,
    PlanningError,
    PlanResult,
    SingularSystemError,
    ValidationError,
)
from .linalg import solve6

__all__ = [
    "ErrorKind",
    "PlanningError",
    "DimensionMismatchError",
    "InvalidDurationError",
    "SingularSystemError",
    "ValidationError",
    "PlanResult",
    "solve6",
]
