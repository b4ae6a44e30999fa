"""
UR5e PMP Python Package

Minimum-jerk joint trajectory planning for a UR5e arm, certified with
Pontryagin-Minimum-Principle costates, plus an HTTP planning server.

Key components:
- solve6: 6x6 Gaussian elimination with partial pivoting
- quintic_coeffs / QuinticPolynomial: quintic boundary-value solve and evaluation
- plan_pmp_minimum_jerk: sampled trajectory with jerk, costates and running cost
- JointStateModel / ArmSession / SessionManager: tracked pose per robot
- create_app: FastAPI app exposing POST /arm/plan_pmp_q
"""

from ._version import __version__
from .server.state import ArmSession, JointStateModel, SessionManager
from .smooth_motion import (
    MinimumJerkTrajectoryPlanner,
    PMPPoint,
    PMPTrajectory,
    QuinticPolynomial,
    analytic_cost,
    plan_minjerk,
    plan_pmp_minimum_jerk,
    quintic_coeffs,
    try_plan_pmp_minimum_jerk,
)
from .utils import (
    DimensionMismatchError,
    ErrorKind,
    InvalidDurationError,
    PlanningError,
    PlanResult,
    SingularSystemError,
    ValidationError,
    solve6,
)

__all__ = [
    "__version__",
    "solve6",
    "quintic_coeffs",
    "QuinticPolynomial",
    "plan_pmp_minimum_jerk",
    "try_plan_pmp_minimum_jerk",
    "plan_minjerk",
    "analytic_cost",
    "MinimumJerkTrajectoryPlanner",
    "PMPPoint",
    "PMPTrajectory",
    "JointStateModel",
    "ArmSession",
    "SessionManager",
    "ErrorKind",
    "PlanResult",
    "PlanningError",
    "DimensionMismatchError",
    "InvalidDurationError",
    "SingularSystemError",
    "ValidationError",
]
