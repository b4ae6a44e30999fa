from .pmp import (
    MinimumJerkTrajectoryPlanner,
    PMPPoint,
    PMPTrajectory,
    analytic_cost,
    plan_minjerk,
    plan_pmp_minimum_jerk,
    sample_count,
    try_plan_pmp_minimum_jerk,
)
from .quintic import QuinticPolynomial, quintic_coeffs

__all__ = [
    "quintic_coeffs",
    "QuinticPolynomial",
    "PMPPoint",
    "PMPTrajectory",
    "MinimumJerkTrajectoryPlanner",
    "plan_pmp_minimum_jerk",
    "try_plan_pmp_minimum_jerk",
    "plan_minjerk",
    "analytic_cost",
    "sample_count",
]
