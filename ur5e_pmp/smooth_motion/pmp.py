"""
PMP minimum-jerk trajectory planning (quintic per joint plus costates).

Model (triple integrator per joint):
    x1 = q,  x2 = dq,  x3 = ddq
    x1' = x2,  x2' = x3,  x3' = u   where u = dddq (jerk)

Cost functional:
    J = ∫_0^T (1/2) ||u(t)||^2 dt

Under dq(0)=ddq(0)=dq(T)=ddq(T)=0 the optimum is a quintic per joint.

PMP:
    H = (1/2)u^2 + λ1 x2 + λ2 x3 + λ3 u
    ∂H/∂u = u + λ3 = 0  ⇒  u* = -λ3
    dλ3/dt = -λ2,  dλ2/dt = -λ1
which gives λ3 = -u, λ2 = du/dt, λ1 = -d²u/dt².
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np
from numpy.polynomial import Polynomial
from numpy.typing import ArrayLike, NDArray

from ur5e_pmp.config import MIN_DT, MIN_DURATION, MIN_SAMPLES, PLANNER_WORKERS, TRACE
from ur5e_pmp.utils.errors import DimensionMismatchError, InvalidDurationError, PlanningError, PlanResult

from .quintic import QuinticPolynomial, quintic_coeffs

logger = logging.getLogger(__name__)


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class PMPPoint:
    """One trajectory sample with states, control, costates and running cost."""

    t: float
    q: NDArray[np.float64]
    dq: NDArray[np.float64]
    ddq: NDArray[np.float64]
    u: NDArray[np.float64]  # jerk
    lambda1: NDArray[np.float64]  # costate of q
    lambda2: NDArray[np.float64]  # costate of dq
    lambda3: NDArray[np.float64]  # costate of ddq, u = -lambda3
    J_acc: float = 0.0  # ≈ ∫_0^t (1/2)||u||^2 dt


@dataclass(frozen=True)
class PMPTrajectory:
    """Ordered PMP samples on [0, T] and the coefficients they came from."""

    points: tuple[PMPPoint, ...]
    T: float
    dt: float
    coeffs: NDArray[np.float64]  # shape (dof, 6)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[PMPPoint]:
        return iter(self.points)

    def __getitem__(self, idx: int) -> PMPPoint:
        return self.points[idx]

    @property
    def dof(self) -> int:
        return int(self.coeffs.shape[0])

    @property
    def times(self) -> NDArray[np.float64]:
        return np.array([p.t for p in self.points])

    @property
    def positions(self) -> NDArray[np.float64]:
        return np.vstack([p.q for p in self.points])

    @property
    def velocities(self) -> NDArray[np.float64]:
        return np.vstack([p.dq for p in self.points])

    @property
    def accelerations(self) -> NDArray[np.float64]:
        return np.vstack([p.ddq for p in self.points])

    @property
    def jerks(self) -> NDArray[np.float64]:
        return np.vstack([p.u for p in self.points])

    @property
    def costs(self) -> NDArray[np.float64]:
        return np.array([p.J_acc for p in self.points])

    @property
    def final_cost(self) -> float:
        return self.points[-1].J_acc


def sample_count(T: float, dt: float) -> int:
    """N = max(2, round(T / max(dt, MIN_DT))), rounding halves away from zero."""
    return max(MIN_SAMPLES, int(math.floor(T / max(dt, MIN_DT) + 0.5)))


def sample_times(T: float, dt: float) -> tuple[NDArray[np.float64], float]:
    """
    Sample instants t_k = k*dt for k=0..N, with the last one placed exactly at T.

    Returns:
        (times, step) where step is the interval the samples were laid out on.
        step equals dt unless dt is so coarse that an interior sample would
        reach T, in which case the N intervals are spread uniformly over [0, T].
    """
    if not (math.isfinite(T) and math.isfinite(dt)):
        raise InvalidDurationError(f"sample_times: T and dt must be finite (T={T}, dt={dt})")
    n = sample_count(T, dt)
    step = float(dt)
    if (n - 1) * step >= T:
        step = T / n
        logger.debug(f"dt={dt} too coarse for T={T}; using uniform step {step}")
    t = np.arange(n + 1, dtype=np.float64) * step
    np.minimum(t, T, out=t)
    t[-1] = T
    return t, step


def _as_vector(name: str, q: ArrayLike) -> NDArray[np.float64]:
    arr = np.asarray(q, dtype=np.float64)
    if arr.ndim != 1:
        raise DimensionMismatchError(f"{name} must be a 1-D joint vector, got shape {arr.shape}")
    return arr


def _solve_all(q0: np.ndarray, q1: np.ndarray, T: float, max_workers: int) -> NDArray[np.float64]:
    """Quintic coefficients per joint with v0=a0=v1=a1=0, shape (dof, 6)."""
    if not T > MIN_DURATION:
        raise InvalidDurationError(f"T too small (T={T}, floor {MIN_DURATION:g})")
    if not math.isfinite(T):
        raise InvalidDurationError(f"T must be finite (T={T})")
    dof = q0.shape[0]

    def solve(i: int) -> NDArray[np.float64]:
        return quintic_coeffs(float(q0[i]), 0.0, 0.0, float(q1[i]), 0.0, 0.0, T)

    if max_workers > 1 and dof > 1:
        with ThreadPoolExecutor(max_workers=min(max_workers, dof)) as pool:
            # map preserves joint order and re-raises the first failure
            rows = list(pool.map(solve, range(dof)))
    else:
        rows = [solve(i) for i in range(dof)]
    return np.vstack(rows) if rows else np.zeros((0, 6))


def _joint_columns(polys: list[QuinticPolynomial], t: NDArray[np.float64], derivative: int) -> NDArray[np.float64]:
    """One derivative order for every joint, shape (len(t), dof)."""
    if not polys:
        return np.zeros((t.shape[0], 0))
    return np.column_stack([p.evaluate(t, derivative) for p in polys])


def _validate_pair(q0: ArrayLike, q1: ArrayLike, func: str) -> tuple[np.ndarray, np.ndarray]:
    q0_arr = _as_vector("q0", q0)
    q1_arr = _as_vector("q1", q1)
    if q0_arr.shape != q1_arr.shape:
        raise DimensionMismatchError(f"{func}: size mismatch (q0 has {q0_arr.size}, q1 has {q1_arr.size})")
    return q0_arr, q1_arr


def plan_pmp_minimum_jerk(
    q0: Sequence[float],
    q1: Sequence[float],
    T: float,
    dt: float,
    max_workers: int | None = None,
) -> PMPTrajectory:
    """
    Plan a PMP minimum-jerk trajectory from q0 to q1 over T seconds.

    Args:
        q0: Start joint configuration
        q1: Goal joint configuration (same length as q0)
        T: Duration in seconds
        dt: Sample interval in seconds
        max_workers: Threads for the per-joint coefficient solves
            (None uses PLANNER_WORKERS; 0 or 1 is serial)

    Returns:
        PMPTrajectory with N+1 points, N = max(2, round(T/dt))

    Raises:
        DimensionMismatchError: q0 and q1 differ in length
        InvalidDurationError: T at or below the duration floor, or T or dt not finite
        SingularSystemError: Coefficient system could not be solved
    """
    q0_arr, q1_arr = _validate_pair(q0, q1, "plan_pmp_minimum_jerk")
    workers = PLANNER_WORKERS if max_workers is None else max_workers

    coeffs = _solve_all(q0_arr, q1_arr, T, workers)
    t, step = sample_times(T, dt)

    polys = [QuinticPolynomial.from_coeffs(row, T) for row in coeffs]
    q = _joint_columns(polys, t, 0)
    dq = _joint_columns(polys, t, 1)
    ddq = _joint_columns(polys, t, 2)
    u = _joint_columns(polys, t, 3)
    du_dt = _joint_columns(polys, t, 4)
    d2u_dt2 = _joint_columns(polys, t, 5)

    lambda3 = -u
    lambda2 = du_dt
    lambda1 = -d2u_dt2

    # J_acc(t_0) = 0, then J_acc(t_k) = J_acc(t_{k-1}) + (1/2)||u(t_k)||^2 dt
    increments = 0.5 * np.sum(u * u, axis=1) * step
    increments[0] = 0.0
    J_acc = np.cumsum(increments)

    points = tuple(
        PMPPoint(
            t=float(t[k]),
            q=_frozen(q[k].copy()),
            dq=_frozen(dq[k].copy()),
            ddq=_frozen(ddq[k].copy()),
            u=_frozen(u[k].copy()),
            lambda1=_frozen(lambda1[k].copy()),
            lambda2=_frozen(lambda2[k].copy()),
            lambda3=_frozen(lambda3[k].copy()),
            J_acc=float(J_acc[k]),
        )
        for k in range(t.shape[0])
    )
    if logger.isEnabledFor(TRACE):
        for p in points:
            logger.log(TRACE, "t=%.4f q=%s u=%s J=%.6g", p.t, p.q, p.u, p.J_acc)
    logger.debug(
        f"Planned {len(points)} samples over T={T} dt={dt} for {q0_arr.size} joints, J={points[-1].J_acc:.6g}"
    )
    return PMPTrajectory(points=points, T=float(T), dt=float(dt), coeffs=_frozen(coeffs))


def try_plan_pmp_minimum_jerk(
    q0: Sequence[float],
    q1: Sequence[float],
    T: float,
    dt: float,
    max_workers: int | None = None,
) -> PlanResult:
    """plan_pmp_minimum_jerk, returning a PlanResult instead of raising."""
    try:
        return PlanResult.success(plan_pmp_minimum_jerk(q0, q1, T, dt, max_workers=max_workers))
    except PlanningError as e:
        logger.debug(f"Planning failed: {e}")
        return PlanResult.failure(e)


def plan_minjerk(q0: Sequence[float], q1: Sequence[float], T: float, dt: float) -> NDArray[np.float64]:
    """
    Plan a min-jerk position table with zero boundary velocity/acceleration.

    Returns: array of shape (N+1, 1+dof), rows [t, q_1, ..., q_dof]
    """
    q0_arr, q1_arr = _validate_pair(q0, q1, "plan_minjerk")
    coeffs = _solve_all(q0_arr, q1_arr, T, 0)
    t, _step = sample_times(T, dt)
    q = _joint_columns([QuinticPolynomial.from_coeffs(row, T) for row in coeffs], t, 0)
    return np.column_stack([t, q])


def analytic_cost(coeffs: ArrayLike, T: float) -> float:
    """
    Exact J = ∫_0^T (1/2)||u(t)||^2 dt for quintic coefficient rows.

    Args:
        coeffs: Array of shape (dof, 6), one [a0..a5] row per joint
        T: Integration horizon
    """
    rows = np.atleast_2d(np.asarray(coeffs, dtype=np.float64))
    total = 0.0
    for row in rows:
        jerk = Polynomial(row).deriv(3)
        integral = (0.5 * jerk * jerk).integ()
        total += float(integral(T) - integral(0.0))
    return total


class MinimumJerkTrajectoryPlanner:
    """
    Minimum-jerk planner bound to a sample interval and worker count.

    Stateless between calls; safe to share across sessions.
    """

    def __init__(self, dt: float, max_workers: int | None = None):
        self.dt = float(dt)
        self.max_workers = PLANNER_WORKERS if max_workers is None else int(max_workers)

    def plan(self, q0: Sequence[float], q1: Sequence[float], T: float) -> PMPTrajectory:
        return plan_pmp_minimum_jerk(q0, q1, T, self.dt, max_workers=self.max_workers)

    def try_plan(self, q0: Sequence[float], q1: Sequence[float], T: float) -> PlanResult:
        return try_plan_pmp_minimum_jerk(q0, q1, T, self.dt, max_workers=self.max_workers)
