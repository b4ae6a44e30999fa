"""
Quintic polynomial primitives: boundary-value coefficient solve and evaluation.
"""

import math
from typing import Dict, Union

import numpy as np
from numpy.typing import NDArray

from ur5e_pmp.config import MIN_DURATION
from ur5e_pmp.utils.errors import InvalidDurationError
from ur5e_pmp.utils.linalg import solve6

TimeLike = Union[float, np.ndarray]


def quintic_coeffs(
    q0: float,
    v0: float,
    a0: float,
    q1: float,
    v1: float,
    a1: float,
    T: float,
) -> NDArray[np.float64]:
    """
    Quintic coefficients for general boundary conditions.

        q(0)=q0, dq(0)=v0, ddq(0)=a0
        q(T)=q1, dq(T)=v1, ddq(T)=a1

    Builds the 6x6 system A a = b from the polynomial and its first two
    derivatives at 0 and T, then solves it with solve6.

    Returns:
        numpy array of coefficients [a0, a1, a2, a3, a4, a5] for
        q(t) = a0 + a1*t + a2*t² + a3*t³ + a4*t⁴ + a5*t⁵

    Raises:
        InvalidDurationError: If T <= MIN_DURATION or T is not finite
    """
    if not T > MIN_DURATION:
        raise InvalidDurationError(f"quintic_coeffs: T too small (T={T}, floor {MIN_DURATION:g})")
    if not math.isfinite(T):
        raise InvalidDurationError(f"quintic_coeffs: T must be finite (T={T})")

    T2 = T * T
    T3 = T2 * T
    T4 = T3 * T
    T5 = T4 * T

    A = np.array(
        [
            [1.0, 0.0, 0.0, 0.0, 0.0, 0.0],  # q(0)
            [0.0, 1.0, 0.0, 0.0, 0.0, 0.0],  # dq(0)
            [0.0, 0.0, 2.0, 0.0, 0.0, 0.0],  # ddq(0)
            [1.0, T, T2, T3, T4, T5],  # q(T)
            [0.0, 1.0, 2.0 * T, 3.0 * T2, 4.0 * T3, 5.0 * T4],  # dq(T)
            [0.0, 0.0, 2.0, 6.0 * T, 12.0 * T2, 20.0 * T3],  # ddq(T)
        ]
    )
    b = np.array([q0, v0, a0, q1, v1, a1], dtype=np.float64)
    return solve6(A, b)


class QuinticPolynomial:
    """
    Single-axis quintic polynomial trajectory primitive.

    Provides C² continuous trajectories (continuous position, velocity,
    acceleration). With zero boundary velocity and acceleration this is the
    minimum-jerk profile between q0 and qf.
    """

    def __init__(
        self,
        q0: float,
        qf: float,
        v0: float = 0,
        vf: float = 0,
        a0: float = 0,
        af: float = 0,
        T: float = 1.0,
    ):
        """
        Generate quintic polynomial trajectory.

        Args:
            q0: Initial position
            qf: Final position
            v0: Initial velocity (default 0)
            vf: Final velocity (default 0)
            a0: Initial acceleration (default 0)
            af: Final acceleration (default 0)
            T: Duration of trajectory (must exceed MIN_DURATION)
        """
        self.T = T
        self.q0 = q0
        self.qf = qf

        self.boundary_conditions = {"q0": q0, "qf": qf, "v0": v0, "vf": vf, "a0": a0, "af": af}

        self.coeffs = quintic_coeffs(q0, v0, a0, qf, vf, af, T)
        self._prepare_derivative_coeffs()

    @classmethod
    def from_coeffs(cls, coeffs, T: float) -> "QuinticPolynomial":
        """Wrap an existing coefficient set without re-solving."""
        c = np.asarray(coeffs, dtype=np.float64)
        obj = cls.__new__(cls)
        obj.T = T
        obj.coeffs = c
        obj._prepare_derivative_coeffs()
        obj.q0 = obj.position(0.0)
        obj.qf = obj.position(T)
        obj.boundary_conditions = {
            "q0": obj.q0,
            "qf": obj.qf,
            "v0": obj.velocity(0.0),
            "vf": obj.velocity(T),
            "a0": obj.acceleration(0.0),
            "af": obj.acceleration(T),
        }
        return obj

    def _prepare_derivative_coeffs(self):
        """Pre-compute coefficients for velocity, acceleration, jerk and its derivatives."""
        c = self.coeffs
        self.vel_coeffs = np.array([c[1], 2 * c[2], 3 * c[3], 4 * c[4], 5 * c[5]])
        self.acc_coeffs = np.array([2 * c[2], 6 * c[3], 12 * c[4], 20 * c[5]])
        self.jerk_coeffs = np.array([6 * c[3], 24 * c[4], 60 * c[5]])
        self.snap_coeffs = np.array([24 * c[4], 120 * c[5]])
        self.crackle = 120 * c[5]

    @staticmethod
    def _horner(coeffs: np.ndarray, t: TimeLike) -> Union[float, np.ndarray]:
        """Evaluate at a scalar time or elementwise over an array of times."""
        t_arr = np.asarray(t, dtype=np.float64)
        result = np.full(t_arr.shape, coeffs[-1], dtype=np.float64)
        for i in range(len(coeffs) - 2, -1, -1):
            result = result * t_arr + coeffs[i]
        return float(result) if result.ndim == 0 else result

    def position(self, t: TimeLike) -> Union[float, np.ndarray]:
        """Evaluate position at time t using Horner's method."""
        return self._horner(self.coeffs, t)

    def velocity(self, t: TimeLike) -> Union[float, np.ndarray]:
        """Evaluate velocity at time t using Horner's method."""
        return self._horner(self.vel_coeffs, t)

    def acceleration(self, t: TimeLike) -> Union[float, np.ndarray]:
        """Evaluate acceleration at time t using Horner's method."""
        return self._horner(self.acc_coeffs, t)

    def jerk(self, t: TimeLike) -> Union[float, np.ndarray]:
        """Evaluate jerk at time t using Horner's method."""
        return self._horner(self.jerk_coeffs, t)

    def jerk_rate(self, t: TimeLike) -> Union[float, np.ndarray]:
        """du/dt, the fourth derivative of position."""
        return self._horner(self.snap_coeffs, t)

    def evaluate(self, t: TimeLike, derivative: int = 0) -> Union[float, np.ndarray]:
        """
        Unified evaluation function for any derivative order.

        Args:
            t: Time point, or array of time points, to evaluate
            derivative: 0=position, 1=velocity, 2=acceleration, 3=jerk,
                4=jerk rate, 5=jerk second derivative
        """
        if derivative == 0:
            return self.position(t)
        if derivative == 1:
            return self.velocity(t)
        if derivative == 2:
            return self.acceleration(t)
        if derivative == 3:
            return self.jerk(t)
        if derivative == 4:
            return self.jerk_rate(t)
        if derivative == 5:
            return self._horner(np.array([self.crackle]), t)
        raise ValueError(f"Derivative order {derivative} not supported (max is 5)")

    def validate_continuity(self, tolerance: float = 1e-10) -> Dict[str, bool]:
        """
        Validate that boundary conditions are satisfied.
        """
        scale = max(1.0, abs(self.boundary_conditions["q0"]), abs(self.boundary_conditions["qf"]))
        tol = tolerance * scale
        return {
            "q0": abs(self.position(0) - self.boundary_conditions["q0"]) < tol,
            "qf": abs(self.position(self.T) - self.boundary_conditions["qf"]) < tol,
            "v0": abs(self.velocity(0) - self.boundary_conditions["v0"]) < tol,
            "vf": abs(self.velocity(self.T) - self.boundary_conditions["vf"]) < tol,
            "a0": abs(self.acceleration(0) - self.boundary_conditions["a0"]) < tol,
            "af": abs(self.acceleration(self.T) - self.boundary_conditions["af"]) < tol,
        }
