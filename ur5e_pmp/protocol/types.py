"""
Type definitions for the UR5e PMP planning protocol.

Defines the typed request validated once at the transport boundary and the
TypedDicts describing the JSON response.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Literal, Mapping, Sequence, TypedDict

from ur5e_pmp.config import (
    DEFAULT_DT_S,
    DEFAULT_DURATION_S,
    DEFAULT_ROBOT_ID,
    DOF,
    MAX_SAMPLES,
    MIN_DT,
)
from ur5e_pmp.smooth_motion.pmp import PMPTrajectory, sample_count
from ur5e_pmp.utils.errors import ValidationError

Unit = Literal["rad"]


class TrajectorySample(TypedDict, total=False):
    """One serialized trajectory point; PMP fields only when requested."""
    t: float
    q: list[float]
    dq: list[float]
    ddq: list[float]
    u: list[float]
    lambda1: list[float]
    lambda2: list[float]
    lambda3: list[float]
    J_acc: float


class PlanResponse(TypedDict):
    """Response body of the planning endpoint."""
    dt: float
    unit: Unit
    trajectory: list[TrajectorySample]


class ErrorResponse(TypedDict, total=False):
    detail: str
    error: str


def _number(value: Any, name: str) -> float:
    # bool is an int subclass but never a valid numeric field
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number")
    f = float(value)
    if not math.isfinite(f):
        raise ValidationError(f"{name} must be finite")
    return f


@dataclass(frozen=True)
class PlanRequest:
    """Planning request: target joints (rad), duration and sample interval (s)."""
    q_target: tuple[float, ...]
    T: float = DEFAULT_DURATION_S
    dt: float = DEFAULT_DT_S
    robot_id: str = DEFAULT_ROBOT_ID
    include_pmp: bool = False

    @classmethod
    def from_dict(cls, body: Any) -> PlanRequest:
        """
        Validate a decoded JSON body.

        Raises:
            ValidationError: On a non-object body, missing, non-array or short
                q_target, non-numeric T/dt, non-positive dt, or a sample count
                above MAX_SAMPLES
        """
        if not isinstance(body, Mapping):
            raise ValidationError("Request body must be a JSON object")

        arr = body.get("q_target")
        if arr is None or not isinstance(arr, list):
            raise ValidationError("Not enough parameters: q_target (array)")
        if len(arr) < DOF:
            raise ValidationError(f"q_target must have {DOF} values")
        q_target = tuple(_number(v, f"q_target[{i}]") for i, v in enumerate(arr[:DOF]))

        T = _number(body["T"], "T") if "T" in body else DEFAULT_DURATION_S
        dt = _number(body["dt"], "dt") if "dt" in body else DEFAULT_DT_S
        if dt < MIN_DT:
            raise ValidationError("dt must be positive")
        if T > 0 and sample_count(T, dt) > MAX_SAMPLES:
            raise ValidationError(f"T/dt exceeds {MAX_SAMPLES} samples")

        robot_id = body.get("robot_id", DEFAULT_ROBOT_ID)
        if not isinstance(robot_id, str) or not robot_id:
            raise ValidationError("robot_id must be a non-empty string")
        include_pmp = body.get("include_pmp", False)
        if not isinstance(include_pmp, bool):
            raise ValidationError("include_pmp must be a boolean")

        return cls(q_target=q_target, T=T, dt=dt, robot_id=robot_id, include_pmp=include_pmp)


def to_q6(q_in: Sequence[float]) -> list[float]:
    """Always DOF values; missing entries padded with zeros."""
    return [float(q_in[i]) if i < len(q_in) else 0.0 for i in range(DOF)]


def build_plan_response(trajectory: PMPTrajectory, dt: float, include_pmp: bool = False) -> PlanResponse:
    """Format a trajectory as { dt, unit, trajectory: [ {t, q[6]}, ... ] }."""
    samples: list[TrajectorySample] = []
    for p in trajectory:
        item: TrajectorySample = {"t": p.t, "q": to_q6(p.q)}
        if include_pmp:
            item["dq"] = p.dq.tolist()
            item["ddq"] = p.ddq.tolist()
            item["u"] = p.u.tolist()
            item["lambda1"] = p.lambda1.tolist()
            item["lambda2"] = p.lambda2.tolist()
            item["lambda3"] = p.lambda3.tolist()
            item["J_acc"] = p.J_acc
        samples.append(item)
    return {"dt": dt, "unit": "rad", "trajectory": samples}
