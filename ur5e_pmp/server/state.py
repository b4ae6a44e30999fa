from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence
import threading
import logging

import numpy as np

from ur5e_pmp.config import DEFAULT_ROBOT_ID, DOF, JOINT_DQ_MAX, JOINT_Q_MAX, JOINT_Q_MIN
from ur5e_pmp.smooth_motion.pmp import PMPTrajectory, plan_pmp_minimum_jerk
from ur5e_pmp.utils.errors import DimensionMismatchError

logger = logging.getLogger(__name__)


@dataclass
class ArmState:
    """Joint positions (rad) and velocities (rad/s)."""
    q: np.ndarray
    dq: np.ndarray


def _limit_vector(value: float | Sequence[float], dof: int, name: str) -> np.ndarray:
    arr = np.asarray(value, dtype=np.float64)
    if arr.ndim == 0:
        return np.full(dof, float(arr))
    if arr.shape != (dof,):
        raise DimensionMismatchError(f"{name} must have {dof} values, got {arr.size}")
    return arr.copy()


class JointStateModel:
    """
    Clamped joint state with a first-order integration step.

    Very simple dynamic model:
        ddq = tau
        dq += dt * ddq
        q  += dt * dq
    """

    def __init__(
        self,
        dof: int = DOF,
        qmin: float | Sequence[float] = JOINT_Q_MIN,
        qmax: float | Sequence[float] = JOINT_Q_MAX,
        dqmax: float | Sequence[float] = JOINT_DQ_MAX,
    ):
        self.dof = int(dof)
        self.qmin = _limit_vector(qmin, self.dof, "qmin")
        self.qmax = _limit_vector(qmax, self.dof, "qmax")
        self.dqmax = _limit_vector(dqmax, self.dof, "dqmax")
        if np.any(self.qmin > self.qmax):
            raise ValueError("qmin must not exceed qmax")
        if np.any(self.dqmax < 0):
            raise ValueError("dqmax must be non-negative")
        self._q = np.zeros(self.dof)
        self._dq = np.zeros(self.dof)
        self._tau = np.zeros(self.dof)

    @property
    def state(self) -> ArmState:
        """Copy of the current state."""
        return ArmState(q=self._q.copy(), dq=self._dq.copy())

    def _checked(self, values: Sequence[float], name: str) -> np.ndarray:
        arr = np.asarray(values, dtype=np.float64)
        if arr.shape != (self.dof,):
            raise DimensionMismatchError(f"{name} must have {self.dof} values, got {arr.size}")
        return arr.copy()

    def set_state(self, q: Sequence[float], dq: Sequence[float]) -> None:
        """Replace positions and velocities, then enforce limits."""
        q_arr = self._checked(q, "q")
        dq_arr = self._checked(dq, "dq")
        self._q = q_arr
        self._dq = dq_arr
        self._clamp_state()

    def set_torque(self, tau: Sequence[float]) -> None:
        self._tau = self._checked(tau, "tau")

    def step(self, dt: float) -> None:
        """One explicit Euler step driven by the stored torque (acceleration = torque)."""
        self._dq += dt * self._tau
        np.clip(self._dq, -self.dqmax, self.dqmax, out=self._dq)
        self._q += dt * self._dq
        np.clip(self._q, self.qmin, self.qmax, out=self._q)

    def reset(self) -> None:
        self._q.fill(0.0)
        self._dq.fill(0.0)
        self._tau.fill(0.0)

    def _clamp_state(self) -> None:
        np.clip(self._q, self.qmin, self.qmax, out=self._q)
        np.clip(self._dq, -self.dqmax, self.dqmax, out=self._dq)


@dataclass
class ArmSession:
    """
    One robot instance: its tracked pose and the lock serializing its plans.
    """
    robot_id: str = DEFAULT_ROBOT_ID
    model: JointStateModel = field(default_factory=JointStateModel)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def current_state(self) -> ArmState:
        with self._lock:
            return self.model.state

    def plan_to(
        self,
        q_target: Sequence[float],
        T: float,
        dt: float,
        max_workers: Optional[int] = None,
    ) -> PMPTrajectory:
        """
        Plan from the tracked pose to q_target and make q_target the new pose.

        The read of the start pose, the plan and the pose update happen under
        the session lock. A failed plan leaves the pose unchanged.
        """
        with self._lock:
            q0 = self.model.state.q
            trajectory = plan_pmp_minimum_jerk(q0, q_target, T, dt, max_workers=max_workers)
            # Stop at the commanded goal; limits apply to the stored pose only
            self.model.set_state(np.asarray(q_target, dtype=np.float64), np.zeros(self.model.dof))
            logger.debug(f"[{self.robot_id}] pose -> {self.model.state.q.tolist()}")
            return trajectory

    def reset(self) -> None:
        with self._lock:
            self.model.reset()
            logger.info(f"[{self.robot_id}] session pose reset")


class SessionManager:
    """
    Registry of ArmSession objects keyed by robot id with thread-safe creation.
    """

    def __init__(self, dof: int = DOF):
        self.dof = dof
        self._sessions: Dict[str, ArmSession] = {}
        self._lock = threading.Lock()
        logger.info(f"SessionManager initialized for {dof}-DOF arms")

    def get(self, robot_id: str = DEFAULT_ROBOT_ID) -> ArmSession:
        """Return the session for robot_id, creating it at the zero pose on first use."""
        with self._lock:
            session = self._sessions.get(robot_id)
            if session is None:
                session = ArmSession(robot_id=robot_id, model=JointStateModel(self.dof))
                self._sessions[robot_id] = session
                logger.info(f"Created session '{robot_id}'")
            return session

    def robot_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._sessions)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()
