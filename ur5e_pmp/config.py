"""
Central configuration for UR5e PMP planner tunables and shared constants.
"""

import logging
import os

TRACE: int = 5
logging.addLevelName(TRACE, "TRACE")
# Add Logger.trace if missing
if not hasattr(logging.Logger, "trace"):

    def _trace(self, msg, *args, **kwargs):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)

    logging.Logger.trace = _trace  # type: ignore[attr-defined]
    logging.TRACE = TRACE  # type: ignore[attr-defined]

TRACE_ENABLED = str(os.getenv("UR5E_PMP_TRACE", "0")).lower() in ("1", "true", "yes", "on")

logger = logging.getLogger(__name__)

# Degrees of freedom of the tracked arm (UR5e)
DOF: int = 6

# Numerical floors
SINGULAR_TOL: float = 1e-12  # pivot magnitude below which a system is singular
MIN_DURATION: float = 1e-9  # T at or below this is rejected
MIN_DT: float = 1e-9  # sample interval floor used when computing N
MIN_SAMPLES: int = 2

# Joint limits applied to the tracked session pose (rad, rad/s)
JOINT_Q_MIN: float = -3.14159
JOINT_Q_MAX: float = 3.14159
JOINT_DQ_MAX: float = 4.0


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}, using {default}")
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default


# Request defaults (seconds)
DEFAULT_DURATION_S: float = _env_float("UR5E_PMP_DEFAULT_T", 1.0)
DEFAULT_DT_S: float = _env_float("UR5E_PMP_DEFAULT_DT", 0.02)

# Per-DOF coefficient solves on a thread pool; 0 keeps them serial
PLANNER_WORKERS: int = max(0, _env_int("UR5E_PMP_WORKERS", 0))

# Server/runtime defaults (overridable by env/CLI in the server entry point)
SERVER_IP: str = os.getenv("UR5E_PMP_HOST", "127.0.0.1")
SERVER_PORT: int = _env_int("UR5E_PMP_PORT", 8848)
PLAN_ROUTE: str = "/arm/plan_pmp_q"
DEFAULT_ROBOT_ID: str = "default"
LOG_LEVEL_DEFAULT: str = os.getenv("UR5E_PMP_LOG_LEVEL", "INFO").upper()

# Requests whose T/dt would exceed this many samples are rejected at the boundary
MAX_SAMPLES: int = _env_int("UR5E_PMP_MAX_SAMPLES", 200_000)
