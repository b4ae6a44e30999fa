"""
HTTP surface of the planner.

POST /arm/plan_pmp_q plans from the session's tracked pose to q_target and
returns { dt, unit, trajectory: [ {t, q[6]}, ... ] }.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from ur5e_pmp import __version__
from ur5e_pmp.config import DEFAULT_ROBOT_ID, PLAN_ROUTE, PLANNER_WORKERS
from ur5e_pmp.protocol.types import PlanRequest, build_plan_response
from ur5e_pmp.server.state import SessionManager
from ur5e_pmp.utils.errors import PlanningError, ValidationError

logger = logging.getLogger(__name__)


def create_app(sessions: Optional[SessionManager] = None, max_workers: int = PLANNER_WORKERS) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        sessions: Session registry; a fresh one is created when omitted
        max_workers: Threads for per-joint coefficient solves (0 = serial)
    """
    app = FastAPI(title="UR5e PMP planner", version=__version__)
    app.state.sessions = sessions if sessions is not None else SessionManager()
    app.state.max_workers = max_workers

    @app.exception_handler(ValidationError)
    async def _on_validation_error(request: Request, exc: ValidationError):
        logger.warning(f"Rejected request to {request.url.path}: {exc.original_message}")
        return JSONResponse(status_code=400, content={"detail": exc.original_message, "error": exc.kind.value})

    @app.exception_handler(PlanningError)
    async def _on_planning_error(request: Request, exc: PlanningError):
        logger.warning(f"Planning failed for {request.url.path}: {exc}")
        return JSONResponse(status_code=400, content={"detail": exc.original_message, "error": exc.kind.value})

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post(PLAN_ROUTE)
    async def plan_pmp_q(request: Request):
        # Parse the body regardless of Content-Type
        raw = await request.body()
        try:
            body = json.loads(raw) if raw else None
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValidationError("Bad JSON body") from e

        req = PlanRequest.from_dict(body)
        session = app.state.sessions.get(req.robot_id)
        trajectory = await run_in_threadpool(
            session.plan_to, req.q_target, req.T, req.dt, max_workers=app.state.max_workers
        )
        logger.info(
            f"[{req.robot_id}] planned {len(trajectory)} samples T={req.T} dt={req.dt} J={trajectory.final_cost:.6g}"
        )
        return build_plan_response(trajectory, req.dt, include_pmp=req.include_pmp)

    @app.get("/arm/state")
    def arm_state(robot_id: str = DEFAULT_ROBOT_ID):
        st = app.state.sessions.get(robot_id).current_state()
        return {"robot_id": robot_id, "q": st.q.tolist(), "dq": st.dq.tolist(), "unit": "rad"}

    @app.post("/arm/reset")
    def arm_reset(robot_id: str = DEFAULT_ROBOT_ID):
        app.state.sessions.get(robot_id).reset()
        return {"robot_id": robot_id, "status": "reset"}

    return app
