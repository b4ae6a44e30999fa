from .types import PlanRequest, PlanResponse, TrajectorySample, build_plan_response, to_q6

__all__ = ["PlanRequest", "PlanResponse", "TrajectorySample", "build_plan_response", "to_q6"]
