"""
End-to-end checks of the planning endpoint through an in-process HTTP client.
"""

import json

import numpy as np
import pytest

from ur5e_pmp.config import JOINT_Q_MAX, PLAN_ROUTE


def _plan(client, **body):
    return client.post(PLAN_ROUTE, json=body)


def test_health(http_client):
    resp = http_client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_plan_basic_response(http_client):
    resp = _plan(http_client, q_target=[1.0, 0, 0, 0, 0, 0], T=1.0, dt=0.5)
    assert resp.status_code == 200
    data = resp.json()
    assert data["dt"] == 0.5
    assert data["unit"] == "rad"
    traj = data["trajectory"]
    assert [p["t"] for p in traj] == [0.0, 0.5, 1.0]
    assert traj[0]["q"] == pytest.approx([0.0] * 6)
    assert traj[-1]["q"] == pytest.approx([1.0, 0, 0, 0, 0, 0])
    assert set(traj[0]) == {"t", "q"}


def test_defaults_give_fifty_one_points(http_client):
    resp = _plan(http_client, q_target=[0.1] * 6)
    assert resp.status_code == 200
    data = resp.json()
    assert data["dt"] == 0.02
    assert len(data["trajectory"]) == 51
    assert data["trajectory"][-1]["t"] == 1.0


def test_successive_plans_chain_from_last_goal(http_client):
    _plan(http_client, q_target=[0.5] * 6, T=1.0, dt=0.1)
    resp = _plan(http_client, q_target=[0.0] * 6, T=1.0, dt=0.1)
    traj = resp.json()["trajectory"]
    assert traj[0]["q"] == pytest.approx([0.5] * 6)
    assert traj[-1]["q"] == pytest.approx([0.0] * 6, abs=1e-12)

    state = http_client.get("/arm/state").json()
    assert state["q"] == pytest.approx([0.0] * 6, abs=1e-12)
    assert state["dq"] == [0.0] * 6


def test_sessions_are_isolated_by_robot_id(http_client):
    _plan(http_client, q_target=[0.7] * 6, robot_id="left")
    resp = _plan(http_client, q_target=[0.2] * 6, robot_id="right")
    assert resp.json()["trajectory"][0]["q"] == pytest.approx([0.0] * 6)
    assert http_client.get("/arm/state", params={"robot_id": "left"}).json()["q"] == pytest.approx([0.7] * 6)


def test_reset_returns_pose_to_zero(http_client):
    _plan(http_client, q_target=[0.4] * 6)
    resp = http_client.post("/arm/reset")
    assert resp.status_code == 200
    assert http_client.get("/arm/state").json()["q"] == [0.0] * 6


def test_target_outside_limits_planned_in_full(http_client):
    resp = _plan(http_client, q_target=[5.0, 0, 0, 0, 0, 0], T=1.0, dt=0.5)
    assert resp.status_code == 200
    assert resp.json()["trajectory"][-1]["q"][0] == pytest.approx(5.0)
    assert http_client.get("/arm/state").json()["q"][0] == pytest.approx(JOINT_Q_MAX)


def test_include_pmp_exposes_costates_and_cost(http_client):
    resp = _plan(http_client, q_target=[1.0] * 6, T=1.0, dt=0.05, include_pmp=True)
    traj = resp.json()["trajectory"]
    costs = [p["J_acc"] for p in traj]
    assert costs[0] == 0.0
    assert np.all(np.diff(costs) >= 0)
    # 6 joints x 360 d^2 / T^5, right Riemann sum within a few percent
    assert costs[-1] == pytest.approx(6 * 360.0, rel=0.05)
    assert traj[0]["dq"] == pytest.approx([0.0] * 6, abs=1e-12)


def test_body_without_json_content_type_is_parsed(http_client):
    body = json.dumps({"q_target": [0.1] * 6, "T": 1.0, "dt": 0.5})
    resp = http_client.post(PLAN_ROUTE, content=body, headers={"Content-Type": "text/plain"})
    assert resp.status_code == 200
    assert len(resp.json()["trajectory"]) == 3


@pytest.mark.parametrize(
    "payload,detail",
    [
        (b"{not json", "Bad JSON body"),
        (b"", "Request body must be a JSON object"),
        (json.dumps({"T": 1.0}).encode(), "Not enough parameters: q_target (array)"),
        (json.dumps({"q_target": 3}).encode(), "Not enough parameters: q_target (array)"),
        (json.dumps({"q_target": [0, 0, 0, 0, 0]}).encode(), "q_target must have 6 values"),
    ],
)
def test_validation_errors_are_400(http_client, payload, detail):
    resp = http_client.post(PLAN_ROUTE, content=payload, headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json() == {"detail": detail, "error": "ValidationError"}


def test_invalid_duration_is_400_and_pose_unchanged(http_client):
    _plan(http_client, q_target=[0.3] * 6)
    resp = _plan(http_client, q_target=[0.9] * 6, T=0.0)
    assert resp.status_code == 400
    assert resp.json()["error"] == "InvalidDuration"
    assert http_client.get("/arm/state").json()["q"] == pytest.approx([0.3] * 6)
