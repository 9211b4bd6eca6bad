"""Tests for the HTTP surface."""

import pytest
from fastapi.testclient import TestClient

from workspace_sync.application.api.api_server import create_app
from workspace_sync.infrastructure.observability.logging import metrics

from conftest import WORKSPACE_ID


@pytest.fixture
def client(service):
    with TestClient(create_app(service)) as client:
        yield client


@pytest.fixture
def onboarded(client):
    response = client.put("/users/u1", json={"email": "ada@example.com"})
    assert response.status_code == 200
    response = client.get(f"/users/u1/workspaces/{WORKSPACE_ID}")
    assert response.status_code == 200
    return client


def test_list_workspaces_and_achievements(client):
    workspaces = client.get("/workspaces").json()
    achievements = client.get("/achievements").json()

    assert [workspace["id"] for workspace in workspaces] == [WORKSPACE_ID]
    assert achievements[0]["id"] == "first_task"


def test_open_workspace_returns_merged_tasks(onboarded):
    view = onboarded.get(f"/users/u1/workspaces/{WORKSPACE_ID}").json()

    assert view["workspace_id"] == WORKSPACE_ID
    assert [task["id"] for task in view["tasks"]] == ["t1", "t2", "t3"]
    assert view["tasks"][0]["is_completed"] is False
    assert view["summary"]["total_tasks"] == 3


def test_complete_task_returns_metrics(onboarded):
    response = onboarded.post("/users/u1/tasks/t3/complete")

    assert response.status_code == 200
    body = response.json()
    assert body["experience_hours"] == 10
    assert "first_hard" in body["achievements"]
    assert onboarded.get("/users/u1/metrics").json() == body


def test_complete_task_with_explicit_time(onboarded):
    response = onboarded.post(
        "/users/u1/tasks/t1/complete",
        json={"completed_at": "2024-01-03T08:00:00Z"}
    )

    assert response.status_code == 200
    assert response.json()["contribution_history"] == {"2024-01-03": 1}


def test_answer_and_toggle(onboarded):
    answer = onboarded.put("/users/u1/tasks/t1/answers/q1", json={"answer": "AOV"}).json()
    toggled = onboarded.post("/users/u1/tasks/t1/toggle").json()

    assert answer["answers"] == {"q1": "AOV"}
    assert toggled["is_completed"] is True
    assert toggled["answers"] == {"q1": "AOV"}


def test_detail_and_solution(onboarded):
    detail = onboarded.post("/users/u1/tasks/t2/detail")
    solution = onboarded.post("/users/u1/tasks/t2/solution")

    assert detail.status_code == 200
    assert detail.json()["detail_loaded"] is True
    assert solution.json() == {"task_id": "t2", "solution_writeup": "## Solution for Design pricing A/B test"}


def test_navigation_is_restored(onboarded):
    response = onboarded.put("/users/u1/navigation", json={"view": "detail", "task_id": "t3"})
    view = onboarded.get(f"/users/u1/workspaces/{WORKSPACE_ID}").json()

    assert response.json()["last_active_view"] == "detail"
    assert view["active_task"]["id"] == "t3"


def test_unknown_task_is_404(onboarded):
    response = onboarded.post("/users/u1/tasks/missing/complete")

    assert response.status_code == 404
    assert response.json()["error"] == "NotFound"
    assert response.json()["data"] == {"kind": "task", "id": "missing"}


def test_unknown_workspace_is_404(client):
    client.put("/users/u1", json={"email": "ada@example.com"})

    response = client.get("/users/u1/workspaces/nowhere")

    assert response.status_code == 404


def test_follow_up_cap_is_409(onboarded):
    for _ in range(3):
        assert onboarded.post("/users/u1/tasks/t1/follow-ups").status_code == 201

    response = onboarded.post("/users/u1/tasks/t1/follow-ups")

    assert response.status_code == 409
    assert response.json()["data"] == {"parent_id": "t1", "limit": 3}


def test_generation_failure_is_502(client, generator):
    generator.fail = True
    client.put("/users/u1", json={"email": "ada@example.com"})

    response = client.get(f"/users/u1/workspaces/{WORKSPACE_ID}")

    assert response.status_code == 502
    assert response.json()["data"] == {"workspace_id": WORKSPACE_ID}


def test_generate_environment(client):
    response = client.post(f"/workspaces/{WORKSPACE_ID}/environment")

    assert response.status_code == 200
    assert "postgres" in response.json()["docker_compose"]
    assert client.post("/workspaces/nowhere/environment").status_code == 404


def test_ops_metrics_report_and_reset(client):
    metrics.reset()
    client.put("/users/u1", json={"email": "ada@example.com"})
    client.get(f"/users/u1/workspaces/{WORKSPACE_ID}")

    snapshot = client.get("/ops/metrics").json()
    assert snapshot["counters"]["content_cache.miss"] == 1
    assert snapshot["latencies"]["generation.roadmap"]["count"] == 1

    assert client.delete("/ops/metrics").status_code == 204
    assert client.get("/ops/metrics").json() == {"counters": {}, "latencies": {}}
