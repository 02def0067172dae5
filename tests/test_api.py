import asyncio

import pytest
from fastapi.testclient import TestClient

from longtask.deps import get_queue, get_store
from longtask import main as main_module
from longtask.main import app
from longtask.services.executor import TaskExecutor, TimedPhaseBody
from longtask.services.registry import TaskRegistry

from .fakes import BrokenStore


@pytest.fixture()
def client(store, queue):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_queue] = lambda: queue
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_start_task_returns_id_and_enqueues(client, queue):
    r = client.post("/tasks")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Task queued for processing"
    assert queue.items == [body["taskId"]]


def test_status_of_fresh_task_is_queued(client):
    task_id = client.post("/tasks").json()["taskId"]

    body = client.get(f"/tasks/{task_id}").json()

    assert body["success"] is True
    assert body["taskId"] == task_id
    assert body["status"] == "queued"
    assert body["progress"] == 0
    assert body["data"]["createdAt"]


def test_status_by_payload(client):
    task_id = client.post("/tasks").json()["taskId"]
    body = client.post("/tasks/status", json={"taskId": task_id}).json()
    assert body["status"] == "queued"


def test_unknown_task_is_not_found_answer(client):
    r = client.get("/tasks/task-1-missing")
    assert r.status_code == 200
    assert r.json() == {"success": False, "message": "Task not found"}


def test_completed_task_exposes_result(client, store):
    task_id = client.post("/tasks").json()["taskId"]
    executor = TaskExecutor(TaskRegistry(store), TimedPhaseBody(duration_seconds=0, phases=10))
    asyncio.run(executor.process(task_id))

    body = client.get(f"/tasks/{task_id}").json()

    assert body["status"] == "completed"
    assert body["progress"] == 100
    assert body["data"]["result"]["data"]["message"] == "Long-running task completed successfully!"
    assert "error" not in body["data"] or body["data"]["error"] is None


def test_store_failure_is_structured(queue):
    app.dependency_overrides[get_store] = lambda: BrokenStore()
    app.dependency_overrides[get_queue] = lambda: queue
    try:
        with TestClient(app) as client:
            r = client.post("/tasks")
            s = client.get("/tasks/task-1-a")
    finally:
        app.dependency_overrides.clear()

    assert r.status_code == 503
    assert r.json()["success"] is False
    assert "store is down" in r.json()["message"]
    assert s.status_code == 503
    assert queue.items == []


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_logging_is_configured_on_startup(store, queue, monkeypatch):
    calls = []
    monkeypatch.setattr(main_module, "configure_logging", lambda: calls.append(True))
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_queue] = lambda: queue
    try:
        assert calls == []
        with TestClient(app) as client:
            client.get("/health")
    finally:
        app.dependency_overrides.clear()

    assert calls == [True]
