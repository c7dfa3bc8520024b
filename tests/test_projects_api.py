# tests/test_projects_api.py

from __future__ import annotations

from types import SimpleNamespace

from fastapi.testclient import TestClient

API = "/api/v1"


def test_create_project(client: TestClient, records: SimpleNamespace) -> None:
    r = client.post(
        f"{API}/projects/",
        json={"title": "Launch", "description": "Go live", "deadline": "2024-05-01", "created_by": records.bruno.id},
    )
    assert r.status_code == 201
    project = r.json()["data"]
    assert project["status"] == "pending"
    assert project["created_by_name"] == "Bruno"
    assert project["total_tasks"] == 0
    assert project["progress_percentage"] == 0
    assert project["is_overdue"] is True
    assert project["days_until_deadline"] == -31


def test_create_project_requires_description(client: TestClient, records: SimpleNamespace) -> None:
    r = client.post(f"{API}/projects/", json={"title": "Launch", "created_by": records.ana.id})
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_project_progress_through_api(client: TestClient, records: SimpleNamespace) -> None:
    project_id = records.open_project.id
    ids = []
    for status in ("done", "pending", "in_progress"):
        r = client.post(
            f"{API}/tasks/",
            json={"title": status, "status": status, "project_id": project_id, "created_by": records.ana.id},
        )
        ids.append(r.json()["data"]["id"])

    r = client.get(f"{API}/projects/{project_id}")
    project = r.json()["data"]
    assert project["total_tasks"] == 3
    assert project["completed_tasks"] == 1
    assert project["pending_tasks"] == 1
    assert project["in_progress_tasks"] == 1
    assert project["progress_percentage"] == 33.3

    r = client.get(f"{API}/projects/")
    listed = {p["id"]: p for p in r.json()["data"]}
    assert r.json()["total"] == 2
    assert listed[project_id]["progress_percentage"] == 33.3
    assert listed[records.closed_project.id]["progress_percentage"] == 0


def test_update_project_is_a_patch(client: TestClient, records: SimpleNamespace) -> None:
    project_id = records.open_project.id
    r = client.put(f"{API}/projects/{project_id}", json={"status": "cancelled"})
    assert r.status_code == 200
    project = r.json()["data"]
    assert project["status"] == "cancelled"
    assert project["title"] == "Website"

    # Now terminal: new tasks are refused
    r = client.post(
        f"{API}/tasks/",
        json={"title": "x", "project_id": project_id, "created_by": records.ana.id},
    )
    assert r.status_code == 400


def test_delete_project_leaves_tasks(client: TestClient, records: SimpleNamespace) -> None:
    project_id = records.open_project.id
    r = client.post(
        f"{API}/tasks/",
        json={"title": "orphan", "project_id": project_id, "created_by": records.ana.id},
    )
    task_id = r.json()["data"]["id"]

    r = client.delete(f"{API}/projects/{project_id}")
    assert r.status_code == 200
    assert client.get(f"{API}/projects/{project_id}").status_code == 404
    assert client.delete(f"{API}/projects/{project_id}").status_code == 404

    r = client.get(f"{API}/tasks/{task_id}")
    assert r.status_code == 200
    assert r.json()["data"]["project_title"] is None
