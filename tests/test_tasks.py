# tests/test_tasks.py

from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId

from .helpers import create_task


def test_create_then_get_round_trips_supplied_fields(client, auth_headers):
    created = create_task(
        client,
        auth_headers,
        title="  Write spec  ",
        description="Draft the API document",
        status="in-progress",
        priority="high",
        dueDate="2026-11-01T09:30:00Z",
    )

    resp = client.get(f"/api/tasks/{created['id']}", headers=auth_headers)

    assert resp.status_code == 200
    task = resp.get_json()
    assert task == created
    assert task["title"] == "Write spec"
    assert task["description"] == "Draft the API document"
    assert task["status"] == "in-progress"
    assert task["priority"] == "high"
    assert task["dueDate"] == "2026-11-01T09:30:00.000Z"
    assert task["createdAt"] == task["updatedAt"]


def test_create_applies_defaults(client, auth_headers, ada):
    task = create_task(client, auth_headers, title="Plain")

    assert task["status"] == "todo"
    assert task["priority"] == "medium"
    assert task["description"] == ""
    assert task["dueDate"] is None
    assert task["userId"] == ada["user"]["id"]


def test_create_ignores_client_supplied_owner(client, auth_headers, ada):
    task = create_task(client, auth_headers, title="Mine", userId="someone-else")

    assert task["userId"] == ada["user"]["id"]


def test_create_reports_all_field_errors(client, auth_headers):
    resp = client.post(
        "/api/tasks",
        json={"title": "   ", "status": "done", "priority": "urgent", "dueDate": "next week"},
        headers=auth_headers,
    )

    assert resp.status_code == 400
    errors = resp.get_json()["errors"]
    assert {e["field"] for e in errors} == {"title", "status", "priority", "dueDate"}


def test_create_requires_title(client, auth_headers):
    resp = client.post("/api/tasks", json={"description": "no title"}, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.get_json()["errors"] == [
        {"field": "title", "message": "Title is required", "value": None}
    ]


def test_create_rejects_non_object_body(client, auth_headers):
    resp = client.post("/api/tasks", json=["title"], headers=auth_headers)

    assert resp.status_code == 400


def test_date_only_due_date_is_accepted(client, auth_headers):
    task = create_task(client, auth_headers, dueDate="2026-12-24")

    assert task["dueDate"] == "2026-12-24T00:00:00.000Z"


def test_partial_update_leaves_other_fields_and_advances_updated_at(client, auth_headers):
    created = create_task(
        client, auth_headers, title="Original", description="keep me", priority="low"
    )

    resp = client.put(
        f"/api/tasks/{created['id']}", json={"status": "completed"}, headers=auth_headers
    )

    assert resp.status_code == 200
    updated = resp.get_json()
    assert updated["status"] == "completed"
    for field in ("title", "description", "priority", "dueDate", "createdAt", "userId"):
        assert updated[field] == created[field]
    assert updated["updatedAt"] > created["updatedAt"]


def test_empty_update_still_touches_updated_at(client, auth_headers):
    created = create_task(client, auth_headers)

    first = client.put(f"/api/tasks/{created['id']}", json={}, headers=auth_headers).get_json()
    second = client.put(f"/api/tasks/{created['id']}", json={}, headers=auth_headers).get_json()

    assert created["updatedAt"] < first["updatedAt"] < second["updatedAt"]


def test_update_rejects_blank_title(client, auth_headers):
    created = create_task(client, auth_headers)

    resp = client.put(f"/api/tasks/{created['id']}", json={"title": "  "}, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.get_json()["errors"][0]["message"] == "Title cannot be empty"
    assert client.get(f"/api/tasks/{created['id']}", headers=auth_headers).get_json() == created


def test_update_can_clear_due_date(client, auth_headers):
    created = create_task(client, auth_headers, dueDate="2026-11-01")

    resp = client.put(f"/api/tasks/{created['id']}", json={"dueDate": None}, headers=auth_headers)

    assert resp.get_json()["dueDate"] is None


def test_delete_then_everything_is_not_found(client, auth_headers):
    created = create_task(client, auth_headers)
    url = f"/api/tasks/{created['id']}"

    resp = client.delete(url, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json() == {"message": "Task deleted successfully"}

    assert client.get(url, headers=auth_headers).status_code == 404
    assert client.put(url, json={"title": "again"}, headers=auth_headers).status_code == 404
    assert client.delete(url, headers=auth_headers).status_code == 404


@pytest.mark.parametrize("task_id", ["not-an-object-id", str(ObjectId())])
def test_unknown_ids_are_not_found(client, auth_headers, task_id):
    assert client.get(f"/api/tasks/{task_id}", headers=auth_headers).status_code == 404
    assert client.delete(f"/api/tasks/{task_id}", headers=auth_headers).status_code == 404


def test_other_users_cannot_see_or_touch_tasks(client, auth_headers, other_headers):
    created = create_task(client, auth_headers, title="Private")
    url = f"/api/tasks/{created['id']}"

    assert client.get("/api/tasks", headers=other_headers).get_json() == []
    assert client.get(url, headers=other_headers).status_code == 404
    assert client.put(url, json={"title": "Hijacked"}, headers=other_headers).status_code == 404
    assert client.delete(url, headers=other_headers).status_code == 404
    stats = client.get("/api/tasks/stats/summary", headers=other_headers).get_json()
    assert stats["total"] == 0

    assert client.get(url, headers=auth_headers).get_json()["title"] == "Private"


def test_task_routes_require_token(client):
    assert client.get("/api/tasks").status_code == 401
    assert client.post("/api/tasks", json={"title": "x"}).status_code == 401
    assert client.get("/api/tasks/stats/summary").status_code == 401


def test_list_filters_by_status_and_priority(client, auth_headers):
    create_task(client, auth_headers, title="a", status="todo", priority="high")
    create_task(client, auth_headers, title="b", status="completed", priority="high")
    create_task(client, auth_headers, title="c", status="todo", priority="low")

    resp = client.get("/api/tasks?status=todo&priority=high", headers=auth_headers)

    assert [t["title"] for t in resp.get_json()] == ["a"]
    everything = client.get("/api/tasks?status=all&priority=", headers=auth_headers).get_json()
    assert len(everything) == 3


def test_search_is_case_insensitive_over_title_and_description(client, auth_headers):
    create_task(client, auth_headers, title="Docs", description="Finish the Specification")
    create_task(client, auth_headers, title="SPEC review")
    create_task(client, auth_headers, title="Groceries", description="milk")

    resp = client.get("/api/tasks?search=spec&sortBy=title&order=asc", headers=auth_headers)

    assert [t["title"] for t in resp.get_json()] == ["Docs", "SPEC review"]


def test_search_text_is_matched_literally(client, auth_headers):
    create_task(client, auth_headers, title="Learn C++ templates")
    create_task(client, auth_headers, title="Learn Cobol")

    plus = client.get("/api/tasks", query_string={"search": "c++"}, headers=auth_headers)
    wildcard = client.get("/api/tasks", query_string={"search": ".*"}, headers=auth_headers)

    assert [t["title"] for t in plus.get_json()] == ["Learn C++ templates"]
    assert wildcard.get_json() == []


def test_sort_by_title_both_directions(client, auth_headers):
    for title in ("banana", "apple", "cherry"):
        create_task(client, auth_headers, title=title)

    asc = client.get("/api/tasks?sortBy=title&order=asc", headers=auth_headers).get_json()
    desc = client.get("/api/tasks?sortBy=title&order=desc", headers=auth_headers).get_json()

    assert [t["title"] for t in asc] == ["apple", "banana", "cherry"]
    assert [t["title"] for t in desc] == ["cherry", "banana", "apple"]


def test_default_sort_is_newest_first(client, auth_headers, db):
    first = create_task(client, auth_headers, title="older")
    second = create_task(client, auth_headers, title="newer")
    base = datetime(2026, 1, 1)
    db.tasks.update_one({"_id": ObjectId(first["id"])}, {"$set": {"created_at": base}})
    db.tasks.update_one(
        {"_id": ObjectId(second["id"])}, {"$set": {"created_at": base + timedelta(hours=1)}}
    )

    resp = client.get("/api/tasks", headers=auth_headers)

    assert [t["title"] for t in resp.get_json()] == ["newer", "older"]


def test_unknown_sort_field_is_rejected(client, auth_headers):
    resp = client.get("/api/tasks?sortBy=password_hash", headers=auth_headers)

    assert resp.status_code == 400
    assert resp.get_json()["errors"][0]["field"] == "sortBy"


def test_overdue_scenario(client, auth_headers):
    yesterday = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    task = create_task(
        client, auth_headers, title="Write spec", status="todo", priority="high", dueDate=yesterday
    )

    stats = client.get("/api/tasks/stats/summary", headers=auth_headers).get_json()
    assert stats["overdue"] == 1

    client.put(f"/api/tasks/{task['id']}", json={"status": "completed"}, headers=auth_headers)

    stats = client.get("/api/tasks/stats/summary", headers=auth_headers).get_json()
    assert stats["overdue"] == 0
    assert stats["byStatus"]["completed"] == 1


def test_stats_summary_shape(client, auth_headers):
    create_task(client, auth_headers, status="todo", priority="low")
    create_task(client, auth_headers, status="in-progress", priority="high")
    create_task(client, auth_headers, status="in-progress", priority="high")

    stats = client.get("/api/tasks/stats/summary", headers=auth_headers).get_json()

    assert stats == {
        "total": 3,
        "byStatus": {"todo": 1, "inProgress": 2, "completed": 0},
        "byPriority": {"low": 1, "medium": 0, "high": 2},
        "overdue": 0,
    }
