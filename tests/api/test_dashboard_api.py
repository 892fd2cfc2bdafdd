"""
Tests for GET /api/tasks/dashboard-data and /api/tasks/user-dashboard-data.
"""
from datetime import datetime, timedelta, timezone

import pytest

from taskboard_core.constants import TASKS_COLLECTION


@pytest.fixture()
def seed(store):
    """Insert a task straight into the store."""
    def _seed(assignees, status="Pending", priority="Medium", due_date=None, created_at=None, title="t"):
        created_at = created_at or datetime(2024, 1, 1, tzinfo=timezone.utc)
        return store.insert(TASKS_COLLECTION, {
            "title": title,
            "description": "",
            "priority": priority,
            "status": status,
            "progress": 0,
            "due_date": due_date,
            "created_by": None,
            "assigned_to": assignees,
            "todo_checklist": [],
            "attachments": [],
            "created_at": created_at,
            "updated_at": created_at,
        })
    return _seed


EMPTY_DASHBOARD = {
    "statistics": {"totalTasks": 0, "pendingTasks": 0, "completedTasks": 0, "overdueTasks": 0},
    "charts": {
        "taskDistribution": {"Pending": 0, "InProgress": 0, "Completed": 0, "All": 0},
        "taskPriorityLevels": {"Low": 0, "Medium": 0, "High": 0},
    },
    "recentTasks": [],
}


class TestAdminDashboard:
    def test_empty_store_has_all_keys(self, client, admin_headers):
        resp = client.get("/api/tasks/dashboard-data", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json() == EMPTY_DASHBOARD

    def test_counts(self, client, admin_headers, member, other_member, seed):
        seed([member["_id"]], status="Pending", priority="High")
        seed([member["_id"]], status="In Progress", priority="High")
        seed([other_member["_id"]], status="Completed", priority="Low")

        body = client.get("/api/tasks/dashboard-data", headers=admin_headers).json()
        assert body["statistics"] == {
            "totalTasks": 3, "pendingTasks": 1, "completedTasks": 1, "overdueTasks": 0,
        }
        assert body["charts"]["taskDistribution"] == {
            "Pending": 1, "InProgress": 1, "Completed": 1, "All": 3,
        }
        assert body["charts"]["taskPriorityLevels"] == {"Low": 1, "Medium": 0, "High": 2}

    def test_overdue_excludes_completed(self, client, admin_headers, member, seed):
        past = datetime.now(timezone.utc) - timedelta(days=3)
        future = datetime.now(timezone.utc) + timedelta(days=3)
        seed([member["_id"]], status="In Progress", due_date=past)
        seed([member["_id"]], status="Completed", due_date=past)
        seed([member["_id"]], status="Pending", due_date=future)
        seed([member["_id"]], status="Pending", due_date=None)

        body = client.get("/api/tasks/dashboard-data", headers=admin_headers).json()
        assert body["statistics"]["overdueTasks"] == 1

    def test_overdue_through_api(self, client, admin_headers, member, make_task):
        late = make_task([member["_id"]], dueDate="2020-01-01T00:00:00Z")
        done = make_task([member["_id"]], dueDate="2020-01-01T00:00:00Z")
        client.put(f"/api/tasks/{late['_id']}/status", json={"status": "In Progress"}, headers=admin_headers)
        client.put(f"/api/tasks/{done['_id']}/status", json={"status": "Completed"}, headers=admin_headers)

        body = client.get("/api/tasks/dashboard-data", headers=admin_headers).json()
        assert body["statistics"]["overdueTasks"] == 1

    def test_recent_tasks_newest_first_limited_to_ten(self, client, admin_headers, member, seed):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        for day in range(12):
            seed([member["_id"]], title=f"day {day}", created_at=base + timedelta(days=day))

        recent = client.get("/api/tasks/dashboard-data", headers=admin_headers).json()["recentTasks"]
        assert len(recent) == 10
        assert [t["title"] for t in recent] == [f"day {d}" for d in range(11, 1, -1)]
        assert set(recent[0]) == {"_id", "title", "status", "priority", "dueDate", "createdAt"}

    def test_member_forbidden(self, client, member_headers):
        resp = client.get("/api/tasks/dashboard-data", headers=member_headers)
        assert resp.status_code == 403


class TestUserDashboard:
    def test_scoped_to_assignee(self, client, member, member_headers, other_member, seed):
        seed([member["_id"]], status="Completed", priority="Low", title="mine")
        seed([member["_id"], other_member["_id"]], status="Pending", priority="High", title="shared")
        seed([other_member["_id"]], status="In Progress", priority="High", title="theirs")

        body = client.get("/api/tasks/user-dashboard-data", headers=member_headers).json()
        assert body["statistics"]["totalTasks"] == 2
        assert body["charts"]["taskDistribution"] == {
            "Pending": 1, "InProgress": 0, "Completed": 1, "All": 2,
        }
        assert body["charts"]["taskPriorityLevels"] == {"Low": 1, "Medium": 0, "High": 1}
        assert {t["title"] for t in body["recentTasks"]} == {"mine", "shared"}

    def test_no_assigned_tasks(self, client, member_headers, other_member, seed):
        seed([other_member["_id"]], status="Pending")
        body = client.get("/api/tasks/user-dashboard-data", headers=member_headers).json()
        assert body == EMPTY_DASHBOARD

    def test_admin_gets_own_scope(self, client, admin_headers, member, seed):
        seed([member["_id"]])
        body = client.get("/api/tasks/user-dashboard-data", headers=admin_headers).json()
        assert body["statistics"]["totalTasks"] == 0
