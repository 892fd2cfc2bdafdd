"""
Dashboard and status-summary aggregation.

Every number is an independent count query against the store, scoped either
to all tasks (admin) or to the tasks assigned to one user (member). Bucket
keys are always present, zero-filled.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from taskboard_core.constants import (
    RECENT_TASKS_LIMIT,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
    TASK_PRIORITIES,
    TASK_STATUSES,
    TASKS_COLLECTION,
)


def task_scope(assignee_id: Optional[str] = None) -> list[tuple[str, str, Any]]:
    """Filters selecting the tasks visible to a caller. None = every task."""
    if assignee_id is None:
        return []
    return [("assigned_to", "array_contains", assignee_id)]


def status_summary(store, assignee_id: Optional[str] = None) -> dict:
    """Total and per-status counts within a scope."""
    scope = task_scope(assignee_id)
    return {
        "all": store.count(TASKS_COLLECTION, scope),
        "pending_tasks": store.count(TASKS_COLLECTION, scope + [("status", "==", STATUS_PENDING)]),
        "in_progress_tasks": store.count(TASKS_COLLECTION, scope + [("status", "==", STATUS_IN_PROGRESS)]),
        "completed_tasks": store.count(TASKS_COLLECTION, scope + [("status", "==", STATUS_COMPLETED)]),
    }


def dashboard_data(store, assignee_id: Optional[str] = None, now: Optional[datetime] = None) -> dict:
    """
    Build the dashboard payload for a scope.

    overdue = due date strictly before now and status not Completed.
    """
    now = now or datetime.now(timezone.utc)
    scope = task_scope(assignee_id)

    total = store.count(TASKS_COLLECTION, scope)

    by_status = {
        status: store.count(TASKS_COLLECTION, scope + [("status", "==", status)])
        for status in TASK_STATUSES
    }
    distribution = {status.replace(" ", ""): count for status, count in by_status.items()}
    distribution["All"] = total

    priority_levels = {
        priority: store.count(TASKS_COLLECTION, scope + [("priority", "==", priority)])
        for priority in TASK_PRIORITIES
    }

    overdue = store.count(
        TASKS_COLLECTION,
        scope + [("due_date", "<", now), ("status", "!=", STATUS_COMPLETED)],
    )

    recent = store.find(
        TASKS_COLLECTION,
        scope,
        order_by="created_at",
        descending=True,
        limit=RECENT_TASKS_LIMIT,
    )

    return {
        "statistics": {
            "total_tasks": total,
            "pending_tasks": by_status[STATUS_PENDING],
            "completed_tasks": by_status[STATUS_COMPLETED],
            "overdue_tasks": overdue,
        },
        "charts": {
            "task_distribution": distribution,
            "task_priority_levels": priority_levels,
        },
        "recent_tasks": recent,
    }
