"""
Tasks REST API: CRUD, status and checklist updates, dashboards.

Access model
────────────
  • admins create and delete tasks and see every task
  • members see the tasks they are assigned to
  • an assignee or any admin may edit a task, change its status or
    replace its checklist

Status has two independent writers: PUT /{id}/status sets it explicitly,
PUT /{id}/todo derives it from checklist progress. The last call wins.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import Field

from taskboard_api.auth import get_current_user, is_admin, require_admin
from taskboard_api.dashboard import dashboard_data, status_summary, task_scope
from taskboard_api.schemas import (
    CamelModel,
    ChecklistItem,
    CreateTaskResponse,
    DashboardResponse,
    MessageResponse,
    TaskListItem,
    TaskListResponse,
    TaskResponse,
)
from taskboard_api.store import get_store
from taskboard_core.constants import (
    PRIORITY_MEDIUM,
    STATUS_PENDING,
    TASKS_COLLECTION,
    USERS_COLLECTION,
)
from taskboard_core.exceptions import ForbiddenError, NotFoundError, ValidationError
from taskboard_core.reconcile import (
    apply_checklist,
    apply_status_change,
    compute_progress,
    count_completed,
    normalize_checklist,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])

Priority = Literal["Low", "Medium", "High"]


# ── Request models ───────────────────────────────────────────────────────────

class CreateTaskRequest(CamelModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    priority: Priority = PRIORITY_MEDIUM
    due_date: Optional[datetime] = None
    assigned_to: Any = None
    attachments: list[str] = []
    todo_checklist: list[ChecklistItem] = []


class UpdateTaskRequest(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    priority: Optional[Priority] = None
    due_date: Optional[datetime] = None
    assigned_to: Any = None
    attachments: Optional[list[str]] = None
    todo_checklist: Optional[list[ChecklistItem]] = None


class UpdateStatusRequest(CamelModel):
    status: Optional[str] = None


class UpdateChecklistRequest(CamelModel):
    todo_checklist: list[ChecklistItem]


# ── Helpers ──────────────────────────────────────────────────────────────────

def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive due dates are taken as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _validate_assignees(assigned_to: Any) -> list[str]:
    if not isinstance(assigned_to, list):
        raise ValidationError("assignedTo must be an array of user IDs")
    store = get_store()
    missing = [uid for uid in assigned_to if not isinstance(uid, str) or store.get(USERS_COLLECTION, uid) is None]
    if missing:
        raise ValidationError(f"Unknown user IDs in assignedTo: {', '.join(map(str, missing))}")
    return list(assigned_to)


def _get_task_or_404(task_id: str) -> dict:
    task = get_store().get(TASKS_COLLECTION, task_id)
    if task is None:
        raise NotFoundError("Task not found")
    return task


def _require_task_access(task: dict, user: dict) -> None:
    if is_admin(user) or user["id"] in task.get("assigned_to", []):
        return
    raise ForbiddenError("Not authorized to modify this task")


def _resolve_assignees(task: dict, cache: Optional[dict] = None) -> dict:
    """Replace assignee ids with {id, name, email, profile_image_url}, keeping order."""
    cache = {} if cache is None else cache
    store = get_store()
    resolved = []
    for uid in task.get("assigned_to", []):
        if uid not in cache:
            cache[uid] = store.get(USERS_COLLECTION, uid)
        user = cache[uid]
        if user is None:
            continue
        resolved.append({
            "id": user["id"],
            "name": user["name"],
            "email": user["email"],
            "profile_image_url": user.get("profile_image_url"),
        })
    return {**task, "assigned_to": resolved}


def _task_response(task: dict) -> TaskResponse:
    return TaskResponse.model_validate(_resolve_assignees(task))


# ── Dashboards ───────────────────────────────────────────────────────────────

@router.get("/dashboard-data", response_model=DashboardResponse)
async def get_dashboard_data(user: dict = Depends(require_admin)):
    """Fleet-wide dashboard (admin only)."""
    return DashboardResponse.model_validate(dashboard_data(get_store()))


@router.get("/user-dashboard-data", response_model=DashboardResponse)
async def get_user_dashboard_data(user: dict = Depends(get_current_user)):
    """Dashboard scoped to tasks assigned to the caller."""
    return DashboardResponse.model_validate(dashboard_data(get_store(), assignee_id=user["id"]))


# ── CRUD ─────────────────────────────────────────────────────────────────────

@router.get("", response_model=TaskListResponse)
async def list_tasks(status: Optional[str] = None, user: dict = Depends(get_current_user)):
    """
    List tasks in the caller's scope, newest first, optionally filtered by status.

    The status summary always covers the whole scope.
    """
    store = get_store()
    assignee_id = None if is_admin(user) else user["id"]
    where = task_scope(assignee_id)
    if status:
        where = where + [("status", "==", status)]

    tasks = store.find(TASKS_COLLECTION, where, order_by="created_at", descending=True)

    cache: dict = {}
    items = [
        TaskListItem.model_validate({
            **_resolve_assignees(task, cache),
            "completed_todo_count": count_completed(task.get("todo_checklist", [])),
        })
        for task in tasks
    ]
    return TaskListResponse(tasks=items, status_summary=status_summary(store, assignee_id))


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: str, user: dict = Depends(get_current_user)):
    """Get a single task with assignees resolved."""
    return _task_response(_get_task_or_404(task_id))


@router.post("", response_model=CreateTaskResponse, status_code=201)
async def create_task(body: CreateTaskRequest, user: dict = Depends(require_admin)):
    """Create a task (admin only)."""
    assigned_to = _validate_assignees(body.assigned_to)
    checklist = normalize_checklist([item.model_dump() for item in body.todo_checklist])

    now = _now()
    task = get_store().insert(TASKS_COLLECTION, {
        "title": body.title,
        "description": body.description,
        "priority": body.priority,
        "status": STATUS_PENDING,
        "progress": compute_progress(checklist),
        "due_date": _as_utc(body.due_date),
        "created_by": user["id"],
        "assigned_to": assigned_to,
        "todo_checklist": checklist,
        "attachments": body.attachments,
        "created_at": now,
        "updated_at": now,
    })
    logger.info("Task %s created by %s", task["id"], user["email"])
    return CreateTaskResponse(message="Task created successfully", task=_task_response(task))


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(task_id: str, body: UpdateTaskRequest, user: dict = Depends(get_current_user)):
    """Edit task fields. Progress and status are left as they are."""
    task = _get_task_or_404(task_id)
    _require_task_access(task, user)

    updates = body.model_dump(exclude_unset=True)
    if "assigned_to" in updates:
        updates["assigned_to"] = _validate_assignees(updates["assigned_to"])
    if updates.get("todo_checklist") is not None:
        updates["todo_checklist"] = normalize_checklist(updates["todo_checklist"])
    if "due_date" in updates:
        updates["due_date"] = _as_utc(updates["due_date"])
    updates = {k: v for k, v in updates.items() if v is not None or k == "due_date"}
    updates["updated_at"] = _now()

    updated = get_store().update(TASKS_COLLECTION, task_id, updates)
    if updated is None:
        raise NotFoundError("Task not found")
    return _task_response(updated)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(task_id: str, user: dict = Depends(require_admin)):
    """Delete a task (admin only)."""
    if not get_store().delete(TASKS_COLLECTION, task_id):
        raise NotFoundError("Task not found")
    logger.info("Task %s deleted by %s", task_id, user["email"])
    return MessageResponse(message="Task deleted successfully")


# ── Status & checklist ───────────────────────────────────────────────────────

@router.put("/{task_id}/status", response_model=TaskResponse)
async def update_task_status(task_id: str, body: UpdateStatusRequest, user: dict = Depends(get_current_user)):
    """Set status explicitly. "Completed" also completes every checklist item."""
    task = _get_task_or_404(task_id)
    _require_task_access(task, user)

    updates = apply_status_change(task, body.status)
    updates["updated_at"] = _now()

    updated = get_store().update(TASKS_COLLECTION, task_id, updates)
    if updated is None:
        raise NotFoundError("Task not found")
    return _task_response(updated)


@router.put("/{task_id}/todo", response_model=TaskResponse)
async def update_task_checklist(task_id: str, body: UpdateChecklistRequest, user: dict = Depends(get_current_user)):
    """Replace the checklist; progress and status are recomputed from it."""
    task = _get_task_or_404(task_id)
    _require_task_access(task, user)

    updates = apply_checklist([item.model_dump() for item in body.todo_checklist])
    updates["updated_at"] = _now()

    if get_store().update(TASKS_COLLECTION, task_id, updates) is None:
        raise NotFoundError("Task not found")
    return _task_response(_get_task_or_404(task_id))
