"""
Users REST API: admin user listing and removal.

Endpoints:
  GET    /users        Every user with per-status task counts (admin)
  GET    /users/{id}   A single user
  DELETE /users/{id}   Remove a user (admin)
"""

import logging

from fastapi import APIRouter, Depends

from taskboard_api.auth import get_current_user, public_user, require_admin
from taskboard_api.dashboard import task_scope
from taskboard_api.schemas import MessageResponse, UserResponse, UserWithTaskCounts
from taskboard_api.store import get_store
from taskboard_core.constants import (
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
    TASKS_COLLECTION,
    USERS_COLLECTION,
)
from taskboard_core.exceptions import NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserWithTaskCounts])
async def list_users(admin: dict = Depends(require_admin)):
    """List all users with the number of their assigned tasks in each status."""
    store = get_store()
    users = store.find(USERS_COLLECTION, order_by="created_at")

    results = []
    for user in users:
        scope = task_scope(user["id"])
        results.append(UserWithTaskCounts(
            **public_user(user),
            pending_tasks=store.count(TASKS_COLLECTION, scope + [("status", "==", STATUS_PENDING)]),
            in_progress_tasks=store.count(TASKS_COLLECTION, scope + [("status", "==", STATUS_IN_PROGRESS)]),
            completed_tasks=store.count(TASKS_COLLECTION, scope + [("status", "==", STATUS_COMPLETED)]),
        ))
    return results


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, user: dict = Depends(get_current_user)):
    """Get a user by id."""
    found = get_store().get(USERS_COLLECTION, user_id)
    if found is None:
        raise NotFoundError("User not found")
    return UserResponse(**public_user(found))


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: str, admin: dict = Depends(require_admin)):
    """Delete a user (admin only). Tasks keep their assignee ids."""
    if not get_store().delete(USERS_COLLECTION, user_id):
        raise NotFoundError("User not found")
    logger.info("User %s removed by %s", user_id, admin["email"])
    return MessageResponse(message="User removed")
