"""
Checklist and status reconciliation rules for tasks.

Two independent paths set a task's status:

- an explicit status change, where "Completed" forces the whole checklist
  done and progress to 100;
- a checklist replacement, where progress is recomputed and the status is
  derived from it, overwriting whatever was set before.

They are kept as separate functions. Whichever ran last wins, so the two can
disagree until the next checklist replacement.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from taskboard_core.constants import (
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
    TASK_STATUSES,
)
from taskboard_core.exceptions import ValidationError


def count_completed(checklist: list[dict]) -> int:
    """Number of checklist items marked completed."""
    return sum(1 for item in checklist if item.get("completed"))


def compute_progress(checklist: list[dict]) -> int:
    """Percentage of completed items, rounded half up. 0 for an empty checklist."""
    total = len(checklist)
    if total == 0:
        return 0
    percent = Decimal(100 * count_completed(checklist)) / Decimal(total)
    return int(percent.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def status_for_progress(progress: int) -> str:
    if progress >= 100:
        return STATUS_COMPLETED
    if progress > 0:
        return STATUS_IN_PROGRESS
    return STATUS_PENDING


def validate_status(status: Any) -> str:
    """Reject a missing status or one outside the fixed set."""
    if status is None or status == "":
        raise ValidationError("Status is required")
    if status not in TASK_STATUSES:
        allowed = ", ".join(TASK_STATUSES)
        raise ValidationError(f"Invalid status {status!r}; expected one of: {allowed}")
    return status


def normalize_checklist(checklist: list[dict]) -> list[dict]:
    """Copy checklist items into plain {text, completed} dicts."""
    return [
        {"text": item.get("text", ""), "completed": bool(item.get("completed", False))}
        for item in checklist
    ]


def apply_status_change(task: dict, status: str) -> dict:
    """
    Return the field updates for an explicit status change.

    Only "Completed" touches the checklist and progress.
    """
    updates: dict[str, Any] = {"status": validate_status(status)}
    if status == STATUS_COMPLETED:
        updates["todo_checklist"] = [
            {**item, "completed": True} for item in task.get("todo_checklist", [])
        ]
        updates["progress"] = 100
    return updates


def apply_checklist(checklist: list[dict]) -> dict:
    """
    Return the field updates for a wholesale checklist replacement.

    Status is derived from the recomputed progress alone.
    """
    items = normalize_checklist(checklist)
    progress = compute_progress(items)
    return {
        "todo_checklist": items,
        "progress": progress,
        "status": status_for_progress(progress),
    }
