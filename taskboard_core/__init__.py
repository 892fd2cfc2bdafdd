"""
Taskboard Core - task tracking domain rules

Checklist-driven progress, status reconciliation, configuration and the
error taxonomy shared by the API layer.
"""

from taskboard_core.config import ApiConfig
from taskboard_core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    StoreError,
    TaskboardError,
    UnauthorizedError,
    ValidationError,
)
from taskboard_core.reconcile import apply_checklist, apply_status_change, compute_progress

__version__ = "0.1.0"

__all__ = [
    "ApiConfig",
    "TaskboardError",
    "ValidationError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "StoreError",
    "apply_checklist",
    "apply_status_change",
    "compute_progress",
]
