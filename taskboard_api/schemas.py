"""
Response models shared by the Taskboard routers.

Documents are stored with snake_case fields; every model here serializes with
camelCase aliases and exposes the document id as "_id".
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Users ────────────────────────────────────────────────────────────────────

class UserResponse(CamelModel):
    id: str = Field(alias="_id")
    name: str
    email: str
    profile_image_url: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuthResponse(UserResponse):
    token: str


class UserWithTaskCounts(UserResponse):
    pending_tasks: int = 0
    in_progress_tasks: int = 0
    completed_tasks: int = 0


class AssigneeSummary(CamelModel):
    id: str = Field(alias="_id")
    name: str
    email: str
    profile_image_url: Optional[str] = None


# ── Tasks ────────────────────────────────────────────────────────────────────

class ChecklistItem(CamelModel):
    text: str
    completed: bool = False


class TaskResponse(CamelModel):
    id: str = Field(alias="_id")
    title: str
    description: str = ""
    priority: str
    status: str
    progress: int = 0
    due_date: Optional[datetime] = None
    created_by: Optional[str] = None
    assigned_to: list[AssigneeSummary] = []
    todo_checklist: list[ChecklistItem] = []
    attachments: list[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TaskListItem(TaskResponse):
    completed_todo_count: int = 0


class StatusSummary(CamelModel):
    all: int
    pending_tasks: int
    in_progress_tasks: int
    completed_tasks: int


class TaskListResponse(CamelModel):
    tasks: list[TaskListItem]
    status_summary: StatusSummary


class CreateTaskResponse(CamelModel):
    message: str
    task: TaskResponse


class MessageResponse(CamelModel):
    message: str


# ── Dashboards ───────────────────────────────────────────────────────────────

class RecentTask(CamelModel):
    id: str = Field(alias="_id")
    title: str
    status: str
    priority: str
    due_date: Optional[datetime] = None
    created_at: Optional[datetime] = None


class DashboardStatistics(CamelModel):
    total_tasks: int
    pending_tasks: int
    completed_tasks: int
    overdue_tasks: int


class DashboardCharts(CamelModel):
    task_distribution: dict[str, int]
    task_priority_levels: dict[str, int]


class DashboardResponse(CamelModel):
    statistics: DashboardStatistics
    charts: DashboardCharts
    recent_tasks: list[RecentTask]
