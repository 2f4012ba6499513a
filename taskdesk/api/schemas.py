"""Request/response models for the HTTP API."""

from typing import List
from pydantic import BaseModel, Field

from taskdesk.models.stats import TaskCounts
from taskdesk.models.task import Task
from taskdesk.models.user import User


class TaskResponse(BaseModel):
    """Single task envelope."""
    task: Task


class TaskListResponse(BaseModel):
    """Paginated task listing."""
    tasks: List[Task]
    total: int
    total_pages: int
    current_page: int


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str


class ShareRequest(BaseModel):
    """Request model for sharing a task."""
    email: str = Field(..., description="Email of the user receiving the copy")


class ExportResponse(BaseModel):
    """All tasks of the current user."""
    count: int
    tasks: List[Task]


class ImportResponse(BaseModel):
    """Response for task import."""
    imported_count: int


class UserListResponse(BaseModel):
    """Admin user listing."""
    count: int
    users: List[User]


class UserDetailResponse(BaseModel):
    """Admin user detail with task counters."""
    user: User
    task_stats: TaskCounts


class UserResponse(BaseModel):
    """Single user envelope."""
    user: User


class ToggleActiveResponse(BaseModel):
    """Result of an activate/deactivate toggle."""
    message: str
    user: User
