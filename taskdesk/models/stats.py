"""Statistics result models.

Every counter defaults to zero so an empty store still yields the full
structure.
"""

from typing import List
from pydantic import BaseModel, Field


class TaskOverview(BaseModel):
    """Per-user task counters."""
    total: int = 0
    completed: int = 0
    pending: int = 0
    high_priority: int = 0
    medium_priority: int = 0
    low_priority: int = 0


class CategoryCount(BaseModel):
    """Number of tasks in one category."""
    category: str
    count: int


class TaskStatistics(BaseModel):
    """Statistics response for a single user."""
    overview: TaskOverview = Field(default_factory=TaskOverview)
    categories: List[CategoryCount] = Field(default_factory=list)


class TaskCounts(BaseModel):
    """Completion counters (used for admin views)."""
    total: int = 0
    completed: int = 0
    pending: int = 0


class UserCounts(BaseModel):
    """System-wide principal counters."""
    total: int = 0
    active: int = 0
    inactive: int = 0
    admins: int = 0


class SystemStatistics(BaseModel):
    """Admin-level statistics across all users and tasks."""
    users: UserCounts = Field(default_factory=UserCounts)
    tasks: TaskCounts = Field(default_factory=TaskCounts)
