"""Data models for taskdesk."""

from taskdesk.models.task import Task, TaskCreate, TaskUpdate, TaskPage, TaskPriority, Attachment, Subtask
from taskdesk.models.user import User, UserUpdate, UserRole
from taskdesk.models.query import TaskQuery
from taskdesk.models.stats import (
    TaskOverview,
    CategoryCount,
    TaskStatistics,
    TaskCounts,
    UserCounts,
    SystemStatistics,
)

__all__ = [
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "TaskPage",
    "TaskPriority",
    "Attachment",
    "Subtask",
    "User",
    "UserUpdate",
    "UserRole",
    "TaskQuery",
    "TaskOverview",
    "CategoryCount",
    "TaskStatistics",
    "TaskCounts",
    "UserCounts",
    "SystemStatistics",
]
