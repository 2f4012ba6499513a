"""Task data model for taskdesk."""

from datetime import datetime
from typing import List, Optional
from enum import Enum
from pydantic import BaseModel, Field


class TaskPriority(str, Enum):
    """Task priority enumeration."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Attachment(BaseModel):
    """A named link attached to a task."""
    name: str = Field(..., description="Attachment display name")
    url: str = Field(..., description="Attachment location")


class Subtask(BaseModel):
    """A checklist item inside a task."""
    title: str = Field(..., description="Subtask title")
    completed: bool = Field(False, description="Whether the subtask is done")


class Task(BaseModel):
    """Canonical Task model."""
    
    id: str = Field(..., description="Unique task identifier (UUID v4)")
    owner_id: str = Field(..., description="User ID who owns this task")
    title: str = Field(..., description="Task title")
    description: str = Field(..., description="Task description")
    completed: bool = Field(False, description="Whether the task is done")
    priority: TaskPriority = Field(TaskPriority.MEDIUM, description="Task priority")
    category: str = Field("general", description="Free-text task category")
    due_date: Optional[datetime] = Field(None, description="Task due date")
    tags: List[str] = Field(default_factory=list, description="Ordered task tags")
    shared_from: Optional[str] = Field(
        None,
        description="User ID of the sender if this task arrived through a share",
    )
    attachments: List[Attachment] = Field(default_factory=list, description="Attached links")
    subtasks: List[Subtask] = Field(default_factory=list, description="Checklist items")
    created_at: datetime = Field(..., description="Task creation timestamp")
    updated_at: datetime = Field(..., description="Task last update timestamp")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class TaskCreate(BaseModel):
    """Client-supplied fields for a new task.

    Ownership, identity and provenance are never accepted from the client;
    unknown keys such as ``owner_id`` are dropped during parsing.
    """

    title: str = Field(..., min_length=1, description="Task title")
    description: str = Field(..., min_length=1, description="Task description")
    completed: bool = Field(False, description="Whether the task is done")
    priority: TaskPriority = Field(TaskPriority.MEDIUM, description="Task priority")
    category: str = Field("general", description="Free-text task category")
    due_date: Optional[datetime] = Field(None, description="Task due date")
    tags: List[str] = Field(default_factory=list, description="Ordered task tags")
    attachments: List[Attachment] = Field(default_factory=list, description="Attached links")
    subtasks: List[Subtask] = Field(default_factory=list, description="Checklist items")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class TaskUpdate(BaseModel):
    """Partial update; only fields present in the request are applied."""

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    completed: Optional[bool] = None
    priority: Optional[TaskPriority] = None
    category: Optional[str] = None
    due_date: Optional[datetime] = None
    tags: Optional[List[str]] = None
    attachments: Optional[List[Attachment]] = None
    subtasks: Optional[List[Subtask]] = None

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class TaskPage(BaseModel):
    """One page of a task listing."""

    tasks: List[Task]
    total: int = Field(..., description="Number of tasks matching the filters")
    total_pages: int = Field(..., description="ceil(total / page size)")
    current_page: int = Field(..., description="1-based page number")
