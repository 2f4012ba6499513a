"""Task creation factory for taskdesk.

This module centralizes task creation logic so that create, share,
duplicate and import all apply the same defaults and ownership rules.
"""

import uuid
from datetime import datetime
from typing import Optional, Dict, Any, List

from taskdesk.models.task import Task, TaskCreate
from taskdesk.models.constants import DEFAULT_PRIORITY, DEFAULT_CATEGORY


def create_task_defaults() -> Dict[str, Any]:
    """Get default task values as a dictionary.
    
    Returns:
        Dictionary with default task field values using constants
    """
    return {
        "completed": False,
        "priority": DEFAULT_PRIORITY,
        "category": DEFAULT_CATEGORY,
        "due_date": None,
        "tags": [],
        "shared_from": None,
        "attachments": [],
        "subtasks": [],
    }


def create_task_base(
    owner_id: str,
    title: str,
    description: str,
    completed: Optional[bool] = None,
    priority: Optional[Any] = None,
    category: Optional[str] = None,
    due_date: Optional[datetime] = None,
    tags: Optional[List[str]] = None,
    shared_from: Optional[str] = None,
    attachments: Optional[list] = None,
    subtasks: Optional[list] = None,
) -> Task:
    """Create a task with defaults, allowing overrides.
    
    A fresh id and timestamps are always assigned; optional parameters
    override defaults only when provided.
    
    Args:
        owner_id: User ID who owns this task (required)
        title: Task title (required)
        description: Task description (required)
        completed: Completion flag (defaults to False)
        priority: Task priority (defaults to medium)
        category: Task category (defaults to "general")
        due_date: Optional due date
        tags: Ordered tags
        shared_from: Sender user ID for shared copies
        attachments: Attached links
        subtasks: Checklist items
        
    Returns:
        Task object with defaults applied
    """
    now = datetime.utcnow()
    defaults = create_task_defaults()

    return Task(
        id=str(uuid.uuid4()),
        owner_id=owner_id,
        title=title,
        description=description,
        completed=completed if completed is not None else defaults["completed"],
        priority=priority if priority is not None else defaults["priority"],
        category=category if category is not None else defaults["category"],
        due_date=due_date if due_date is not None else defaults["due_date"],
        tags=list(tags) if tags is not None else defaults["tags"],
        shared_from=shared_from if shared_from is not None else defaults["shared_from"],
        attachments=list(attachments) if attachments is not None else defaults["attachments"],
        subtasks=list(subtasks) if subtasks is not None else defaults["subtasks"],
        created_at=now,
        updated_at=now,
    )


def task_from_input(owner_id: str, data: TaskCreate) -> Task:
    """Build a new task owned by `owner_id` from validated client input."""
    return create_task_base(
        owner_id=owner_id,
        title=data.title,
        description=data.description,
        completed=data.completed,
        priority=data.priority,
        category=data.category,
        due_date=data.due_date,
        tags=data.tags,
        attachments=data.attachments,
        subtasks=data.subtasks,
    )


def copy_task(
    source: Task,
    owner_id: str,
    title: Optional[str] = None,
    shared_from: Optional[str] = None,
) -> Task:
    """Create an independent copy of `source` for `owner_id`.

    Copies title, description, priority, category, due date and tags. The
    copy always starts incomplete and gets its own id.
    """
    return create_task_base(
        owner_id=owner_id,
        title=title if title is not None else source.title,
        description=source.description,
        completed=False,
        priority=source.priority,
        category=source.category,
        due_date=source.due_date,
        tags=source.tags,
        shared_from=shared_from,
    )
