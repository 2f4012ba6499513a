"""Task lifecycle operations: list, get, create, update, delete."""

import logging
import math
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from taskdesk.database.repository import TaskRepository
from taskdesk.engine.access import get_owned_task
from taskdesk.errors import NotFoundError, ValidationError, from_pydantic_error
from taskdesk.models.query import TaskQuery
from taskdesk.models.task import Task, TaskCreate, TaskPage, TaskUpdate
from taskdesk.models.task_factory import task_from_input
from taskdesk.models.user import User

logger = logging.getLogger(__name__)

# Required text fields that an update may not clear.
REQUIRED_FIELDS = ("title", "description")


def parse_task_create(data: Union[TaskCreate, Dict[str, Any]], label: Optional[str] = None) -> TaskCreate:
    """Validate raw task input, converting pydantic errors to ValidationError."""
    if isinstance(data, TaskCreate):
        return data
    if not isinstance(data, dict):
        raise ValidationError(f"{label or 'task'}: must be an object")
    try:
        return TaskCreate(**data)
    except PydanticValidationError as e:
        raise from_pydantic_error(e, prefix=label)


def list_tasks(tasks: TaskRepository, query: TaskQuery) -> TaskPage:
    """Run a paginated listing.

    The page and the total are two independent reads; a concurrent insert
    between them can make `total` disagree with the page by one.
    """
    page_items = tasks.find(query)
    total = tasks.count(query)
    return TaskPage(
        tasks=page_items,
        total=total,
        total_pages=math.ceil(total / query.page_size) if query.page_size else 1,
        current_page=query.page,
    )


def get_task(tasks: TaskRepository, principal: User, task_id: str) -> Task:
    return get_owned_task(tasks, principal, task_id)


def create_task(tasks: TaskRepository, principal: User, data: Union[TaskCreate, Dict[str, Any]]) -> Task:
    """Create a task owned by the principal; any client-sent owner is ignored."""
    payload = parse_task_create(data)
    task = task_from_input(principal.id, payload)
    created = tasks.insert(task)
    logger.info(f"User {principal.id} created task {created.id}")
    return created


def update_task(
    tasks: TaskRepository,
    principal: User,
    task_id: str,
    data: Union[TaskUpdate, Dict[str, Any]],
) -> Task:
    """Apply only the fields present in `data` to an owned task."""
    if isinstance(data, TaskUpdate):
        changes = data.model_dump(exclude_unset=True)
    else:
        if not isinstance(data, dict):
            raise ValidationError("task: must be an object")
        try:
            changes = TaskUpdate(**data).model_dump(exclude_unset=True)
        except PydanticValidationError as e:
            raise from_pydantic_error(e)

    for field in REQUIRED_FIELDS:
        if field in changes and not changes[field]:
            raise ValidationError(f"{field}: is required")
    if "completed" in changes and changes["completed"] is None:
        raise ValidationError("completed: must be true or false")
    if "priority" in changes and changes["priority"] is None:
        raise ValidationError("priority: must be one of low, medium, high")
    if "category" in changes and not changes["category"]:
        raise ValidationError("category: must not be empty")
    for field in ("tags", "attachments", "subtasks"):
        if field in changes and changes[field] is None:
            changes[field] = []

    task = get_owned_task(tasks, principal, task_id)
    if not changes:
        return task

    updated = tasks.update_by_id(task_id, changes)
    if updated is None:
        # Deleted between the ownership check and the write.
        raise NotFoundError("Task not found")
    return updated


def delete_task(tasks: TaskRepository, principal: User, task_id: str) -> None:
    get_owned_task(tasks, principal, task_id)
    if not tasks.delete_by_id(task_id):
        raise NotFoundError("Task not found")
    logger.info(f"User {principal.id} deleted task {task_id}")
