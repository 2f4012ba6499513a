"""Task relationship operations: share, duplicate, export, import.

Every derived task is a new record with its own id and owner; nothing
written here ever touches the source task.
"""

import logging
from typing import Any, List

from taskdesk.database.repository import TaskRepository
from taskdesk.database.user_repository import UserRepository
from taskdesk.engine.access import get_owned_task
from taskdesk.engine.lifecycle import parse_task_create
from taskdesk.engine.query_builder import build_export_query
from taskdesk.errors import NotFoundError, ValidationError
from taskdesk.models.constants import DUPLICATE_TITLE_SUFFIX
from taskdesk.models.task import Task
from taskdesk.models.task_factory import copy_task, task_from_input
from taskdesk.models.user import User

logger = logging.getLogger(__name__)


def share_task(
    tasks: TaskRepository,
    users: UserRepository,
    principal: User,
    task_id: str,
    recipient_email: str,
) -> Task:
    """Give the recipient its own copy of an owned task.

    The copy keeps the title as-is; `shared_from` records the sender.

    Raises:
        NotFoundError: Unknown task (for this principal) or unknown recipient
        ValidationError: Missing recipient, or recipient is the sender
    """
    source = get_owned_task(tasks, principal, task_id)

    email = (recipient_email or "").strip()
    if not email:
        raise ValidationError("email: is required")
    recipient = users.get_by_email(email)
    if recipient is None:
        raise NotFoundError("Recipient not found")
    if recipient.id == principal.id:
        raise ValidationError("email: cannot share a task with yourself")

    shared = tasks.insert(copy_task(source, owner_id=recipient.id, shared_from=source.owner_id))
    logger.info(f"User {principal.id} shared task {source.id} with {recipient.id} as {shared.id}")
    return shared


def duplicate_task(tasks: TaskRepository, principal: User, task_id: str) -> Task:
    """Copy an owned task for the same owner, reset to incomplete."""
    source = get_owned_task(tasks, principal, task_id)
    duplicate = tasks.insert(
        copy_task(source, owner_id=principal.id, title=f"{source.title}{DUPLICATE_TITLE_SUFFIX}")
    )
    logger.info(f"User {principal.id} duplicated task {source.id} as {duplicate.id}")
    return duplicate


def export_tasks(tasks: TaskRepository, principal: User) -> List[Task]:
    """All of the principal's tasks, oldest first."""
    return tasks.find(build_export_query(principal))


def import_tasks(tasks: TaskRepository, principal: User, records: Any) -> List[Task]:
    """Insert a batch of task-like records owned by the principal.

    Every record is validated before anything is written; the first invalid
    record fails the whole import. Identity, ownership, provenance and
    timestamps in the input are ignored.

    Raises:
        ValidationError: Payload is not a list, or a record is invalid
    """
    if not isinstance(records, list):
        raise ValidationError("Import payload must be a list of tasks")

    new_tasks = [
        task_from_input(principal.id, parse_task_create(record, label=f"tasks[{index}]"))
        for index, record in enumerate(records)
    ]
    created = tasks.insert_many(new_tasks)
    logger.info(f"User {principal.id} imported {len(created)} tasks")
    return created
