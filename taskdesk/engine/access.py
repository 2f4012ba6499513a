"""Access guard and role capabilities.

Task records are only ever visible to their owner. Admin capabilities cover
principal administration and system statistics; they never grant access to
another user's tasks.
"""

import logging
from enum import Enum
from typing import Dict, FrozenSet

from taskdesk.database.repository import TaskRepository
from taskdesk.errors import ForbiddenError, NotFoundError
from taskdesk.models.task import Task
from taskdesk.models.user import User, UserRole

logger = logging.getLogger(__name__)


class Capability(str, Enum):
    """Role-gated operations."""
    MANAGE_USERS = "manage_users"
    VIEW_SYSTEM_STATS = "view_system_stats"


ROLE_CAPABILITIES: Dict[UserRole, FrozenSet[Capability]] = {
    UserRole.USER: frozenset(),
    UserRole.ADMIN: frozenset({Capability.MANAGE_USERS, Capability.VIEW_SYSTEM_STATS}),
}


def has_capability(principal: User, capability: Capability) -> bool:
    role = UserRole(principal.role)
    return capability in ROLE_CAPABILITIES.get(role, frozenset())


def require_capability(principal: User, capability: Capability) -> None:
    """Raise ForbiddenError unless the principal's role grants `capability`."""
    if not has_capability(principal, capability):
        logger.warning(f"User {principal.id} denied capability {capability.value}")
        raise ForbiddenError("Admin access required")


def ensure_not_self(principal: User, target_id: str, action: str) -> None:
    """Reject admin operations that target the caller's own account."""
    if principal.id == target_id:
        logger.warning(f"User {principal.id} attempted to {action} own account")
        raise ForbiddenError(f"Cannot {action} your own account")


def get_owned_task(tasks: TaskRepository, principal: User, task_id: str) -> Task:
    """Fetch a task and verify the principal owns it.

    A task owned by someone else is reported exactly like a missing one so
    that ids of other users' tasks cannot be probed.

    Raises:
        NotFoundError: No task with this id, or it belongs to another user
    """
    task = tasks.get_by_id(task_id)
    if task is None:
        raise NotFoundError("Task not found")
    if task.owner_id != principal.id:
        logger.warning(f"User {principal.id} denied access to task {task_id} owned by another user")
        raise NotFoundError("Task not found")
    return task
