"""Principal administration (admin role only).

Admin operations never reach into task ownership checks; the only task
access here is the cascading delete of a removed user's tasks and the
per-user counters shown in the user detail view.
"""

import logging
from typing import Any, Dict, List, Union

from pydantic import ValidationError as PydanticValidationError

from taskdesk.database.repository import TaskRepository
from taskdesk.database.user_repository import UserRepository
from taskdesk.engine.access import Capability, ensure_not_self, require_capability
from taskdesk.engine.statistics import get_owner_task_counts
from taskdesk.errors import ConflictError, NotFoundError, ValidationError, from_pydantic_error
from taskdesk.models.stats import TaskCounts
from taskdesk.models.user import User, UserUpdate

logger = logging.getLogger(__name__)


def _get_user_or_404(users: UserRepository, user_id: str) -> User:
    user = users.get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def list_users(users: UserRepository, principal: User) -> List[User]:
    require_capability(principal, Capability.MANAGE_USERS)
    return users.get_all()


def get_user_detail(
    users: UserRepository,
    tasks: TaskRepository,
    principal: User,
    user_id: str,
) -> Dict[str, Union[User, TaskCounts]]:
    """User record plus its task completion counters."""
    require_capability(principal, Capability.MANAGE_USERS)
    user = _get_user_or_404(users, user_id)
    return {"user": user, "task_stats": get_owner_task_counts(tasks, user.id)}


def update_user(
    users: UserRepository,
    principal: User,
    user_id: str,
    data: Union[UserUpdate, Dict[str, Any]],
) -> User:
    """Partially update a user's profile, role or active flag.

    Raises:
        ForbiddenError: Caller is not an admin, or deactivates itself
        NotFoundError: Unknown user
        ConflictError: Email already used by another user
    """
    require_capability(principal, Capability.MANAGE_USERS)
    if isinstance(data, UserUpdate):
        changes = data.model_dump(exclude_unset=True)
    else:
        try:
            changes = UserUpdate(**data).model_dump(exclude_unset=True)
        except PydanticValidationError as e:
            raise from_pydantic_error(e)
    # Null means "leave unchanged" for every admin-editable field.
    changes = {field: value for field, value in changes.items() if value is not None}

    _get_user_or_404(users, user_id)
    if changes.get("is_active") is False:
        ensure_not_self(principal, user_id, "deactivate")

    if "email" in changes:
        changes["email"] = changes["email"].strip()
        if not changes["email"]:
            raise ValidationError("email: must not be empty")
        existing = users.get_by_email(changes["email"])
        if existing is not None and existing.id != user_id:
            raise ConflictError("Email already in use")

    if not changes:
        return _get_user_or_404(users, user_id)
    updated = users.update(user_id, changes)
    if updated is None:
        raise NotFoundError("User not found")
    logger.info(f"Admin {principal.id} updated user {user_id}: {sorted(changes)}")
    return updated


def delete_user(users: UserRepository, principal: User, user_id: str) -> int:
    """Delete a user together with all of its tasks.

    Returns:
        Number of tasks removed
    """
    require_capability(principal, Capability.MANAGE_USERS)
    _get_user_or_404(users, user_id)
    ensure_not_self(principal, user_id, "delete")
    try:
        removed = users.delete_with_tasks(user_id)
    except ValueError:
        raise NotFoundError("User not found")
    logger.info(f"Admin {principal.id} deleted user {user_id} and {removed} tasks")
    return removed


def toggle_user_active(users: UserRepository, principal: User, user_id: str) -> User:
    """Flip a user's active flag."""
    require_capability(principal, Capability.MANAGE_USERS)
    user = _get_user_or_404(users, user_id)
    ensure_not_self(principal, user_id, "deactivate")
    updated = users.update(user_id, {"is_active": not user.is_active})
    if updated is None:
        raise NotFoundError("User not found")
    logger.info(f"Admin {principal.id} set user {user_id} active={updated.is_active}")
    return updated
