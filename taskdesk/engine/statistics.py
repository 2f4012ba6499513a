"""Derived task statistics.

All counts are read from the store at call time. Empty stores produce
all-zero structures rather than missing ones.
"""

from taskdesk.database.repository import TaskRepository
from taskdesk.database.user_repository import UserRepository
from taskdesk.engine.access import Capability, require_capability
from taskdesk.models.stats import SystemStatistics, TaskCounts, TaskStatistics
from taskdesk.models.user import User


def get_task_statistics(tasks: TaskRepository, principal: User) -> TaskStatistics:
    """Overview counters plus per-category counts for the principal's tasks."""
    return TaskStatistics(
        overview=tasks.overview(principal.id),
        categories=tasks.count_by_category(principal.id),
    )


def get_owner_task_counts(tasks: TaskRepository, owner_id: str) -> TaskCounts:
    """Completion counters for one owner (admin user detail view)."""
    overview = tasks.overview(owner_id)
    return TaskCounts(total=overview.total, completed=overview.completed, pending=overview.pending)


def get_system_statistics(tasks: TaskRepository, users: UserRepository, principal: User) -> SystemStatistics:
    """System-wide user and task totals. Requires VIEW_SYSTEM_STATS."""
    require_capability(principal, Capability.VIEW_SYSTEM_STATS)
    return SystemStatistics(users=users.counts(), tasks=tasks.system_counts())
