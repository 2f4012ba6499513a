"""Tests for per-user and system-wide statistics."""

import pytest

from taskdesk.engine.statistics import get_owner_task_counts, get_system_statistics, get_task_statistics
from taskdesk.errors import ForbiddenError
from taskdesk.models.task import TaskPriority


def test_overview_counts(make_task, task_repository, test_user):
    make_task(priority=TaskPriority.HIGH, completed=True)
    make_task(priority=TaskPriority.HIGH)
    make_task(priority=TaskPriority.LOW)

    stats = get_task_statistics(task_repository, test_user)

    assert stats.overview.total == 3
    assert stats.overview.completed == 1
    assert stats.overview.pending == 2
    assert stats.overview.high_priority == 2
    assert stats.overview.low_priority == 1
    assert stats.overview.medium_priority == 0


def test_zero_tasks_returns_full_zero_structure(task_repository, test_user):
    stats = get_task_statistics(task_repository, test_user)

    assert stats.overview.total == 0
    assert stats.overview.completed == 0
    assert stats.overview.pending == 0
    assert stats.overview.high_priority == 0
    assert stats.overview.medium_priority == 0
    assert stats.overview.low_priority == 0
    assert stats.categories == []


def test_categories_only_include_present_values(make_task, task_repository, test_user, other_user_id):
    make_task(category="work")
    make_task(category="work")
    make_task(category="general")
    make_task(category="secret", owner_id=other_user_id)

    stats = get_task_statistics(task_repository, test_user)
    assert {c.category: c.count for c in stats.categories} == {"work": 2, "general": 1}


def test_stats_ignore_other_owners(make_task, task_repository, test_user, other_user_id):
    make_task(owner_id=other_user_id, priority=TaskPriority.HIGH)

    stats = get_task_statistics(task_repository, test_user)
    assert stats.overview.total == 0


def test_owner_task_counts(make_task, task_repository, other_user_id):
    make_task(owner_id=other_user_id, completed=True)
    make_task(owner_id=other_user_id)

    counts = get_owner_task_counts(task_repository, other_user_id)
    assert (counts.total, counts.completed, counts.pending) == (2, 1, 1)


def test_system_statistics(make_task, task_repository, user_repository, admin_user, other_user_id):
    make_task(completed=True)
    make_task(owner_id=other_user_id)
    user_repository.update(other_user_id, {"is_active": False})

    stats = get_system_statistics(task_repository, user_repository, admin_user)

    assert stats.users.total == 3
    assert stats.users.active == 2
    assert stats.users.inactive == 1
    assert stats.users.admins == 1
    assert (stats.tasks.total, stats.tasks.completed, stats.tasks.pending) == (2, 1, 1)


def test_system_statistics_zero_tasks(task_repository, user_repository, admin_user):
    stats = get_system_statistics(task_repository, user_repository, admin_user)
    assert stats.tasks.model_dump() == {"total": 0, "completed": 0, "pending": 0}


def test_system_statistics_requires_admin(task_repository, user_repository, test_user):
    with pytest.raises(ForbiddenError):
        get_system_statistics(task_repository, user_repository, test_user)
