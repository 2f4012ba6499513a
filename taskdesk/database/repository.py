"""Repository layer for task database operations."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import asc, case, desc, func, or_
from sqlalchemy.exc import SQLAlchemyError

from taskdesk.errors import InternalError
from taskdesk.models.constants import PRIORITY_RANK
from taskdesk.models.query import TaskQuery
from taskdesk.models.stats import CategoryCount, TaskCounts, TaskOverview
from taskdesk.models.task import Task, TaskPriority
from taskdesk.database.models import TaskDB, enum_to_value

logger = logging.getLogger(__name__)

_LIKE_ESCAPE = "\\"


def _escape_like(text: str) -> str:
    """Escape LIKE wildcards so user text matches literally."""
    return (
        text.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )


def _sort_column(field: str):
    if field == "priority":
        return case(PRIORITY_RANK, value=TaskDB.priority, else_=PRIORITY_RANK[TaskPriority.MEDIUM.value])
    return getattr(TaskDB, field)


class TaskRepository:
    """Repository for Task database operations.

    Listing, counting and category aggregation only accept an owner-scoped
    `TaskQuery` or an explicit owner id. `get_by_id` is unscoped and is only
    meant for the access guard, which checks ownership itself.
    """
    
    def __init__(self, db: Session):
        self.db = db

    def _scoped(self, query: TaskQuery):
        q = self.db.query(TaskDB).filter(TaskDB.owner_id == query.owner_id)
        if query.completed is not None:
            q = q.filter(TaskDB.completed.is_(query.completed))
        if query.priority:
            q = q.filter(TaskDB.priority == query.priority)
        if query.category:
            q = q.filter(TaskDB.category == query.category)
        if query.search:
            q = q.filter(self._search_clause(query.search))
        return q

    def _search_clause(self, search: str):
        """Case-insensitive substring match on title or description.

        SQLite folds with the `casefold` function registered on each
        connection; other dialects use ILIKE, which is Unicode-aware there.
        """
        if self.db.get_bind().dialect.name == "sqlite":
            pattern = f"%{_escape_like(search.casefold())}%"
            return or_(
                func.casefold(TaskDB.title).like(pattern, escape=_LIKE_ESCAPE),
                func.casefold(TaskDB.description).like(pattern, escape=_LIKE_ESCAPE),
            )
        pattern = f"%{_escape_like(search)}%"
        return or_(
            TaskDB.title.ilike(pattern, escape=_LIKE_ESCAPE),
            TaskDB.description.ilike(pattern, escape=_LIKE_ESCAPE),
        )

    def insert(self, task: Task) -> Task:
        """Insert a new task."""
        try:
            task_db = TaskDB.from_pydantic(task)
            self.db.add(task_db)
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Created task {task.id}: {task.title[:50]}")
            return task_db.to_pydantic()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create task {task.id}: {type(e).__name__}: {str(e)}")
            raise InternalError("Failed to create task") from e

    def insert_many(self, tasks: List[Task]) -> List[Task]:
        """Insert several tasks in a single transaction (all or nothing)."""
        if not tasks:
            return []
        try:
            rows = [TaskDB.from_pydantic(task) for task in tasks]
            self.db.add_all(rows)
            self.db.commit()
            for row in rows:
                self.db.refresh(row)
            logger.debug(f"Inserted {len(rows)} tasks for user {tasks[0].owner_id}")
            return [row.to_pydantic() for row in rows]
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to insert {len(tasks)} tasks: {type(e).__name__}: {str(e)}")
            raise InternalError("Failed to import tasks") from e
    
    def get_by_id(self, task_id: str) -> Optional[Task]:
        """Get task by ID regardless of owner."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        return task_db.to_pydantic() if task_db else None

    def find(self, query: TaskQuery) -> List[Task]:
        """Get the tasks matching an owner-scoped query, sorted and sliced."""
        column = _sort_column(query.sort_field)
        order = desc(column) if query.sort_descending else asc(column)
        q = self._scoped(query).order_by(order, asc(TaskDB.id))
        if query.page_size is not None:
            q = q.offset(query.offset).limit(query.page_size)
        return [task_db.to_pydantic() for task_db in q.all()]

    def count(self, query: TaskQuery) -> int:
        """Count all tasks matching the query filters (pagination ignored)."""
        return self._scoped(query).count()

    def update_by_id(self, task_id: str, changes: Dict[str, Any]) -> Optional[Task]:
        """Apply a partial update to a task; returns None if it does not exist."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        if not task_db:
            return None

        for field, value in changes.items():
            if field == "priority":
                value = enum_to_value(value)
            elif field in ("attachments", "subtasks"):
                value = [item.model_dump() if hasattr(item, "model_dump") else dict(item) for item in value]
            elif field == "tags":
                value = list(value)
            setattr(task_db, field, value)
        task_db.updated_at = datetime.utcnow()

        try:
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Updated task {task_id}: {sorted(changes)}")
            return task_db.to_pydantic()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update task {task_id}: {type(e).__name__}: {str(e)}")
            raise InternalError("Failed to update task") from e
    
    def delete_by_id(self, task_id: str) -> bool:
        """Permanently delete a task by ID."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        if not task_db:
            return False
        
        try:
            self.db.delete(task_db)
            self.db.commit()
            logger.debug(f"Deleted task {task_id}")
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete task {task_id}: {type(e).__name__}: {str(e)}")
            raise InternalError("Failed to delete task") from e

    def _overview(self, *criteria) -> TaskOverview:
        row = self.db.query(
            func.count(TaskDB.id),
            func.sum(case((TaskDB.completed.is_(True), 1), else_=0)),
            func.sum(case((TaskDB.completed.is_(False), 1), else_=0)),
            func.sum(case((TaskDB.priority == TaskPriority.HIGH.value, 1), else_=0)),
            func.sum(case((TaskDB.priority == TaskPriority.MEDIUM.value, 1), else_=0)),
            func.sum(case((TaskDB.priority == TaskPriority.LOW.value, 1), else_=0)),
        ).filter(*criteria).one()
        total, completed, pending, high, medium, low = (int(value or 0) for value in row)
        return TaskOverview(
            total=total,
            completed=completed,
            pending=pending,
            high_priority=high,
            medium_priority=medium,
            low_priority=low,
        )

    def overview(self, owner_id: str) -> TaskOverview:
        """Completion and priority counters for one owner."""
        return self._overview(TaskDB.owner_id == owner_id)

    def system_counts(self) -> TaskCounts:
        """Completion counters across every owner (admin only)."""
        overview = self._overview()
        return TaskCounts(total=overview.total, completed=overview.completed, pending=overview.pending)

    def count_by_category(self, owner_id: str) -> List[CategoryCount]:
        """Task count per category present for one owner."""
        rows = (
            self.db.query(TaskDB.category, func.count(TaskDB.id))
            .filter(TaskDB.owner_id == owner_id)
            .group_by(TaskDB.category)
            .order_by(desc(func.count(TaskDB.id)), asc(TaskDB.category))
            .all()
        )
        return [CategoryCount(category=category, count=int(count)) for category, count in rows]
