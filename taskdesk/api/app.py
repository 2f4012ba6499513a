"""FastAPI web application for taskdesk."""

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import Body, Depends, FastAPI, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from taskdesk import __version__
from taskdesk.auth.dependencies import get_current_user
from taskdesk.database.database import dispose_engine, get_db, init_db
from taskdesk.database.repository import TaskRepository
from taskdesk.database.user_repository import UserRepository
from taskdesk.engine import admin, lifecycle, relationships, statistics
from taskdesk.engine.query_builder import build_task_query
from taskdesk.errors import ServiceError
from taskdesk.models.constants import DEFAULT_PAGE_SIZE, DEFAULT_SORT
from taskdesk.models.stats import SystemStatistics, TaskStatistics
from taskdesk.models.task import TaskCreate, TaskPriority, TaskUpdate
from taskdesk.models.user import User, UserUpdate
from taskdesk.api.schemas import (
    ExportResponse,
    ImportResponse,
    MessageResponse,
    ShareRequest,
    TaskListResponse,
    TaskResponse,
    ToggleActiveResponse,
    UserDetailResponse,
    UserListResponse,
    UserResponse,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield
    dispose_engine()


# Initialize FastAPI app
app = FastAPI(
    title="taskdesk API",
    description="Per-user task tracking with sharing, statistics and bulk import/export",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc.__cause__ or exc)
        return JSONResponse(status_code=exc.status_code, content={"detail": "Internal server error"})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}", exc_info=exc)
    detail = "Internal server error"
    if os.getenv("DEBUG", "False").lower() == "true":
        detail = f"{detail}: {type(exc).__name__}"
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": detail})


def get_task_repository(db: Session = Depends(get_db)) -> TaskRepository:
    return TaskRepository(db)


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------

@app.get("/tasks", response_model=TaskListResponse)
def list_tasks(
    completed: Optional[bool] = None,
    priority: Optional[TaskPriority] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    sort: str = DEFAULT_SORT,
    page: int = Query(1),
    limit: int = Query(DEFAULT_PAGE_SIZE),
    current_user: User = Depends(get_current_user),
    tasks: TaskRepository = Depends(get_task_repository),
):
    """List the current user's tasks with filters, sorting and pagination."""
    query = build_task_query(
        current_user,
        completed=completed,
        priority=priority,
        category=category,
        search=search,
        sort=sort,
        page=page,
        page_size=limit,
    )
    result = lifecycle.list_tasks(tasks, query)
    return TaskListResponse(
        tasks=result.tasks,
        total=result.total,
        total_pages=result.total_pages,
        current_page=result.current_page,
    )


@app.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreate,
    current_user: User = Depends(get_current_user),
    tasks: TaskRepository = Depends(get_task_repository),
):
    """Create a task owned by the current user."""
    return TaskResponse(task=lifecycle.create_task(tasks, current_user, payload))


@app.get("/tasks/stats", response_model=TaskStatistics)
def task_stats(
    current_user: User = Depends(get_current_user),
    tasks: TaskRepository = Depends(get_task_repository),
):
    """Completion, priority and category counts for the current user."""
    return statistics.get_task_statistics(tasks, current_user)


@app.get("/tasks/export", response_model=ExportResponse)
def export_tasks(
    current_user: User = Depends(get_current_user),
    tasks: TaskRepository = Depends(get_task_repository),
):
    """Export every task owned by the current user."""
    exported = relationships.export_tasks(tasks, current_user)
    return ExportResponse(count=len(exported), tasks=exported)


@app.post("/tasks/import", response_model=ImportResponse, status_code=status.HTTP_201_CREATED)
def import_tasks(
    payload: Any = Body(...),
    current_user: User = Depends(get_current_user),
    tasks: TaskRepository = Depends(get_task_repository),
):
    """Import a JSON list of tasks for the current user (all or nothing)."""
    created = relationships.import_tasks(tasks, current_user, payload)
    return ImportResponse(imported_count=len(created))


@app.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: str,
    current_user: User = Depends(get_current_user),
    tasks: TaskRepository = Depends(get_task_repository),
):
    return TaskResponse(task=lifecycle.get_task(tasks, current_user, task_id))


@app.put("/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    payload: TaskUpdate,
    current_user: User = Depends(get_current_user),
    tasks: TaskRepository = Depends(get_task_repository),
):
    """Partially update a task; omitted fields are left unchanged."""
    return TaskResponse(task=lifecycle.update_task(tasks, current_user, task_id, payload))


@app.delete("/tasks/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: str,
    current_user: User = Depends(get_current_user),
    tasks: TaskRepository = Depends(get_task_repository),
):
    lifecycle.delete_task(tasks, current_user, task_id)
    return MessageResponse(message="Task removed")


@app.post("/tasks/{task_id}/share", response_model=MessageResponse)
def share_task(
    task_id: str,
    payload: ShareRequest,
    current_user: User = Depends(get_current_user),
    tasks: TaskRepository = Depends(get_task_repository),
    users: UserRepository = Depends(get_user_repository),
):
    """Give another user (by email) an independent copy of a task."""
    relationships.share_task(tasks, users, current_user, task_id, payload.email)
    return MessageResponse(message="Task shared successfully")


@app.post("/tasks/{task_id}/duplicate", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def duplicate_task(
    task_id: str,
    current_user: User = Depends(get_current_user),
    tasks: TaskRepository = Depends(get_task_repository),
):
    return TaskResponse(task=relationships.duplicate_task(tasks, current_user, task_id))


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------

@app.get("/admin/users", response_model=UserListResponse)
def admin_list_users(
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    all_users = admin.list_users(users, current_user)
    return UserListResponse(count=len(all_users), users=all_users)


@app.get("/admin/users/stats/overview", response_model=SystemStatistics)
def admin_stats_overview(
    current_user: User = Depends(get_current_user),
    tasks: TaskRepository = Depends(get_task_repository),
    users: UserRepository = Depends(get_user_repository),
):
    """System-wide user and task totals."""
    return statistics.get_system_statistics(tasks, users, current_user)


@app.get("/admin/users/{user_id}", response_model=UserDetailResponse)
def admin_get_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    tasks: TaskRepository = Depends(get_task_repository),
    users: UserRepository = Depends(get_user_repository),
):
    return UserDetailResponse(**admin.get_user_detail(users, tasks, current_user, user_id))


@app.put("/admin/users/{user_id}", response_model=UserResponse)
def admin_update_user(
    user_id: str,
    payload: UserUpdate,
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    return UserResponse(user=admin.update_user(users, current_user, user_id, payload))


@app.delete("/admin/users/{user_id}", response_model=MessageResponse)
def admin_delete_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    """Delete a user and all of its tasks."""
    admin.delete_user(users, current_user, user_id)
    return MessageResponse(message="User and associated tasks deleted successfully")


@app.patch("/admin/users/{user_id}/toggle-active", response_model=ToggleActiveResponse)
def admin_toggle_user_active(
    user_id: str,
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    user = admin.toggle_user_active(users, current_user, user_id)
    state = "activated" if user.is_active else "deactivated"
    return ToggleActiveResponse(message=f"User {state} successfully", user=user)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
