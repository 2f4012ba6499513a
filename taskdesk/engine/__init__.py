"""Task query, access-control and relationship engine for taskdesk."""

from taskdesk.engine.access import Capability, has_capability, require_capability, get_owned_task
from taskdesk.engine.query_builder import build_task_query, build_export_query, parse_sort
from taskdesk.engine.lifecycle import list_tasks, get_task, create_task, update_task, delete_task
from taskdesk.engine.statistics import get_task_statistics, get_system_statistics
from taskdesk.engine.relationships import share_task, duplicate_task, export_tasks, import_tasks
from taskdesk.engine.admin import list_users, get_user_detail, update_user, delete_user, toggle_user_active

__all__ = [
    "Capability",
    "has_capability",
    "require_capability",
    "get_owned_task",
    "build_task_query",
    "build_export_query",
    "parse_sort",
    "list_tasks",
    "get_task",
    "create_task",
    "update_task",
    "delete_task",
    "get_task_statistics",
    "get_system_statistics",
    "share_task",
    "duplicate_task",
    "export_tasks",
    "import_tasks",
    "list_users",
    "get_user_detail",
    "update_user",
    "delete_user",
    "toggle_user_active",
]
