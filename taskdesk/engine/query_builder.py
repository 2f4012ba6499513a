"""Query construction for task listings.

Turns raw listing parameters into a validated `TaskQuery`. The owner
constraint is taken from the principal here and nowhere else, so a listing
cannot be built without it.
"""

from typing import Optional, Tuple

from taskdesk.errors import ValidationError
from taskdesk.models.constants import DEFAULT_PAGE_SIZE, DEFAULT_SORT, MAX_OFFSET, MAX_PAGE_SIZE
from taskdesk.models.query import TaskQuery
from taskdesk.models.task import TaskPriority
from taskdesk.models.user import User

# Public sort names (including camelCase aliases) -> column names
SORT_FIELDS = {
    "created_at": "created_at",
    "createdAt": "created_at",
    "updated_at": "updated_at",
    "updatedAt": "updated_at",
    "due_date": "due_date",
    "dueDate": "due_date",
    "title": "title",
    "priority": "priority",
    "category": "category",
    "completed": "completed",
}
DEFAULT_SORT_FIELD = "created_at"


def parse_sort(sort: Optional[str]) -> Tuple[str, bool]:
    """Parse `field` / `-field` into (column, descending).

    Unknown or empty keys fall back to newest-first creation order.
    """
    if not sort:
        sort = DEFAULT_SORT
    descending = sort.startswith("-")
    name = sort.lstrip("-+").strip()
    field = SORT_FIELDS.get(name)
    if field is None:
        return DEFAULT_SORT_FIELD, True
    return field, descending


def _normalize_priority(priority: Optional[str]) -> Optional[str]:
    if priority is None or priority == "":
        return None
    value = getattr(priority, "value", priority)
    try:
        return TaskPriority(str(value).lower()).value
    except ValueError:
        allowed = ", ".join(p.value for p in TaskPriority)
        raise ValidationError(f"priority: must be one of {allowed}")


def build_task_query(
    principal: User,
    completed: Optional[bool] = None,
    priority: Optional[str] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    sort: Optional[str] = DEFAULT_SORT,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> TaskQuery:
    """Build an owner-scoped, paginated task query.

    Args:
        principal: Authenticated user; the query only ever matches its tasks
        completed: Completion filter (None = no filter)
        priority: Exact priority filter
        category: Exact category filter
        search: Case-insensitive substring matched against title or description
        sort: `field` or `-field`
        page: 1-based page number
        page_size: Requested page size, clamped to MAX_PAGE_SIZE

    Returns:
        TaskQuery descriptor

    Raises:
        ValidationError: Bad priority or pagination values (including a page
            whose offset no store can represent)
    """
    if page is None or page < 1:
        raise ValidationError("page: must be greater than or equal to 1")
    if page_size is None or page_size < 1:
        raise ValidationError("limit: must be greater than 0")
    page_size = min(page_size, MAX_PAGE_SIZE)
    if (page - 1) * page_size > MAX_OFFSET:
        raise ValidationError("page: too large")

    sort_field, sort_descending = parse_sort(sort)
    search = search.strip() if search else None

    return TaskQuery(
        owner_id=principal.id,
        completed=completed,
        priority=_normalize_priority(priority),
        category=category or None,
        search=search or None,
        sort_field=sort_field,
        sort_descending=sort_descending,
        page=page,
        page_size=page_size,
    )


def build_export_query(principal: User) -> TaskQuery:
    """Unpaginated query over all of the principal's tasks, oldest first."""
    return TaskQuery(owner_id=principal.id, sort_field="created_at", sort_descending=False)
