"""Owner-scoped task query descriptor."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TaskQuery:
    """Validated filter, sort and pagination for a task listing.

    `owner_id` has no default: every descriptor is scoped to exactly one
    owner. A `page_size` of None means "no slicing" (export).
    """

    owner_id: str
    completed: Optional[bool] = None
    priority: Optional[str] = None
    category: Optional[str] = None
    search: Optional[str] = None
    sort_field: str = "created_at"
    sort_descending: bool = True
    page: int = 1
    page_size: Optional[int] = None

    @property
    def offset(self) -> int:
        if self.page_size is None:
            return 0
        return (self.page - 1) * self.page_size
