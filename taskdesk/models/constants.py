"""Constants for taskdesk.

This module centralizes all magic numbers and default values used throughout the application.
"""

import os

from taskdesk.models.task import TaskPriority


# Task defaults
DEFAULT_PRIORITY = TaskPriority.MEDIUM
DEFAULT_CATEGORY = "general"

# Relationship operations
DUPLICATE_TITLE_SUFFIX = " (Copy)"

# Listing
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))
DEFAULT_SORT = "-created_at"
# Largest row offset the stores accept (signed 64-bit)
MAX_OFFSET = 2 ** 63 - 1

# Priority ordering used when sorting by priority (low < medium < high)
PRIORITY_RANK = {
    TaskPriority.LOW.value: 0,
    TaskPriority.MEDIUM.value: 1,
    TaskPriority.HIGH.value: 2,
}
