from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Tuple, TypedDict

from typing_extensions import NotRequired

Priority = Literal["low", "medium", "high"]

PRIORITIES: Tuple[str, ...] = ("low", "medium", "high")
DEFAULT_PRIORITY: Priority = "medium"


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A lightweight domain model representing a Task record held by the store.

    Fields:
    - id: Unique integer identifier, assigned from the store counter and never reused
    - title: Short title, trimmed and never empty
    - description: Free text, empty string when not supplied
    - completed: Boolean completion flag
    - priority: One of PRIORITIES
    - created_at: UTC creation timestamp, immutable
    - updated_at: UTC timestamp of the last replace/toggle; absent until then
    """

    id: int
    title: str
    description: str
    completed: bool
    priority: Priority
    created_at: datetime
    updated_at: NotRequired[datetime]


# (title, description, completed, priority) of the records a fresh store starts with.
SEED_TASKS: List[Tuple[str, str, bool, Priority]] = [
    ("Learn API Testing", "Master Bruno and Postman", False, "high"),
    ("Build Demo API", "Create a testable REST API", True, "medium"),
    ("Write Documentation", "Document all endpoints", False, "low"),
]
