from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated

from .errors import InvalidInput
from .models import DEFAULT_PRIORITY, PRIORITIES, Priority
from .utils import isoformat_z

# Datetimes leave the API as ISO8601 UTC strings with millisecond precision, e.g. 2025-01-31T13:45:00.123Z
Timestamp = Annotated[datetime, PlainSerializer(isoformat_z, return_type=str, when_used="json")]

_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def is_truthy(value: Any) -> bool:
    """
    JavaScript-style truthiness used by the lenient body fields.

    None, False, 0, NaN and "" are false; every other value (including the
    string "false", empty lists and empty objects) is true.
    """
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return value != ""
    return True


def _normalize_title(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput("Title is required")
    return value.strip()


def _normalize_description(value: Any) -> str:
    if not is_truthy(value):
        return ""
    return value if isinstance(value, str) else str(value)


def _normalize_priority(value: Any) -> Priority:
    if not is_truthy(value):
        return DEFAULT_PRIORITY
    if value not in PRIORITIES:
        raise InvalidInput(f"Invalid priority. Must be one of: {', '.join(PRIORITIES)}")
    return value


def _as_mapping(body: Any) -> Mapping[str, Any]:
    return body if isinstance(body, dict) else {}


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Normalized payload for creating a Task.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Learn API Testing",
                "description": "Master Bruno and Postman",
                "priority": "high",
            }
        }
    )

    title: str = Field(..., description="Short title for the task, trimmed and non-empty")
    description: str = Field(default="", description="Optional detailed description")
    priority: Priority = Field(default=DEFAULT_PRIORITY, description="One of low, medium, high")


# PUBLIC_INTERFACE
class TaskReplace(TaskCreate):
    """
    Normalized payload for fully replacing a Task. Omitted fields fall back to
    their defaults rather than keeping the stored value.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Learn API Testing",
                "description": "Master Bruno, Postman and curl",
                "completed": True,
                "priority": "medium",
            }
        }
    )

    completed: bool = Field(default=False, description="Completion status flag")


# PUBLIC_INTERFACE
def normalize_create(body: Any) -> TaskCreate:
    """
    Apply the create rules to a raw JSON body.

    - title: required string, trimmed, must be non-empty
    - description: falsy -> "", non-string -> str(value)
    - priority: falsy -> "medium", otherwise must be low/medium/high

    Raises:
        InvalidInput when the title is missing/blank or the priority is unknown.
    """
    data = _as_mapping(body)
    return TaskCreate(
        title=_normalize_title(data.get("title")),
        description=_normalize_description(data.get("description")),
        priority=_normalize_priority(data.get("priority")),
    )


# PUBLIC_INTERFACE
def normalize_replace(body: Any) -> TaskReplace:
    """
    Apply the replace rules to a raw JSON body: the create rules plus
    completed -> is_truthy(value), absent -> False.
    """
    data = _as_mapping(body)
    return TaskReplace(
        title=_normalize_title(data.get("title")),
        description=_normalize_description(data.get("description")),
        completed=is_truthy(data.get("completed")),
        priority=_normalize_priority(data.get("priority")),
    )


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema returned by the API for a Task. updatedAt is omitted until the
    task is first replaced or toggled.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 4,
                "title": "Try the toggle endpoint",
                "description": "",
                "completed": False,
                "priority": "medium",
                "createdAt": "2025-01-25T10:15:30.123Z",
            }
        },
    )

    id: int = Field(..., description="Unique identifier of the task")
    title: str = Field(..., description="Short title for the task")
    description: str = Field(..., description="Detailed description, may be empty")
    completed: bool = Field(..., description="Completion status flag")
    priority: Priority = Field(..., description="One of low, medium, high")
    created_at: Timestamp = Field(..., description="Creation timestamp")
    updated_at: Optional[Timestamp] = Field(default=None, description="Last update timestamp")


class TaskList(BaseModel):
    """
    Envelope for list responses.
    """

    count: int = Field(..., description="Number of tasks returned")
    tasks: List[TaskOut] = Field(..., description="Matching tasks in insertion order")


class TaskDeleted(BaseModel):
    message: str
    deleted: TaskOut


class PriorityCounts(BaseModel):
    high: int
    medium: int
    low: int


class TaskStats(BaseModel):
    """
    Aggregate counts over the whole collection.
    """

    model_config = _camel

    total: int
    completed: int
    pending: int
    by_priority: PriorityCounts
    completion_rate: str = Field(..., description="Percentage with one decimal, or '0%' when empty")


class ErrorBody(BaseModel):
    error: str
    message: str
    hint: Optional[str] = None


def error_responses(*codes: int) -> Dict[int, Dict[str, Any]]:
    """Build the `responses` mapping documenting ErrorBody for the given status codes."""
    return {code: {"model": ErrorBody} for code in codes}
