from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from fastapi import Request

from .errors import InvalidInput
from .models import PRIORITIES, TaskEntity

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


# PUBLIC_INTERFACE
def utcnow() -> datetime:
    """Current time as an aware UTC datetime truncated to milliseconds."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


# PUBLIC_INTERFACE
def isoformat_z(value: datetime) -> str:
    """Render a datetime as ISO8601 with millisecond precision and a 'Z' suffix for UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# PUBLIC_INTERFACE
def parse_int_prefix(raw: str) -> Optional[int]:
    """
    Leniently parse the integer at the start of a path segment.

    "12" -> 12, " 7" -> 7, "12abc" -> 12, "abc" -> None.
    """
    match = _LEADING_INT.match(raw)
    if match is None:
        return None
    return int(match.group(1))


# PUBLIC_INTERFACE
async def read_json_body(request: Request) -> Any:
    """
    Return the parsed JSON request body.

    - Empty bodies and bodies without a JSON content type are read as {}
    - Malformed JSON raises InvalidInput
    - Only objects and arrays are accepted at the top level; 5, "x" or null raise InvalidInput
    """
    content_type = request.headers.get("content-type", "")
    raw = await request.body()
    if not raw or "json" not in content_type.lower():
        return {}
    try:
        body = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise InvalidInput("Request body is not valid JSON") from e
    if not isinstance(body, (dict, list)):
        raise InvalidInput("Request body must be a JSON object or array")
    return body


# PUBLIC_INTERFACE
def list_envelope(items: Union[Sequence[Any], Iterable[Any]]) -> Dict[str, Any]:
    """
    Build the standard envelope for list endpoints.

    Returns:
        Dict with keys: count, tasks.
    """
    materialized: List[Any] = list(items) if not isinstance(items, list) else items
    return {"count": len(materialized), "tasks": materialized}


# PUBLIC_INTERFACE
def completion_rate(completed: int, total: int) -> str:
    """
    Percentage of completed tasks with one decimal place ("33.3%"), ties rounded
    up ("6.3%" for 1 of 16).
    An empty collection yields exactly "0%".
    """
    if total <= 0:
        return "0%"
    rate = Decimal(completed / total * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{rate}%"


# PUBLIC_INTERFACE
def compute_stats(tasks: Sequence[TaskEntity]) -> Dict[str, Any]:
    """
    Aggregate counts over a collection of tasks.

    Returns:
        Dict with keys: total, completed, pending, by_priority, completion_rate.
    """
    total = len(tasks)
    completed = sum(1 for t in tasks if t["completed"])
    by_priority = {p: 0 for p in reversed(PRIORITIES)}
    for t in tasks:
        if t["priority"] in by_priority:
            by_priority[t["priority"]] += 1
    return {
        "total": total,
        "completed": completed,
        "pending": total - completed,
        "by_priority": by_priority,
        "completion_rate": completion_rate(completed, total),
    }
