from __future__ import annotations

from typing import Any, Dict, Optional, Type

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from ..errors import NotFound
from ..repositories import ListQuery, Repository, get_repository
from ..schemas import (
    TaskCreate,
    TaskDeleted,
    TaskList,
    TaskOut,
    TaskReplace,
    error_responses,
    normalize_create,
    normalize_replace,
)
from ..utils import list_envelope, parse_int_prefix, read_json_body

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
)


def _json_body_doc(model: Type[BaseModel]) -> Dict[str, Any]:
    """
    Document a request body that is read leniently by read_json_body rather
    than validated by FastAPI.
    """
    return {
        "requestBody": {
            "content": {"application/json": {"schema": model.model_json_schema()}},
            "required": False,
        }
    }


def _task_id(raw: str) -> int:
    task_id = parse_int_prefix(raw)
    if task_id is None:
        raise NotFound(f"Task with id {raw} not found")
    return task_id


def _not_found(task_id: int) -> NotFound:
    return NotFound(f"Task with id {task_id} not found")


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=TaskList,
    response_model_exclude_none=True,
    summary="List Tasks",
    description=(
        "List tasks in insertion order with optional filters (all must match).\n\n"
        "Query parameters:\n"
        "- completed: 'true' selects completed tasks, any other value selects pending ones\n"
        "- priority: exact match on low, medium or high\n"
        "- search: case-insensitive substring match on the title\n\n"
        "Returns the matching tasks and their count."
    ),
)
def list_tasks(
    completed: Optional[str] = Query(None, description="'true' for completed tasks, anything else for pending"),
    priority: Optional[str] = Query(None, description="Filter by priority: low, medium, high"),
    search: Optional[str] = Query(None, description="Search text for the title"),
    repo: Repository = Depends(get_repository),
) -> TaskList:
    """
    List tasks matching the supplied filters.
    """
    items = repo.list(ListQuery(completed=completed, priority=priority, search=search))
    envelope = list_envelope([TaskOut(**it) for it in items])  # type: ignore[arg-type]
    return TaskList(**envelope)


# PUBLIC_INTERFACE
@router.get(
    "/{task_id}",
    response_model=TaskOut,
    response_model_exclude_none=True,
    summary="Get Task",
    description="Get a single task by ID.",
    responses=error_responses(404),
)
def get_task(task_id: str, repo: Repository = Depends(get_repository)) -> TaskOut:
    """
    Retrieve a single task by its ID.
    """
    tid = _task_id(task_id)
    item = repo.get(tid)
    if item is None:
        raise _not_found(tid)
    return TaskOut(**item)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskOut,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a new task and return it. priority defaults to 'medium', description to ''.",
    responses=error_responses(400),
    openapi_extra=_json_body_doc(TaskCreate),
)
def create_task(
    body: Any = Depends(read_json_body),
    repo: Repository = Depends(get_repository),
) -> TaskOut:
    """
    Create a new task.
    """
    created = repo.create(normalize_create(body))
    return TaskOut(**created)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.put(
    "/{task_id}",
    response_model=TaskOut,
    response_model_exclude_none=True,
    summary="Replace Task",
    description=(
        "Replace every field of an existing task. Omitted fields are reset to their defaults; "
        "id and createdAt are kept and updatedAt is stamped."
    ),
    responses=error_responses(400, 404),
    openapi_extra=_json_body_doc(TaskReplace),
)
def replace_task(
    task_id: str,
    body: Any = Depends(read_json_body),
    repo: Repository = Depends(get_repository),
) -> TaskOut:
    """
    Full replace of a task. Existence is checked before the body is validated.
    """
    tid = _task_id(task_id)
    if repo.get(tid) is None:
        raise _not_found(tid)
    updated = repo.replace(tid, normalize_replace(body))
    if updated is None:
        raise _not_found(tid)
    return TaskOut(**updated)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.patch(
    "/{task_id}/toggle",
    response_model=TaskOut,
    response_model_exclude_none=True,
    summary="Toggle Task",
    description="Flip the completed flag of a task.",
    responses=error_responses(404),
)
def toggle_task(task_id: str, repo: Repository = Depends(get_repository)) -> TaskOut:
    """
    Toggle completion of a task.
    """
    tid = _task_id(task_id)
    updated = repo.toggle(tid)
    if updated is None:
        raise _not_found(tid)
    return TaskOut(**updated)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    response_model=TaskDeleted,
    response_model_exclude_none=True,
    summary="Delete Task",
    description="Delete a task by ID and return the removed record.",
    responses=error_responses(404),
)
def delete_task(task_id: str, repo: Repository = Depends(get_repository)) -> TaskDeleted:
    """
    Delete a task. Returns 200 with the deleted record, 404 if not found.
    """
    tid = _task_id(task_id)
    removed = repo.delete(tid)
    if removed is None:
        raise _not_found(tid)
    return TaskDeleted(message="Task deleted successfully", deleted=TaskOut(**removed))  # type: ignore[arg-type]
