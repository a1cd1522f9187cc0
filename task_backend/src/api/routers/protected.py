from __future__ import annotations

from fastapi import APIRouter, Depends

from ..auth import require_api_key
from ..repositories import Repository, get_repository
from ..schemas import TaskStats, error_responses
from ..utils import compute_stats

router = APIRouter(
    prefix="/api/protected",
    tags=["protected"],
    dependencies=[Depends(require_api_key)],
    responses=error_responses(401),
)


# PUBLIC_INTERFACE
@router.get(
    "/stats",
    response_model=TaskStats,
    summary="Task Statistics",
    description="Totals, per-priority counts and completion rate. Requires the x-api-key header.",
)
def task_stats(repo: Repository = Depends(get_repository)) -> TaskStats:
    """
    Aggregate statistics over the whole collection.
    """
    return TaskStats(**compute_stats(repo.all()))
