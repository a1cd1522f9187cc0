from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from threading import RLock
from typing import Iterable, List, Optional

from fastapi import Request

from .models import SEED_TASKS, Priority, TaskEntity
from .schemas import TaskCreate, TaskReplace
from .utils import utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListQuery:
    """
    Filters for listing tasks. Every supplied filter must match (logical AND).

    completed is the raw query-string value: when present, only the literal
    "true" selects completed tasks; any other value selects pending ones.
    """
    completed: Optional[str] = None
    priority: Optional[str] = None
    search: Optional[str] = None


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for task storage."""

    @abstractmethod
    def create(self, data: TaskCreate) -> TaskEntity:
        """Create and return a new TaskEntity."""

    @abstractmethod
    def get(self, task_id: int) -> Optional[TaskEntity]:
        """Return a TaskEntity by id, or None if not found."""

    @abstractmethod
    def replace(self, task_id: int, data: TaskReplace) -> Optional[TaskEntity]:
        """Replace every mutable field of a TaskEntity. Return it, or None if not found."""

    @abstractmethod
    def toggle(self, task_id: int) -> Optional[TaskEntity]:
        """Flip the completed flag of a TaskEntity. Return it, or None if not found."""

    @abstractmethod
    def delete(self, task_id: int) -> Optional[TaskEntity]:
        """Delete a TaskEntity by id. Return the removed entity, or None if not found."""

    @abstractmethod
    def list(self, query: Optional[ListQuery] = None) -> List[TaskEntity]:
        """
        Return the TaskEntities matching the filters, in insertion order.
        - Filter by completed (literal "true" vs anything else)
        - Filter by exact priority
        - Case-insensitive substring search on title
        """

    @abstractmethod
    def all(self) -> List[TaskEntity]:
        """Return every TaskEntity in insertion order."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository. Insertion order of the underlying dict is
    the listing order.
    """

    def __init__(self, seed: bool = True) -> None:
        self._lock = RLock()
        self._items: dict[int, TaskEntity] = {}
        self._next_id = 1
        if seed:
            self._seed()

    def _now(self) -> datetime:
        return utcnow()

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i

    def _seed(self) -> None:
        now = self._now()
        for title, description, completed, priority in SEED_TASKS:
            self._insert(title, description, completed, priority, now)

    def _insert(
        self,
        title: str,
        description: str,
        completed: bool,
        priority: Priority,
        created_at: datetime,
    ) -> TaskEntity:
        with self._lock:
            entity: TaskEntity = {
                "id": self._allocate_id(),
                "title": title,
                "description": description,
                "completed": completed,
                "priority": priority,
                "created_at": created_at,
            }
            self._items[entity["id"]] = entity
            return entity.copy()

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._next_id

    def create(self, data: TaskCreate) -> TaskEntity:
        created = self._insert(data.title, data.description, False, data.priority, self._now())
        logger.info("Created task %s (%r)", created["id"], created["title"])
        return created

    def get(self, task_id: int) -> Optional[TaskEntity]:
        with self._lock:
            item = self._items.get(task_id)
            return None if item is None else item.copy()

    def replace(self, task_id: int, data: TaskReplace) -> Optional[TaskEntity]:
        with self._lock:
            existing = self._items.get(task_id)
            if existing is None:
                return None

            # id and created_at survive a full replace
            updated = existing.copy()
            updated["title"] = data.title
            updated["description"] = data.description
            updated["completed"] = data.completed
            updated["priority"] = data.priority
            updated["updated_at"] = self._now()

            self._items[task_id] = updated
            logger.info("Replaced task %s", task_id)
            return updated.copy()

    def toggle(self, task_id: int) -> Optional[TaskEntity]:
        with self._lock:
            existing = self._items.get(task_id)
            if existing is None:
                return None
            existing["completed"] = not existing["completed"]
            existing["updated_at"] = self._now()
            logger.info("Toggled task %s to completed=%s", task_id, existing["completed"])
            return existing.copy()

    def delete(self, task_id: int) -> Optional[TaskEntity]:
        with self._lock:
            removed = self._items.pop(task_id, None)
        if removed is not None:
            logger.info("Deleted task %s", task_id)
        return removed

    def list(self, query: Optional[ListQuery] = None) -> List[TaskEntity]:
        q = query or ListQuery()
        with self._lock:
            items: Iterable[TaskEntity] = self._items.values()

            if q.completed is not None:
                wanted = q.completed == "true"
                items = [t for t in items if t["completed"] == wanted]

            if q.priority:
                items = [t for t in items if t["priority"] == q.priority]

            if q.search:
                s = q.search.lower()
                items = [t for t in items if s in t["title"].lower()]

            # Return copies to avoid external mutation
            return [t.copy() for t in items]

    def all(self) -> List[TaskEntity]:
        return self.list()


# PUBLIC_INTERFACE
def get_repository(request: Request) -> Repository:
    """
    Dependency returning the repository owned by the running application
    (created in main.create_app and kept on app.state).
    """
    return request.app.state.repository
