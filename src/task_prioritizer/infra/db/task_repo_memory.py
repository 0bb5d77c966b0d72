from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence

from task_prioritizer.domain.dates import utc_now
from task_prioritizer.domain.errors import TaskNotFound
from task_prioritizer.domain.task_models import PriorityUpdate, Task, TaskCreate, TaskQuery


class InMemoryTaskRepo:
    """
    Dict-backed store with the same contract as SQLiteTaskRepo.
    Used as the test double and for throwaway local runs.
    """
    def __init__(self):
        # insertion order doubles as storage order
        self._tasks: Dict[int, Task] = {}
        self._next_id = 1

    async def create(self, data: TaskCreate) -> Task:
        now = utc_now()
        task = Task(
            id=self._next_id,
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            priority=data.priority,
            created_at=now,
            updated_at=now,
        )
        self._next_id += 1
        self._tasks[task.id] = task
        return task

    async def get(self, task_id: int) -> Optional[Task]:
        return self._tasks.get(task_id)

    async def update(self, task_id: int, changes: Dict[str, Any]) -> Task:
        current = self._tasks.get(task_id)
        if current is None:
            raise TaskNotFound(task_id)
        task = current.model_copy(update={**changes, "updated_at": utc_now()})
        self._tasks[task_id] = task
        return task

    async def delete(self, task_id: int) -> None:
        if self._tasks.pop(task_id, None) is None:
            raise TaskNotFound(task_id)

    async def find(self, query: TaskQuery) -> List[Task]:
        out = list(self._tasks.values())
        if query.priority is not None:
            out = [t for t in out if t.priority == query.priority]
        if query.due_range is not None:
            start, end = query.due_range
            out = [t for t in out if start <= t.due_date <= end]
        # stable sort: ties keep storage order
        return sorted(out, key=lambda t: t.priority, reverse=True)

    async def list_overdue(self, now: str) -> List[Task]:
        return [t for t in self._tasks.values() if t.due_date < now]

    async def batch_update_priority(self, updates: Sequence[PriorityUpdate]) -> None:
        # check everything before touching anything
        for u in updates:
            if u.id not in self._tasks:
                raise TaskNotFound(u.id)
        now = utc_now()
        for u in updates:
            self._tasks[u.id] = self._tasks[u.id].model_copy(
                update={"priority": u.priority, "updated_at": now}
            )
