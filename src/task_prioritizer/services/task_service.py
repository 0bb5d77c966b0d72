import logging
from datetime import datetime
from typing import Any, Callable, List, Optional

from task_prioritizer.domain.dates import utc_now
from task_prioritizer.domain.errors import InvalidDateError, TaskNotFound, ValidationError
from task_prioritizer.domain.task_models import Task
from task_prioritizer.domain.validation import (
    Invalid,
    InvalidDate,
    ValidationResult,
    validate_reorder,
    validate_task,
    validate_task_update,
)
from task_prioritizer.services.task_query import TaskQueryEngine

logger = logging.getLogger("tasks.service")


def _unwrap(result: ValidationResult):
    if isinstance(result, InvalidDate):
        raise InvalidDateError(result.message)
    if isinstance(result, Invalid):
        raise ValidationError(result.errors)
    return result.task


class TaskService:
    def __init__(self, repo, clock: Callable[[], datetime] = utc_now):
        self.repo = repo
        self.query = TaskQueryEngine(repo, clock=clock)

    async def create_task(self, payload: Any) -> Task:
        data = _unwrap(validate_task(payload))
        task = await self.repo.create(data)
        logger.info("task.create", extra={"category": "tasks", "event": "task.create", "task_id": task.id})
        return task

    async def get_task(self, task_id: int) -> Optional[Task]:
        return await self.repo.get(task_id)

    async def update_task(self, task_id: int, payload: Any) -> Task:
        data = _unwrap(validate_task_update(payload))
        changes = data.changes()
        task = await self.repo.update(task_id, changes)
        logger.info(
            "task.update",
            extra={"category": "tasks", "event": "task.update", "task_id": task_id, "fields": sorted(changes)},
        )
        return task

    async def delete_task(self, task_id: int) -> None:
        await self.repo.delete(task_id)
        logger.info("task.delete", extra={"category": "tasks", "event": "task.delete", "task_id": task_id})

    async def list_tasks(
        self,
        priority: Optional[str] = None,
        due_start: Optional[str] = None,
        due_end: Optional[str] = None,
    ) -> List[Task]:
        return await self.query.list(priority, due_start, due_end)

    async def list_overdue(self) -> List[Task]:
        return await self.query.list_overdue()

    async def reorder_tasks(self, payload: Any) -> None:
        updates = validate_reorder(payload)
        try:
            await self.repo.batch_update_priority(updates)
        except TaskNotFound as exc:
            logger.warning(
                "task.reorder.failed",
                extra={"category": "tasks", "event": "task.reorder.failed", "task_id": exc.task_id},
            )
            raise
        logger.info("task.reorder", extra={"category": "tasks", "event": "task.reorder", "count": len(updates)})
