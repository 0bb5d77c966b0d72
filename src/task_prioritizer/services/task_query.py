from __future__ import annotations
import logging
import re
from datetime import datetime
from typing import Callable, List, Optional

from task_prioritizer.domain.dates import parse_instant, to_canonical, utc_now
from task_prioritizer.domain.errors import QueryError
from task_prioritizer.domain.task_models import Task, TaskQuery

logger = logging.getLogger("tasks.query")

_INT_RE = re.compile(r"-?[0-9]+", re.ASCII)


def _present(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def build_query(
    priority: Optional[str] = None,
    due_start: Optional[str] = None,
    due_end: Optional[str] = None,
) -> TaskQuery:
    """
    Turn raw filter parameters into a TaskQuery.

    The due-date range only applies when both bounds are given. A lone
    bound is still checked for format but otherwise ignored.
    """
    prio: Optional[int] = None
    if _present(priority):
        text = priority.strip()
        if not _INT_RE.fullmatch(text):
            raise QueryError("Invalid priority value")
        prio = int(text)

    bounds = []
    for raw in (due_start, due_end):
        if not _present(raw):
            bounds.append(None)
            continue
        parsed = parse_instant(raw)
        if parsed is None:
            raise QueryError("Invalid date format")
        bounds.append(to_canonical(parsed))

    start, end = bounds
    due_range = (start, end) if start is not None and end is not None else None
    return TaskQuery(priority=prio, due_range=due_range)


class TaskQueryEngine:
    def __init__(self, repo, clock: Callable[[], datetime] = utc_now):
        self.repo = repo
        self.clock = clock

    async def list(
        self,
        priority: Optional[str] = None,
        due_start: Optional[str] = None,
        due_end: Optional[str] = None,
    ) -> List[Task]:
        query = build_query(priority, due_start, due_end)
        tasks = await self.repo.find(query)
        logger.info(
            "task.list",
            extra={
                "category": "tasks",
                "event": "task.list",
                "priority": query.priority,
                "due_range": list(query.due_range) if query.due_range else None,
                "returned": len(tasks),
            },
        )
        return tasks

    async def list_overdue(self) -> List[Task]:
        return await self.repo.list_overdue(to_canonical(self.clock()))
