from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, field_serializer

from task_prioritizer.domain.dates import to_canonical

PRIORITY_MIN = 1
PRIORITY_MAX = 10


class TaskCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    due_date: str
    priority: int = Field(ge=PRIORITY_MIN, le=PRIORITY_MAX)


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    due_date: Optional[str] = None
    priority: Optional[int] = Field(default=None, ge=PRIORITY_MIN, le=PRIORITY_MAX)

    def changes(self) -> Dict[str, Any]:
        # description may be explicitly cleared with null, so rely on
        # fields_set rather than dropping every None
        return {k: getattr(self, k) for k in self.model_fields_set}


class Task(TaskCreate):
    id: int
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def _ts(self, value: datetime) -> str:
        return to_canonical(value)


@dataclass(frozen=True)
class PriorityUpdate:
    id: int
    priority: int


@dataclass(frozen=True)
class TaskQuery:
    """Plan for a task listing, produced by the query engine and run by a store."""

    priority: Optional[int] = None
    # (start, end) canonical timestamps, inclusive on both ends
    due_range: Optional[Tuple[str, str]] = None
