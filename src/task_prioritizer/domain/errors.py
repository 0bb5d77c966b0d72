from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


class TaskError(Exception):
    """Base for every error the task pipeline reports to a caller."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"error": self.message}


class ValidationError(TaskError):
    def __init__(self, errors: List[FieldError]):
        super().__init__("Validation failed")
        self.errors = list(errors)

    def by_field(self) -> Dict[str, List[str]]:
        out: Dict[str, List[str]] = {}
        for err in self.errors:
            out.setdefault(err.field, []).append(err.message)
        return out

    def to_body(self) -> dict:
        return {"errors": self.by_field()}


class InvalidDateError(TaskError):
    pass


class InvalidPayloadShape(TaskError):
    pass


class TaskNotFound(TaskError):
    status_code = 404

    def __init__(self, task_id: int):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class PersistenceError(TaskError):
    pass


class QueryError(TaskError):
    pass
