"""
Task payload validation.

`validate_task` and `validate_task_update` return a tagged result instead of
raising, so callers decide how each failure kind is reported:

- `Valid`       the normalized payload, ready for the store
- `InvalidDate` the due date failed normalization (checked first, alone)
- `Invalid`     every field-level violation that was found
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from task_prioritizer.domain.dates import normalize_due_date
from task_prioritizer.domain.errors import FieldError, InvalidPayloadShape, ValidationError
from task_prioritizer.domain.task_models import (
    PRIORITY_MAX,
    PRIORITY_MIN,
    PriorityUpdate,
    TaskCreate,
    TaskUpdate,
)

DUE_DATE_MESSAGE = "Due date must be a valid ISO 8601 timestamp"

_TASK_FIELDS = ("title", "description", "due_date", "priority")


@dataclass(frozen=True)
class Valid:
    task: Union[TaskCreate, TaskUpdate]


@dataclass(frozen=True)
class Invalid:
    errors: List[FieldError] = field(default_factory=list)


@dataclass(frozen=True)
class InvalidDate:
    message: str = DUE_DATE_MESSAGE


ValidationResult = Union[Valid, Invalid, InvalidDate]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_priority(value: Any, name: str = "priority") -> List[FieldError]:
    if not _is_int(value):
        return [FieldError(name, "Priority must be an integer")]
    if value < PRIORITY_MIN:
        return [FieldError(name, f"Priority must be at least {PRIORITY_MIN}")]
    if value > PRIORITY_MAX:
        return [FieldError(name, f"Priority must be at most {PRIORITY_MAX}")]
    return []


def _check_fields(data: Dict[str, Any], *, partial: bool) -> List[FieldError]:
    errors: List[FieldError] = []

    if "title" in data or not partial:
        title = data.get("title")
        if title is None:
            errors.append(FieldError("title", "Title is required"))
        elif not isinstance(title, str) or len(title) < 1:
            errors.append(FieldError("title", "Title must be a non-empty string"))

    if "description" in data:
        desc = data["description"]
        if desc is not None and not isinstance(desc, str):
            errors.append(FieldError("description", "Description must be a string"))

    if "due_date" in data or not partial:
        due = data.get("due_date")
        if due is None:
            errors.append(FieldError("due_date", "Due date is required"))
        elif normalize_due_date(due) is None:
            errors.append(FieldError("due_date", DUE_DATE_MESSAGE))

    if "priority" in data or not partial:
        if data.get("priority") is None:
            errors.append(FieldError("priority", "Priority is required"))
        else:
            errors.extend(_check_priority(data["priority"]))

    return errors


def _validate(payload: Any, *, partial: bool) -> ValidationResult:
    if not isinstance(payload, dict):
        return Invalid([FieldError("body", "Expected a JSON object")])

    data = {k: payload[k] for k in _TASK_FIELDS if k in payload}

    if data.get("due_date") is not None:
        canonical = normalize_due_date(data["due_date"])
        if canonical is None:
            return InvalidDate()
        data["due_date"] = canonical

    errors = _check_fields(data, partial=partial)
    if errors:
        return Invalid(errors)
    if partial:
        return Valid(TaskUpdate(**data))
    return Valid(TaskCreate(**data))


def validate_task(payload: Any) -> ValidationResult:
    """Full validation for create and full-replacement updates."""
    return _validate(payload, partial=False)


def validate_task_update(payload: Any) -> ValidationResult:
    """Same field rules as `validate_task`, applied only to supplied fields."""
    return _validate(payload, partial=True)


def validate_reorder(payload: Any) -> List[PriorityUpdate]:
    """
    Check a reorder body: a list of {id, priority} objects.

    Raises InvalidPayloadShape for a non-list body and ValidationError for
    malformed elements. Nothing here touches the store.
    """
    if not isinstance(payload, list):
        raise InvalidPayloadShape("Expected an array of updates")

    updates: List[PriorityUpdate] = []
    errors: List[FieldError] = []
    for i, item in enumerate(payload):
        if not isinstance(item, dict):
            errors.append(FieldError(str(i), "Expected an object with id and priority"))
            continue
        item_errors: List[FieldError] = []
        if not _is_int(item.get("id")):
            item_errors.append(FieldError(f"{i}.id", "Id must be an integer"))
        item_errors.extend(_check_priority(item.get("priority"), name=f"{i}.priority"))
        if item_errors:
            errors.extend(item_errors)
            continue
        updates.append(PriorityUpdate(id=item["id"], priority=item["priority"]))

    if errors:
        raise ValidationError(errors)
    return updates
