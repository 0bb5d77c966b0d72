# tests/helpers.py

from __future__ import annotations

from datetime import datetime, timezone

from task_prioritizer.domain.task_models import TaskCreate


def task_payload(**overrides) -> dict:
    payload = {
        "title": "Write report",
        "description": "quarterly numbers",
        "due_date": "2024-12-01T00:00:00.000Z",
        "priority": 5,
    }
    payload.update(overrides)
    return payload


def task_create(**overrides) -> TaskCreate:
    return TaskCreate(**task_payload(**overrides))


FIXED_NOW = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
