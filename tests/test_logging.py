# tests/test_logging.py

from __future__ import annotations

import json
import logging

from task_prioritizer.observability.logging import JsonFormatter, request_id_var


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("tasks.service", logging.INFO, __file__, 1, "task.create", None, None)
    for k, v in extra.items():
        setattr(record, k, v)
    return record


def test_formatter_emits_one_json_object_with_extras() -> None:
    line = JsonFormatter().format(_record(category="tasks", event="task.create", task_id=3))
    payload = json.loads(line)

    assert payload["level"] == "INFO"
    assert payload["logger"] == "tasks.service"
    assert payload["msg"] == "task.create"
    assert payload["task_id"] == 3
    assert payload["ts"].endswith("Z")
    assert "lineno" not in payload


def test_formatter_adds_bound_request_id() -> None:
    token = request_id_var.set("req-1")
    try:
        payload = json.loads(JsonFormatter().format(_record()))
    finally:
        request_id_var.reset(token)

    assert payload["request_id"] == "req-1"
    assert "request_id" not in json.loads(JsonFormatter().format(_record()))
