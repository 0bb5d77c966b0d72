import json
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from task_prioritizer.domain.errors import (
    InvalidPayloadShape,
    PersistenceError,
    TaskError,
    TaskNotFound,
)
from task_prioritizer.domain.task_models import Task
from task_prioritizer.services.task_service import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


def get_service(request: Request) -> TaskService:
    # wired in main.create_app
    return request.app.state.task_service


def _fail(status_code: int, exc: TaskError) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=exc.to_body())


def _parse_id(task_id: str) -> Optional[int]:
    try:
        return int(task_id)
    except ValueError:
        return None


def _invalid_id() -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid task id"})


async def _json_body(request: Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidPayloadShape("Malformed JSON body") from None


@router.post("", status_code=201, response_model=Task)
async def create_task(request: Request, svc: TaskService = Depends(get_service)):
    return await svc.create_task(await _json_body(request))


@router.get("", response_model=list[Task])
async def list_tasks(
    priority: Optional[str] = None,
    due_start: Optional[str] = None,
    due_end: Optional[str] = None,
    svc: TaskService = Depends(get_service),
):
    try:
        return await svc.list_tasks(priority, due_start, due_end)
    except PersistenceError as exc:
        return _fail(500, exc)


@router.get("/overdue", response_model=list[Task])
async def list_overdue_tasks(svc: TaskService = Depends(get_service)):
    return await svc.list_overdue()


@router.post("/reorder")
async def reorder_tasks(request: Request, svc: TaskService = Depends(get_service)):
    try:
        await svc.reorder_tasks(await _json_body(request))
    except TaskNotFound as exc:
        # nothing was applied; this is a bad batch, not a missing resource
        return _fail(400, exc)
    return {"message": "Tasks reordered"}


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: str, svc: TaskService = Depends(get_service)):
    tid = _parse_id(task_id)
    if tid is None:
        return _invalid_id()
    task = await svc.get_task(tid)
    if not task:
        return _fail(404, TaskNotFound(tid))
    return task


@router.put("/{task_id}", response_model=Task)
async def update_task(task_id: str, request: Request, svc: TaskService = Depends(get_service)):
    tid = _parse_id(task_id)
    if tid is None:
        return _invalid_id()
    return await svc.update_task(tid, await _json_body(request))


@router.delete("/{task_id}")
async def delete_task(task_id: str, svc: TaskService = Depends(get_service)):
    tid = _parse_id(task_id)
    if tid is None:
        return _invalid_id()
    await svc.delete_task(tid)
    return {"message": "Task deleted"}
