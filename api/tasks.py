"""
Task routes. Every route requires a bearer token and only ever sees the
caller's own tasks.

Route prefix: /task
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from api.dependencies import get_task_service
from auth.dependencies import get_identity
from core.task_service import TaskService
from database.models import Task
from utils.schemas import CreateTaskRequest, Identity, TaskList, TaskOut

router = APIRouter(tags=["task"])


def serialize_task(task: Task) -> Dict[str, Any]:
    return TaskOut.model_validate(task).model_dump(mode="json", by_alias=True)


@router.post("/create-task", status_code=status.HTTP_201_CREATED)
async def create_task(
    req: CreateTaskRequest,
    identity: Identity = Depends(get_identity),
    tasks: TaskService = Depends(get_task_service),
) -> Dict[str, Any]:
    task = await tasks.create(identity, req.title, req.description)
    return {"status": "Success", "message": "Task created successful", "data": serialize_task(task)}


@router.get("/get-task/{task_id}")
async def get_task(
    task_id: str,
    identity: Identity = Depends(get_identity),
    tasks: TaskService = Depends(get_task_service),
) -> Dict[str, Any]:
    task = await tasks.get_one(identity, task_id)
    return {"status": "Success", "message": "Task found", "data": serialize_task(task)}


@router.get("/get-all-task")
async def get_all_tasks(
    identity: Identity = Depends(get_identity),
    tasks: TaskService = Depends(get_task_service),
) -> Dict[str, Any]:
    count, my_tasks = await tasks.list_all(identity)
    listing = TaskList(count=count, my_tasks=[TaskOut.model_validate(t) for t in my_tasks])
    return {
        "status": "Success",
        "message": "Your Tasks found",
        "data": listing.model_dump(mode="json", by_alias=True),
    }


@router.delete("/delete-task/{task_id}")
async def delete_task(
    task_id: str,
    identity: Identity = Depends(get_identity),
    tasks: TaskService = Depends(get_task_service),
) -> Dict[str, Any]:
    await tasks.delete(identity, task_id)
    return {"status": "Success", "message": "Task deleted"}
