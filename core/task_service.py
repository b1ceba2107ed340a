"""
Task store. Every lookup is filtered by task id AND the caller's email, so
a task owned by someone else is indistinguishable from a missing one.
"""

from __future__ import annotations

import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import NotFound, ValidationError
from database.models import Task
from database.store import Collection
from utils.schemas import Identity

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, session: AsyncSession) -> None:
        self._tasks = Collection(session, Task)

    async def create(
        self, identity: Identity, title: Optional[str], description: Optional[str],
    ) -> Task:
        for name, value in (("title", title), ("description", description)):
            if not value:
                raise ValidationError(f"Task validation failed: {name} is required")

        task = await self._tasks.insert(
            title=title,
            description=description,
            creator_email=identity.email,
        )
        logger.info("Created task %s", task.id)
        return task

    async def get_one(self, identity: Identity, task_id: str) -> Task:
        task = await self._tasks.find_one(
            id=_parse_task_id(task_id), creator_email=identity.email,
        )
        if task is None:
            raise NotFound("Task not found")
        return task

    async def list_all(self, identity: Identity) -> Tuple[int, List[Task]]:
        tasks = await self._tasks.find(creator_email=identity.email)
        return len(tasks), tasks

    async def delete(self, identity: Identity, task_id: str) -> None:
        task = await self._tasks.find_one_and_delete(
            id=_parse_task_id(task_id), creator_email=identity.email,
        )
        if task is None:
            raise NotFound("Task not found or unauthorized")
        logger.info("Deleted task %s", task.id)


def _parse_task_id(value: str) -> uuid.UUID:
    # A malformed id can never match, so it is reported the same way.
    try:
        return uuid.UUID(value)
    except (AttributeError, TypeError, ValueError) as exc:
        raise NotFound("Task not found") from exc
