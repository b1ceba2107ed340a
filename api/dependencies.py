"""
FastAPI dependencies (shared across routes).
"""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import get_token_service
from auth.jwt import TokenService
from core.task_service import TaskService
from core.user_service import UserService
from database.session import get_db_session


def get_user_service(
    session: AsyncSession = Depends(get_db_session),
    tokens: TokenService = Depends(get_token_service),
) -> UserService:
    return UserService(session, tokens)


def get_task_service(session: AsyncSession = Depends(get_db_session)) -> TaskService:
    return TaskService(session)
