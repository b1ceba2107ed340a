"""
Pydantic schemas for the task tracker API.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ═══════════════════════════════════════════════════════════════════════════════
# Identity — attached to the request by the auth gate
# ═══════════════════════════════════════════════════════════════════════════════


class Identity(BaseModel):
    """Claims carried by a verified bearer token. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str


# ═══════════════════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════════════════


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str
    password: str
    address: Optional[str] = None


class UpdateProfileRequest(BaseModel):
    """Partial update; fields left out stay untouched."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    address: Optional[str] = None
    password: Optional[str] = None


class ActivateRequest(BaseModel):
    email: str
    code: int


class LoginRequest(BaseModel):
    email: str
    password: str


class CreateTaskRequest(BaseModel):
    # Presence is checked by the task service so a missing field is a
    # ValidationError rather than a schema error.
    title: Optional[str] = None
    description: Optional[str] = None


# ═══════════════════════════════════════════════════════════════════════════════
# Responses
# ═══════════════════════════════════════════════════════════════════════════════


class UserOut(BaseModel):
    """Public view of a user; the password hash and activation code never leave the server."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    first_name: str = Field(serialization_alias="firstName")
    last_name: str = Field(serialization_alias="lastName")
    email: str
    address: Optional[str] = None
    image: Optional[str] = None
    is_verified: bool = Field(False, serialization_alias="isVerified")
    created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(None, serialization_alias="updatedAt")


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    title: str
    description: str
    creator_email: str
    created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(None, serialization_alias="updatedAt")


class TaskList(BaseModel):
    count: int
    my_tasks: List[TaskOut] = Field(serialization_alias="myTasks")
