"""
User routes — register, activate, login and profile.

Register and update-profile take either a JSON body or a form body; the
form variant may carry the profile image under ``file``.

Route prefix: /user
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

from fastapi import APIRouter, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError
from starlette.datastructures import UploadFile

from api.dependencies import get_user_service
from auth.dependencies import get_identity
from core.errors import ValidationError
from core.user_service import UserService
from database.models import User
from utils.schemas import (
    ActivateRequest,
    Identity,
    LoginRequest,
    RegisterRequest,
    UpdateProfileRequest,
    UserOut,
)
from utils.uploads import save_upload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["user"])

BodyT = TypeVar("BodyT", bound=BaseModel)

FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def serialize_user(user: User) -> Dict[str, Any]:
    return UserOut.model_validate(user).model_dump(mode="json", by_alias=True)


async def read_body(request: Request, model: Type[BodyT]) -> Tuple[BodyT, Optional[UploadFile]]:
    """Parse a JSON or form body into ``model``; return it with the uploaded ``file``, if any."""
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    upload = None

    if content_type == "application/json":
        try:
            data = await request.json()
        except ValueError as exc:
            raise ValidationError("Malformed JSON body") from exc
        if not isinstance(data, dict):
            raise ValidationError("JSON body must be an object")
    elif content_type in FORM_TYPES:
        form = await request.form()
        data = {}
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if key == "file":
                    upload = value
            else:
                data[key] = value
    elif await request.body():
        raise ValidationError(f"Unsupported content type: {content_type or 'none'}")
    else:
        data = {}

    try:
        return model.model_validate(data), upload
    except SchemaError as exc:
        raise RequestValidationError(exc.errors()) from exc


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Register a new, unverified user. The activation code is returned in the body."""
    req, file = await read_body(request, RegisterRequest)
    image = await save_upload(file)
    code = await users.register(
        email=req.email,
        password=req.password,
        first_name=req.first_name,
        last_name=req.last_name,
        address=req.address,
        image=image,
    )
    return {"status": "Success", "message": "User Registered", "code": code}


@router.post("/activate-user")
async def activate_user(
    req: ActivateRequest,
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    await users.activate(req.email, req.code)
    return {"status": "Success", "message": "Account activated"}


@router.post("/login")
async def login(
    req: LoginRequest,
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Login with email + password."""
    user, token = await users.authenticate(req.email, req.password)
    return {
        "status": "Success",
        "message": "Successfully logged in",
        "data": {"user": serialize_user(user), "token": token},
    }


@router.patch("/update-profile")
async def update_profile(
    request: Request,
    identity: Identity = Depends(get_identity),
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Update the caller's own profile; only the fields sent are changed."""
    req, file = await read_body(request, UpdateProfileRequest)
    image = await save_upload(file)
    user = await users.update_profile(
        identity,
        {"first_name": req.first_name, "last_name": req.last_name, "address": req.address},
        new_password=req.password,
        image=image,
    )
    return {
        "status": "Success",
        "message": "Profile update successful",
        "data": serialize_user(user),
    }


@router.get("/my-profile")
async def my_profile(
    identity: Identity = Depends(get_identity),
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    user = await users.get_profile(identity)
    return {"status": "Success", "message": "Found profile", "data": serialize_user(user)}
