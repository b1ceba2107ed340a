"""
Credential store — registration, activation, login and profile access.

Two policies are kept deliberately:
  • unverified users may log in
  • the activation code stays valid after it has been used
"""

from __future__ import annotations

import logging
import secrets
import uuid
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import TokenService
from auth.password import hash_password, verify_password
from core.errors import ActivationMismatch, DuplicateEmail, InvalidCredentials, NotFound
from database.models import User
from database.store import Collection, DuplicateKeyError
from utils.schemas import Identity

logger = logging.getLogger(__name__)

ACTIVATION_CODE_MIN = 100000
ACTIVATION_CODE_MAX = 999999

# Profile fields an owner may change. Email is excluded: tasks are owned
# by email, so changing it would reassign them.
UPDATABLE_FIELDS = ("first_name", "last_name", "address")


def generate_activation_code() -> int:
    """Uniform draw from [100000, 999999]."""
    return ACTIVATION_CODE_MIN + secrets.randbelow(ACTIVATION_CODE_MAX - ACTIVATION_CODE_MIN + 1)


class UserService:
    def __init__(self, session: AsyncSession, tokens: TokenService) -> None:
        self._users = Collection(session, User)
        self._tokens = tokens

    async def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        address: Optional[str] = None,
        image: Optional[str] = None,
    ) -> int:
        """Create an unverified user and return its activation code."""
        if await self._users.find_one(email=email) is not None:
            raise DuplicateEmail()

        code = generate_activation_code()
        try:
            user = await self._users.insert(
                email=email,
                password_hash=hash_password(password),
                first_name=first_name,
                last_name=last_name,
                address=address,
                image=image,
                activation_code=code,
                is_verified=False,
            )
        except DuplicateKeyError as exc:
            # Lost a race with a concurrent registration for the same email.
            raise DuplicateEmail() from exc

        logger.info("Registered user %s", user.id)
        return code

    async def activate(self, email: str, code: int) -> None:
        user = await self._users.find_one_and_update(
            {"email": email, "activation_code": code},
            {"is_verified": True},
        )
        if user is None:
            raise ActivationMismatch()
        logger.info("Activated user %s", user.id)

    async def authenticate(self, email: str, password: str) -> Tuple[User, str]:
        """Check credentials and return ``(user, token)``."""
        user = await self._users.find_one(email=email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt")
            raise InvalidCredentials()

        token = self._tokens.issue({"id": str(user.id), "email": user.email})
        logger.info("Login: user %s", user.id)
        return user, token

    async def update_profile(
        self,
        identity: Identity,
        fields: Dict[str, Any],
        new_password: Optional[str] = None,
        image: Optional[str] = None,
    ) -> User:
        """Apply the supplied fields to the caller's own record."""
        updates = {
            key: value for key, value in fields.items()
            if key in UPDATABLE_FIELDS and value is not None
        }
        if new_password:
            updates["password_hash"] = hash_password(new_password)
        if image:
            updates["image"] = image

        user_id = _parse_id(identity.id)
        if updates:
            user = await self._users.find_one_and_update({"id": user_id}, updates)
        else:
            user = await self._users.find_one(id=user_id)
        if user is None:
            raise NotFound("User not found")

        logger.info("Updated profile of user %s (%s)", user.id, ", ".join(sorted(updates)) or "no changes")
        return user

    async def get_profile(self, identity: Identity) -> User:
        user = await self._users.find_one(id=_parse_id(identity.id))
        if user is None:
            raise NotFound("User not found")
        return user


def _parse_id(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except (AttributeError, TypeError, ValueError) as exc:
        raise NotFound("User not found") from exc
