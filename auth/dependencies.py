"""
FastAPI dependencies for authentication.

``get_identity`` is the gate in front of every protected route: it reads
the ``Authorization: Bearer <token>`` header, verifies the token and hands
the caller's ``Identity`` to the route handler. No database lookup happens
here, so a token stays valid until it expires even if its user is gone.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Header, Request

from auth.jwt import TokenService
from core.errors import InvalidToken
from utils.schemas import Identity

logger = logging.getLogger(__name__)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def get_identity(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization"),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    parts = authorization.split() if authorization else []
    if len(parts) < 2:
        raise InvalidToken("No token provided")

    scheme, token = parts[0], parts[1]
    if scheme.lower() != "bearer":
        raise InvalidToken()

    try:
        claims = tokens.verify(token)
        identity = Identity(id=claims["id"], email=claims["email"])
    except Exception as exc:
        logger.debug("Rejected bearer token on %s: %r", request.url.path, exc)
        raise InvalidToken() from exc

    request.state.identity = identity
    return identity
