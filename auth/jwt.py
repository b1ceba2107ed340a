"""
JWT-style token issuance and verification.

Tokens are base64-encoded JSON payloads followed by an HMAC-SHA256
signature over the encoded payload.
The secret key is loaded from ``config.jwt_secret`` (env var: ``JWT_SECRET``);
the service refuses to start without one.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from base64 import b64decode, b64encode
from typing import Any, Callable, Dict

from core.errors import InvalidToken

DEFAULT_EXPIRY_SECONDS = 86400


class MissingSigningKey(RuntimeError):
    """Raised at startup when no signing secret is configured."""


class TokenService:
    """Issues and verifies stateless, time-limited bearer tokens."""

    def __init__(
        self,
        secret: str,
        expiry_seconds: int = DEFAULT_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise MissingSigningKey("JWT_SECRET is not set; refusing to issue unsigned tokens")
        self._secret = secret.encode()
        self._expiry_seconds = expiry_seconds
        self._clock = clock

    def _sign(self, body: str) -> str:
        return hmac.new(self._secret, body.encode(), hashlib.sha256).hexdigest()

    def issue(self, claims: Dict[str, Any]) -> str:
        """Create a signed token carrying ``claims`` plus ``iat`` and ``exp``."""
        now = int(self._clock())
        payload = dict(claims, iat=now, exp=now + self._expiry_seconds)
        body = b64encode(json.dumps(payload).encode()).decode()
        return body + "." + self._sign(body)

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Verify ``token`` and return its payload.

        Raises ``InvalidToken`` on malformed, tampered or expired tokens.
        """
        try:
            parts = token.split(".", 1)
            if len(parts) != 2:
                raise ValueError("bad format")
            if not hmac.compare_digest(parts[1], self._sign(parts[0])):
                raise ValueError("bad signature")
            payload = json.loads(b64decode(parts[0], validate=True))
            if not isinstance(payload, dict):
                raise ValueError("bad payload")
            if payload.get("exp", 0) < self._clock():
                raise ValueError("token expired")
            return payload
        except Exception as exc:
            raise InvalidToken() from exc
