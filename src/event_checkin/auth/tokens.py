from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import jwt

from ..core.constants import DEFAULT_TOKEN_HOURS
from ..core.exceptions import AuthenticationError
from ..users.model import User

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class TokenService:
    """Issues and verifies HS256 bearer tokens."""

    def __init__(self, secret: str, *, expires_hours: int = DEFAULT_TOKEN_HOURS):
        self._secret = secret
        self._expires = timedelta(hours=int(expires_hours))

    def issue(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user.user_id),
            "role": user.role.value,
            "iat": now,
            "exp": now + self._expires,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def user_id_from(self, token: str) -> int:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except jwt.ExpiredSignatureError:
            logger.info("Expired token rejected")
            raise AuthenticationError("Token expired")
        except jwt.InvalidTokenError:
            logger.info("Invalid token rejected")
            raise AuthenticationError("Invalid token")

        try:
            return int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token")
