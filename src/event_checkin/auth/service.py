from __future__ import annotations

import logging
from datetime import datetime
from typing import Tuple

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError
from ..users.model import User
from ..users.repository import UserRepository
from .tokens import TokenService

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: register, log in, resolve bearer tokens to users."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def register(self, *, name: str, email: str, phone: str, password: str, now: datetime | None = None) -> Tuple[str, User]:
        name = require_non_empty(name, "Name")
        email = require_email(email)
        phone = require_non_empty(phone, "Phone")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ConflictError("User with this email already exists")

        user_id = self._users.create_user(
            name=name,
            email=email,
            phone=phone,
            password_hash=generate_password_hash(password),
            role=Role.USER,
            is_approved=False,
            registration_date=now or now_local(),
        )
        user = self._users.get_by_id(user_id)
        logger.info("Registered user %s <%s>", user_id, email)
        return self._tokens.issue(user), user

    def login(self, *, email: str, password: str) -> Tuple[str, User]:
        email = optional_text(email, "Email")
        user = self._users.get_by_email(email.lower()) if email else None
        if not user or not isinstance(password, str):
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password)
        except (TypeError, ValueError):
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")
        return self._tokens.issue(user), user

    def resolve(self, token: str) -> User:
        user = self._users.get_by_id(self._tokens.user_id_from(token))
        if not user:
            raise AuthenticationError("User no longer exists")
        return user
