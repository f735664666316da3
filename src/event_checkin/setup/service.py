from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role, SetupOutcome
from ..core.exceptions import ConflictError
from ..users.model import User
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminDefaults:
    name: str
    email: str
    phone: str
    password: str

    @classmethod
    def from_config(cls, config) -> "AdminDefaults":
        return cls(
            name=config.get("ADMIN_NAME", "Admin User"),
            email=config.get("ADMIN_EMAIL", "admin@example.com"),
            phone=config.get("ADMIN_PHONE", "1234567890"),
            password=config.get("ADMIN_PASSWORD", "admin123"),
        )


@dataclass(frozen=True)
class AdminStatus:
    admin_count: int
    total_users: int
    admin_user: Optional[User]

    @property
    def has_admin(self) -> bool:
        return self.admin_count > 0

    @property
    def needs_setup(self) -> bool:
        return self.admin_count == 0


class AdminSetupService:
    """Use case: bootstrap the first administrator account.

    Transitions, keyed by the configured admin email:
    - no such user            -> create an approved admin (CREATED)
    - user exists, not admin  -> promote and approve (PROMOTED)
    - user exists, is admin   -> nothing to do (EXISTS)
    """

    def __init__(self, users: UserRepository, defaults: AdminDefaults):
        self._users = users
        self._defaults = defaults

    def create_admin(self, *, now: datetime | None = None) -> tuple[SetupOutcome, User]:
        now = now or now_local()
        email = require_email(self._defaults.email, "ADMIN_EMAIL")

        existing = self._users.get_by_email(email)
        if existing:
            if existing.role != Role.ADMIN:
                self._users.promote_to_admin(existing.user_id, approved_at=now)
                logger.info("Existing user %s promoted to admin", existing.user_id)
                return SetupOutcome.PROMOTED, self._users.get_by_id(existing.user_id) or existing
            return SetupOutcome.EXISTS, existing

        name = require_non_empty(self._defaults.name, "ADMIN_NAME")
        phone = require_non_empty(self._defaults.phone, "ADMIN_PHONE")
        require_min_length(self._defaults.password, "ADMIN_PASSWORD", MIN_PASSWORD_LENGTH)

        try:
            user_id = self._users.create_user(
                name=name,
                email=email,
                phone=phone,
                password_hash=generate_password_hash(self._defaults.password),
                role=Role.ADMIN,
                is_approved=True,
                registration_date=now,
                approved_date=now,
            )
        except Exception as e:
            # Another request created the same email between lookup and insert.
            if self._users.get_by_email(email):
                raise ConflictError("Admin with this email already exists") from e
            raise

        logger.info("Admin user %s created <%s>", user_id, email)
        return SetupOutcome.CREATED, self._users.get_by_id(user_id)

    def status(self) -> AdminStatus:
        return AdminStatus(
            admin_count=self._users.count(role=Role.ADMIN),
            total_users=self._users.count(),
            admin_user=self._users.first_admin(),
        )

    def list_users(self) -> Sequence[User]:
        return self._users.list_all()
