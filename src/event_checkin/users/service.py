from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional

from ..common.datetime_utils import now_local
from ..common.pagination import Page, PageRequest
from ..core.constants import RECENT_REGISTRATION_DAYS
from ..core.enums import ApprovalFilter, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..qr.repository import ScanRepository
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserOverview:
    total_users: int
    approved_users: int
    pending_users: int
    total_scans: int
    recent_registrations: int

    @property
    def approval_rate(self) -> float:
        if self.total_users == 0:
            return 0
        return round(self.approved_users / self.total_users * 100, 1)


def parse_approval_filter(value: Optional[str]) -> ApprovalFilter:
    try:
        return ApprovalFilter(value or ApprovalFilter.ALL.value)
    except ValueError:
        raise ValidationError("Invalid status filter")


class UserService:
    """Use case: manage registrants (admin) and own profile (user)."""

    def __init__(self, users: UserRepository, scans: ScanRepository):
        self._users = users
        self._scans = scans

    @staticmethod
    def _require_self_or_admin(current: User, user_id: int) -> None:
        if current.role != Role.ADMIN and current.user_id != int(user_id):
            raise AuthorizationError("Access denied")

    def list_users(self, *, search: str = "", approval: ApprovalFilter = ApprovalFilter.ALL, page: PageRequest) -> Page[User]:
        return self._users.search(search=(search or "").strip(), approval=approval, page=page)

    def approvers_for(self, users) -> Dict[int, User]:
        return self._users.get_by_ids(u.approved_by for u in users if u.approved_by is not None)

    def get_user(self, *, current: User, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        self._require_self_or_admin(current, user_id)
        return user

    def update_profile(self, *, current: User, user_id: int, name: Optional[str] = None, phone: Optional[str] = None) -> User:
        self._require_self_or_admin(current, user_id)

        name = name.strip() if isinstance(name, str) and name.strip() else None
        phone = phone.strip() if isinstance(phone, str) and phone.strip() else None

        if not self._users.update_profile(user_id, name=name, phone=phone):
            raise NotFoundError("User not found")

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def delete_user(self, *, current: User, user_id: int) -> None:
        if current.role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        removed_scans = self._scans.delete_for_user(user_id)
        if not self._users.delete_by_id(user_id):
            raise NotFoundError("User not found")
        logger.info("User %s deleted by admin %s (%s scan records removed)", user_id, current.user_id, removed_scans)

    def overview(self, *, now: datetime | None = None) -> UserOverview:
        now = now or now_local()
        return UserOverview(
            total_users=self._users.count(),
            approved_users=self._users.count(is_approved=True),
            pending_users=self._users.count(is_approved=False),
            total_scans=self._scans.count(),
            recent_registrations=self._users.count(created_since=now - timedelta(days=RECENT_REGISTRATION_DAYS)),
        )
