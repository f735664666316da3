from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, Optional, Protocol, Sequence

from ..common.pagination import Page, PageRequest
from ..core.enums import ApprovalFilter, Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for users.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_ids(self, user_ids: Iterable[int]) -> Dict[int, User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        name: str,
        email: str,
        phone: str,
        password_hash: str,
        role: Role,
        is_approved: bool,
        registration_date: datetime,
        approved_date: Optional[datetime] = None,
    ) -> int:
        raise NotImplementedError

    def update_profile(self, user_id: int, *, name: Optional[str] = None, phone: Optional[str] = None) -> bool:
        raise NotImplementedError

    def mark_approved(self, user_id: int, *, approved_by: Optional[int], approved_at: datetime) -> bool:
        raise NotImplementedError

    def promote_to_admin(self, user_id: int, *, approved_at: datetime) -> bool:
        raise NotImplementedError

    def set_qr(self, user_id: int, *, qr_code: str, qr_code_data: str, event_id: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def search(self, *, search: str, approval: ApprovalFilter, page: PageRequest) -> Page[User]:
        """Newest first; search matches name, email or phone case-insensitively."""
        raise NotImplementedError

    def count(
        self,
        *,
        role: Optional[Role] = None,
        is_approved: Optional[bool] = None,
        created_since: Optional[datetime] = None,
    ) -> int:
        raise NotImplementedError

    def first_admin(self) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError
