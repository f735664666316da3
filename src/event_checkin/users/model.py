from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a registrant or an administrator.

    Plain data object, no database access.
    """

    user_id: int
    name: str
    email: str
    phone: str
    password_hash: str
    role: Role = Role.USER
    is_approved: bool = False
    registration_date: Optional[datetime] = None
    approved_date: Optional[datetime] = None
    approved_by: Optional[int] = None
    qr_code: Optional[str] = None
    qr_code_data: Optional[str] = None
    event_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
