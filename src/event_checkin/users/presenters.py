from __future__ import annotations

from typing import Optional

from ..common.datetime_utils import isoformat
from .model import User


def user_summary(user: Optional[User], *, with_phone: bool = False) -> Optional[dict]:
    if user is None:
        return None
    out = {"id": user.user_id, "name": user.name, "email": user.email}
    if with_phone:
        out["phone"] = user.phone
    return out


def user_json(user: User, *, approver: Optional[User] = None) -> dict:
    """Public representation of a user; never includes the password hash."""
    approved_by = user_summary(approver) if approver else user.approved_by
    return {
        "id": user.user_id,
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "role": user.role.value,
        "isApproved": user.is_approved,
        "registrationDate": isoformat(user.registration_date),
        "approvedDate": isoformat(user.approved_date),
        "approvedBy": approved_by,
        "qrCode": user.qr_code,
        "qrCodeData": user.qr_code_data,
        "eventId": user.event_id,
        "createdAt": isoformat(user.created_at),
    }
