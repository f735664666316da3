"""JSON payload carried inside a user's QR code.

The stored payload string is the source of truth: a scan is only accepted
when the submitted text is byte-for-byte equal to it.
"""
from __future__ import annotations

import json
from datetime import datetime
from typing import Optional

from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import User


def build_payload(*, user: User, event_id: str, generated_by: int, generated_at: datetime) -> str:
    return json.dumps(
        {
            "userId": user.user_id,
            "email": user.email,
            "name": user.name,
            "eventId": event_id,
            "generatedAt": generated_at.isoformat(),
            "generatedBy": generated_by,
        }
    )


def parse_user_id(qr_data: str) -> int:
    """Extract the user id from a scanned payload.

    Raises ValidationError for text that is not a JSON object or lacks a user id,
    and NotFoundError for an id that cannot name any user.
    """
    try:
        parsed = json.loads(qr_data)
    except (TypeError, ValueError):
        raise ValidationError("Invalid QR code format")
    if not isinstance(parsed, dict):
        raise ValidationError("Invalid QR code format")

    user_id = parsed.get("userId")
    # 0 and false count as missing, same as an absent key.
    if user_id is None or user_id == "" or user_id == 0:
        raise ValidationError("Invalid QR code: missing user ID")

    coerced = _as_int(user_id)
    if coerced is None:
        raise NotFoundError("User not found")
    return coerced


def _as_int(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None
