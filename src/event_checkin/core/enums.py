from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    USER = "user"
    ADMIN = "admin"


class ScanType(str, Enum):
    """Why an admin scanned a QR code."""

    APPROVAL = "approval"
    ENTRY = "entry"
    VERIFICATION = "verification"


class ScanResult(str, Enum):
    """Outcome of a QR verification attempt."""

    SUCCESS = "success"
    FAILED = "failed"
    DUPLICATE = "duplicate"


class ApprovalFilter(str, Enum):
    ALL = "all"
    APPROVED = "approved"
    PENDING = "pending"


class SetupOutcome(str, Enum):
    """Transition taken by the admin bootstrap."""

    CREATED = "created"
    PROMOTED = "promoted"
    EXISTS = "exists"
