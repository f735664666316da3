from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ScanResult, ScanType
from ..users.model import User


@dataclass(frozen=True)
class QRScan:
    """Domain entity: immutable audit record of one QR verification attempt."""

    scan_id: int
    user_id: int
    scanned_by: Optional[int]
    qr_data: str
    scan_type: ScanType
    scan_result: ScanResult
    created_at: datetime
    notes: Optional[str] = None
    scan_location: Optional[str] = None


@dataclass(frozen=True)
class ScanView:
    """Scan joined with the scanned user and the scanning admin."""

    scan: QRScan
    user: Optional[User]
    scanner: Optional[User]


@dataclass(frozen=True)
class ScanOutcome:
    message: str
    result: ScanResult
    user: User
    scan: ScanView


@dataclass(frozen=True)
class QRIssue:
    """A freshly generated QR code for a user."""

    qr_code: str
    qr_data: str
    user: User


@dataclass(frozen=True)
class ScanStats:
    total: int
    successful: int
    failed: int
    duplicate: int
    approval: int
    entry: int
    verification: int
    recent: int

    @property
    def success_rate(self) -> float:
        if self.total == 0:
            return 0
        return round(self.successful / self.total * 100, 1)
