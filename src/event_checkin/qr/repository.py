from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..common.pagination import Page, PageRequest
from ..core.enums import ScanResult, ScanType
from .model import QRScan


class ScanRepository(Protocol):
    def create_scan(
        self,
        *,
        user_id: int,
        scanned_by: int,
        qr_data: str,
        scan_type: ScanType,
        scan_result: ScanResult,
        created_at: datetime,
        notes: Optional[str] = None,
        scan_location: Optional[str] = None,
    ) -> QRScan:
        raise NotImplementedError

    def list_scans(
        self,
        *,
        page: PageRequest,
        user_id: Optional[int] = None,
        scan_type: Optional[ScanType] = None,
    ) -> Page[QRScan]:
        """Newest first."""
        raise NotImplementedError

    def count(
        self,
        *,
        scan_result: Optional[ScanResult] = None,
        scan_type: Optional[ScanType] = None,
        since: Optional[datetime] = None,
    ) -> int:
        raise NotImplementedError

    def delete_for_user(self, user_id: int) -> int:
        """Remove every scan where the user is the scanned subject."""
        raise NotImplementedError
