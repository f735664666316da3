from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.pagination import Page, PageRequest
from ..common.validators import optional_text
from ..core.constants import DEFAULT_EVENT_ID, QR_MISMATCH_NOTE, RECENT_SCAN_HOURS
from ..core.enums import ScanResult, ScanType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .generator import QRCodeGenerator
from .model import QRIssue, QRScan, ScanOutcome, ScanStats, ScanView
from .payload import build_payload, parse_user_id
from .repository import ScanRepository

logger = logging.getLogger(__name__)


def parse_scan_type(value: Optional[str]) -> ScanType:
    if value is None or value == "":
        return ScanType.APPROVAL
    try:
        return ScanType(value)
    except ValueError:
        raise ValidationError("Invalid scan type")


class QRService:
    """Use cases: issue QR codes, verify scans, report on the audit trail."""

    def __init__(
        self,
        users: UserRepository,
        scans: ScanRepository,
        generator: QRCodeGenerator,
        *,
        default_event_id: str = DEFAULT_EVENT_ID,
    ):
        self._users = users
        self._scans = scans
        self._generator = generator
        self._default_event_id = default_event_id

    # -------- Generation --------
    def generate_for_user(
        self,
        *,
        admin: User,
        user_id: int,
        event_id: Optional[str] = None,
        now: datetime | None = None,
    ) -> QRIssue:
        if not admin.is_admin:
            raise AuthorizationError("Admin access required")

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return self._issue(user=user, generated_by=admin.user_id, event_id=event_id, now=now)

    def generate_own(self, *, current_user: User, event_id: Optional[str] = None, now: datetime | None = None) -> QRIssue:
        return self._issue(user=current_user, generated_by=current_user.user_id, event_id=event_id, now=now)

    def _issue(self, *, user: User, generated_by: int, event_id: Optional[str], now: datetime | None) -> QRIssue:
        now = now or now_local()
        event_id = optional_text(event_id, "eventId") or self._default_event_id

        qr_data = build_payload(user=user, event_id=event_id, generated_by=generated_by, generated_at=now)
        qr_code = self._generator.to_data_url(qr_data)

        if not self._users.set_qr(user.user_id, qr_code=qr_code, qr_code_data=qr_data, event_id=event_id):
            raise NotFoundError("User not found")

        logger.info("QR code generated for user %s (event=%s, by=%s)", user.user_id, event_id, generated_by)
        refreshed = self._users.get_by_id(user.user_id) or user
        return QRIssue(qr_code=qr_code, qr_data=qr_data, user=refreshed)

    def get_my_qr(self, *, current_user: User) -> User:
        user = self._users.get_by_id(current_user.user_id)
        if not user or not user.qr_code:
            raise NotFoundError("QR code not generated yet")
        return user

    # -------- Scanning --------
    def scan(
        self,
        *,
        admin: User,
        qr_data: str,
        scan_type: ScanType = ScanType.APPROVAL,
        notes: str = "",
        scan_location: Optional[str] = None,
        now: datetime | None = None,
    ) -> ScanOutcome:
        """Verify a scanned payload and record the attempt.

        Malformed payloads and unknown users are rejected without an audit record.
        A payload that no longer matches the user's stored one is recorded as
        ``failed`` and then rejected.
        """
        if not admin.is_admin:
            raise AuthorizationError("Admin access required")
        if not qr_data or not str(qr_data).strip():
            raise ValidationError("QR data is required")

        now = now or now_local()
        user_id = parse_user_id(qr_data)

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        if user.qr_code_data != qr_data:
            self._scans.create_scan(
                user_id=user.user_id,
                scanned_by=admin.user_id,
                qr_data=qr_data,
                scan_type=scan_type,
                scan_result=ScanResult.FAILED,
                created_at=now,
                notes=QR_MISMATCH_NOTE,
                scan_location=scan_location,
            )
            logger.warning("QR mismatch for user %s scanned by admin %s", user.user_id, admin.user_id)
            raise ValidationError("Invalid or expired QR code")

        result = ScanResult.SUCCESS
        message = "QR code scanned successfully"

        if scan_type == ScanType.APPROVAL:
            if user.is_approved:
                result = ScanResult.DUPLICATE
                message = "User is already approved"
            else:
                self._users.mark_approved(user.user_id, approved_by=admin.user_id, approved_at=now)
                user = self._users.get_by_id(user.user_id) or user
                message = "User approved successfully"

        scan = self._scans.create_scan(
            user_id=user.user_id,
            scanned_by=admin.user_id,
            qr_data=qr_data,
            scan_type=scan_type,
            scan_result=result,
            created_at=now,
            notes=notes or None,
            scan_location=scan_location,
        )
        logger.info(
            "QR scan %s: user=%s type=%s result=%s by=%s",
            scan.scan_id, user.user_id, scan_type.value, result.value, admin.user_id,
        )
        return ScanOutcome(message=message, result=result, user=user, scan=ScanView(scan=scan, user=user, scanner=admin))

    # -------- Audit trail --------
    def list_scans(
        self,
        *,
        page: PageRequest,
        user_id: Optional[int] = None,
        scan_type: Optional[ScanType] = None,
    ) -> Page[ScanView]:
        found = self._scans.list_scans(page=page, user_id=user_id, scan_type=scan_type)
        return Page(items=self._populate(found.items), total=found.total, request=found.request)

    def _populate(self, scans: list[QRScan]) -> list[ScanView]:
        ids = {s.user_id for s in scans} | {s.scanned_by for s in scans if s.scanned_by is not None}
        people = self._users.get_by_ids(ids)
        return [
            ScanView(scan=s, user=people.get(s.user_id), scanner=people.get(s.scanned_by))
            for s in scans
        ]

    def stats(self, *, now: datetime | None = None) -> ScanStats:
        now = now or now_local()
        count = self._scans.count
        return ScanStats(
            total=count(),
            successful=count(scan_result=ScanResult.SUCCESS),
            failed=count(scan_result=ScanResult.FAILED),
            duplicate=count(scan_result=ScanResult.DUPLICATE),
            approval=count(scan_type=ScanType.APPROVAL),
            entry=count(scan_type=ScanType.ENTRY),
            verification=count(scan_type=ScanType.VERIFICATION),
            recent=count(since=now - timedelta(hours=RECENT_SCAN_HOURS)),
        )
