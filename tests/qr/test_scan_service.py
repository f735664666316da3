from __future__ import annotations

import json
from datetime import datetime

import pytest

from event_checkin.core.enums import ScanResult, ScanType
from event_checkin.core.exceptions import AuthorizationError, NotFoundError, ValidationError


@pytest.fixture
def issued(container, admin, attendee, fixed_now):
    return container.qr_service.generate_for_user(admin=admin, user_id=attendee.user_id, now=fixed_now)


def test_mismatched_payload_is_recorded_as_failed_and_does_not_approve(container, users_repo, scans_repo, admin, attendee, issued):
    stale = json.loads(issued.qr_data)
    stale["generatedAt"] = "2020-01-01T00:00:00"

    with pytest.raises(ValidationError, match="Invalid or expired QR code"):
        container.qr_service.scan(admin=admin, qr_data=json.dumps(stale))

    assert [s.scan_result for s in scans_repo.scans] == [ScanResult.FAILED]
    assert scans_repo.scans[0].notes == "QR code mismatch"
    assert users_repo.get_by_id(attendee.user_id).is_approved is False


def test_first_approval_scan_approves_user(container, users_repo, scans_repo, admin, attendee, issued, fixed_now):
    outcome = container.qr_service.scan(admin=admin, qr_data=issued.qr_data, now=fixed_now)

    assert outcome.result == ScanResult.SUCCESS
    assert outcome.message == "User approved successfully"
    user = users_repo.get_by_id(attendee.user_id)
    assert user.is_approved is True
    assert user.approved_by == admin.user_id
    assert user.approved_date == fixed_now
    assert scans_repo.scans[0].scan_result == ScanResult.SUCCESS
    assert scans_repo.scans[0].scanned_by == admin.user_id


def test_second_approval_scan_is_duplicate_and_keeps_approved_date(container, users_repo, scans_repo, admin, attendee, issued, fixed_now):
    container.qr_service.scan(admin=admin, qr_data=issued.qr_data, now=fixed_now)

    later = datetime(2026, 2, 2, 12, 0)
    outcome = container.qr_service.scan(admin=admin, qr_data=issued.qr_data, now=later)

    assert outcome.result == ScanResult.DUPLICATE
    assert outcome.message == "User is already approved"
    assert users_repo.get_by_id(attendee.user_id).approved_date == fixed_now
    assert [s.scan_result for s in scans_repo.scans] == [ScanResult.SUCCESS, ScanResult.DUPLICATE]


@pytest.mark.parametrize("scan_type", [ScanType.ENTRY, ScanType.VERIFICATION])
def test_non_approval_scan_succeeds_without_changing_approval(container, users_repo, scans_repo, admin, attendee, issued, scan_type):
    outcome = container.qr_service.scan(admin=admin, qr_data=issued.qr_data, scan_type=scan_type, notes="gate A")

    assert outcome.result == ScanResult.SUCCESS
    assert users_repo.get_by_id(attendee.user_id).is_approved is False
    assert scans_repo.scans[0].scan_type == scan_type
    assert scans_repo.scans[0].notes == "gate A"


@pytest.mark.parametrize(
    "qr_data, error, message",
    [
        ("not json", ValidationError, "Invalid QR code format"),
        ("[1, 2]", ValidationError, "Invalid QR code format"),
        ('{"email": "x@example.com"}', ValidationError, "missing user ID"),
        ('{"userId": 999}', NotFoundError, "User not found"),
        ('{"userId": "abc"}', NotFoundError, "User not found"),
    ],
)
def test_rejected_payloads_write_no_audit_record(container, scans_repo, admin, qr_data, error, message):
    with pytest.raises(error, match=message):
        container.qr_service.scan(admin=admin, qr_data=qr_data)
    assert scans_repo.scans == []


def test_scan_before_any_qr_generated_is_failed(container, scans_repo, admin, attendee):
    qr_data = json.dumps({"userId": attendee.user_id})

    with pytest.raises(ValidationError):
        container.qr_service.scan(admin=admin, qr_data=qr_data)
    assert scans_repo.scans[0].scan_result == ScanResult.FAILED


def test_regenerating_invalidates_previous_payload(container, admin, attendee, issued):
    container.qr_service.generate_for_user(admin=admin, user_id=attendee.user_id, now=datetime(2026, 2, 3, 8, 0))

    with pytest.raises(ValidationError, match="Invalid or expired"):
        container.qr_service.scan(admin=admin, qr_data=issued.qr_data)


def test_non_admin_cannot_scan(container, attendee, issued):
    with pytest.raises(AuthorizationError):
        container.qr_service.scan(admin=attendee, qr_data=issued.qr_data)
