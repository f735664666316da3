from __future__ import annotations

from ..common.datetime_utils import isoformat
from ..users.presenters import user_summary
from .model import ScanStats, ScanView


def scan_json(view: ScanView) -> dict:
    scan = view.scan
    return {
        "id": scan.scan_id,
        "userId": user_summary(view.user, with_phone=True) or scan.user_id,
        "scannedBy": user_summary(view.scanner) or scan.scanned_by,
        "qrData": scan.qr_data,
        "scanType": scan.scan_type.value,
        "scanResult": scan.scan_result.value,
        "scanLocation": scan.scan_location,
        "notes": scan.notes,
        "createdAt": isoformat(scan.created_at),
    }


def stats_json(stats: ScanStats) -> dict:
    return {
        "totalScans": stats.total,
        "successfulScans": stats.successful,
        "failedScans": stats.failed,
        "duplicateScans": stats.duplicate,
        "approvalScans": stats.approval,
        "entryScans": stats.entry,
        "verificationScans": stats.verification,
        "recentScans": stats.recent,
        "successRate": stats.success_rate,
    }
