from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from ..common.pagination import Page, PageRequest
from ..core.enums import ScanResult, ScanType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, where_clause
from .model import QRScan
from .repository import ScanRepository


def _to_scan(row: Dict[str, Any]) -> QRScan:
    return QRScan(
        scan_id=int(row["scan_id"]),
        user_id=int(row["user_id"]),
        scanned_by=row.get("scanned_by"),
        qr_data=row["qr_data"],
        scan_type=ScanType(row["scan_type"]),
        scan_result=ScanResult(row["scan_result"]),
        created_at=row["created_at"],
        notes=row.get("notes"),
        scan_location=row.get("scan_location"),
    )


class MySQLScanRepository(ScanRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO qr_scans(user_id, scanned_by, qr_data, scan_type, scan_result, scan_location, notes, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    int(scanned_by),
                    qr_data,
                    scan_type.value,
                    scan_result.value,
                    scan_location,
                    notes,
                    created_at,
                ),
            )
            scan_id = int(cur.lastrowid)

        return QRScan(
            scan_id=scan_id,
            user_id=int(user_id),
            scanned_by=int(scanned_by),
            qr_data=qr_data,
            scan_type=scan_type,
            scan_result=scan_result,
            created_at=created_at,
            notes=notes,
            scan_location=scan_location,
        )

    def list_scans(
        self,
        *,
        page: PageRequest,
        user_id: Optional[int] = None,
        scan_type: Optional[ScanType] = None,
    ) -> Page[QRScan]:
        conditions: list[str] = []
        params: list = []
        if user_id is not None:
            conditions.append("user_id=%s")
            params.append(int(user_id))
        if scan_type is not None:
            conditions.append("scan_type=%s")
            params.append(scan_type.value)
        where = where_clause(conditions)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM qr_scans {where}", tuple(params))
            total = fetch_count(cur)
            cur.execute(
                f"""
                SELECT scan_id, user_id, scanned_by, qr_data, scan_type, scan_result, scan_location, notes, created_at
                FROM qr_scans {where}
                ORDER BY created_at DESC, scan_id DESC
                LIMIT %s OFFSET %s
                """,
                (*params, page.limit, page.offset),
            )
            return Page(items=[_to_scan(r) for r in fetchall(cur)], total=total, request=page)

    def count(
        self,
        *,
        scan_result: Optional[ScanResult] = None,
        scan_type: Optional[ScanType] = None,
        since: Optional[datetime] = None,
    ) -> int:
        conditions: list[str] = []
        params: list = []
        if scan_result is not None:
            conditions.append("scan_result=%s")
            params.append(scan_result.value)
        if scan_type is not None:
            conditions.append("scan_type=%s")
            params.append(scan_type.value)
        if since is not None:
            conditions.append("created_at>=%s")
            params.append(since)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM qr_scans {where_clause(conditions)}", tuple(params))
            return fetch_count(cur)

    def delete_for_user(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM qr_scans WHERE user_id=%s", (int(user_id),))
            return int(cur.rowcount)
