from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Dict, Iterable, Optional

import pytest
from werkzeug.security import generate_password_hash

from event_checkin import create_app
from event_checkin.common.pagination import Page, PageRequest
from event_checkin.container import assemble_container
from event_checkin.core.enums import ApprovalFilter, Role
from event_checkin.qr.model import QRScan
from event_checkin.users.model import User

TEST_CONFIG = {
    "SECRET_KEY": "test-secret",
    "TESTING": True,
    "JWT_EXPIRES_HOURS": 1,
    "DEFAULT_EVENT_ID": "default-event",
    "ADMIN_NAME": "Admin User",
    "ADMIN_EMAIL": "admin@example.com",
    "ADMIN_PHONE": "1234567890",
    "ADMIN_PASSWORD": "admin123",
    "QR_IMAGE_SIZE": 256,
    "QR_BORDER": 1,
    "LOG_LEVEL": "WARNING",
}


class InMemoryUsers:
    def __init__(self):
        self.by_id: Dict[int, User] = {}
        self._id = 0

    def add(self, **fields) -> User:
        self._id += 1
        fields.setdefault("password_hash", generate_password_hash("secret1"))
        fields.setdefault("registration_date", datetime(2026, 2, 1, 9, 0))
        fields.setdefault("created_at", fields["registration_date"])
        user = User(user_id=self._id, **fields)
        self.by_id[user.user_id] = user
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.by_id.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.by_id.values() if u.email == email.lower()), None)

    def get_by_ids(self, user_ids: Iterable[int]) -> Dict[int, User]:
        return {i: self.by_id[i] for i in user_ids if i in self.by_id}

    def create_user(self, *, name, email, phone, password_hash, role, is_approved, registration_date, approved_date=None) -> int:
        return self.add(
            name=name,
            email=email.lower(),
            phone=phone,
            password_hash=password_hash,
            role=role,
            is_approved=is_approved,
            registration_date=registration_date,
            approved_date=approved_date,
        ).user_id

    def _update(self, user_id: int, **changes) -> bool:
        user = self.by_id.get(int(user_id))
        if not user:
            return False
        self.by_id[user.user_id] = replace(user, **changes)
        return True

    def update_profile(self, user_id: int, *, name=None, phone=None) -> bool:
        changes = {k: v for k, v in {"name": name, "phone": phone}.items() if v is not None}
        return self._update(user_id, **changes)

    def mark_approved(self, user_id: int, *, approved_by, approved_at) -> bool:
        return self._update(user_id, is_approved=True, approved_by=approved_by, approved_date=approved_at)

    def promote_to_admin(self, user_id: int, *, approved_at) -> bool:
        return self._update(user_id, role=Role.ADMIN, is_approved=True, approved_date=approved_at)

    def set_qr(self, user_id: int, *, qr_code, qr_code_data, event_id) -> bool:
        return self._update(user_id, qr_code=qr_code, qr_code_data=qr_code_data, event_id=event_id)

    def delete_by_id(self, user_id: int) -> bool:
        return self.by_id.pop(int(user_id), None) is not None

    def search(self, *, search: str, approval: ApprovalFilter, page: PageRequest) -> Page[User]:
        needle = search.lower()
        items = [
            u for u in self.by_id.values()
            if (not needle or needle in u.name.lower() or needle in u.email.lower() or needle in u.phone.lower())
            and (approval == ApprovalFilter.ALL or u.is_approved == (approval == ApprovalFilter.APPROVED))
        ]
        items.sort(key=lambda u: (u.created_at, u.user_id), reverse=True)
        return Page(items=items[page.offset:page.offset + page.limit], total=len(items), request=page)

    def count(self, *, role=None, is_approved=None, created_since=None) -> int:
        return sum(
            1 for u in self.by_id.values()
            if (role is None or u.role == role)
            and (is_approved is None or u.is_approved == is_approved)
            and (created_since is None or u.created_at >= created_since)
        )

    def first_admin(self) -> Optional[User]:
        return next((u for u in sorted(self.by_id.values(), key=lambda u: u.user_id) if u.is_admin), None)

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda u: u.user_id, reverse=True)


class InMemoryScans:
    def __init__(self):
        self.scans: list[QRScan] = []

    def create_scan(self, *, user_id, scanned_by, qr_data, scan_type, scan_result, created_at, notes=None, scan_location=None) -> QRScan:
        scan = QRScan(
            scan_id=len(self.scans) + 1,
            user_id=user_id,
            scanned_by=scanned_by,
            qr_data=qr_data,
            scan_type=scan_type,
            scan_result=scan_result,
            created_at=created_at,
            notes=notes,
            scan_location=scan_location,
        )
        self.scans.append(scan)
        return scan

    def list_scans(self, *, page: PageRequest, user_id=None, scan_type=None) -> Page[QRScan]:
        items = [
            s for s in self.scans
            if (user_id is None or s.user_id == user_id) and (scan_type is None or s.scan_type == scan_type)
        ]
        items.sort(key=lambda s: (s.created_at, s.scan_id), reverse=True)
        return Page(items=items[page.offset:page.offset + page.limit], total=len(items), request=page)

    def count(self, *, scan_result=None, scan_type=None, since=None) -> int:
        return sum(
            1 for s in self.scans
            if (scan_result is None or s.scan_result == scan_result)
            and (scan_type is None or s.scan_type == scan_type)
            and (since is None or s.created_at >= since)
        )

    def delete_for_user(self, user_id: int) -> int:
        before = len(self.scans)
        self.scans = [s for s in self.scans if s.user_id != user_id]
        return before - len(self.scans)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 10, 0, 0)


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture
def scans_repo() -> InMemoryScans:
    return InMemoryScans()


@pytest.fixture
def container(users_repo, scans_repo):
    return assemble_container(users_repo=users_repo, scans_repo=scans_repo, config=TEST_CONFIG)


@pytest.fixture
def admin(users_repo) -> User:
    return users_repo.add(
        name="Admin User",
        email="admin@example.com",
        phone="1234567890",
        password_hash=generate_password_hash("admin123"),
        role=Role.ADMIN,
        is_approved=True,
    )


@pytest.fixture
def attendee(users_repo) -> User:
    return users_repo.add(name="Jane Doe", email="jane@example.com", phone="5550001")


@pytest.fixture
def app(container):
    return create_app(TEST_CONFIG, container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_header(container):
    def _header(user: User) -> dict:
        return {"Authorization": f"Bearer {container.tokens.issue(user)}"}

    return _header
