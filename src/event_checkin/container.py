from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .auth.guards import Guards
from .auth.service import AuthService
from .auth.tokens import TokenService
from .core.constants import DEFAULT_EVENT_ID, DEFAULT_TOKEN_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .qr.generator import QRCodeGenerator
from .qr.mysql_scan_repository import MySQLScanRepository
from .qr.repository import ScanRepository
from .qr.service import QRService
from .setup.service import AdminDefaults, AdminSetupService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    scans_repo: ScanRepository

    tokens: TokenService
    auth_service: AuthService
    user_service: UserService
    qr_service: QRService
    setup_service: AdminSetupService
    guards: Guards


def assemble_container(
    *,
    users_repo: UserRepository,
    scans_repo: ScanRepository,
    config: Mapping,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of the given repositories."""
    tokens = TokenService(
        str(config["SECRET_KEY"]),
        expires_hours=int(config.get("JWT_EXPIRES_HOURS", DEFAULT_TOKEN_HOURS)),
    )
    generator = QRCodeGenerator(
        size=int(config.get("QR_IMAGE_SIZE", 256)),
        border=int(config.get("QR_BORDER", 1)),
    )

    auth_service = AuthService(users_repo, tokens)
    user_service = UserService(users_repo, scans_repo)
    qr_service = QRService(
        users_repo,
        scans_repo,
        generator,
        default_event_id=config.get("DEFAULT_EVENT_ID", DEFAULT_EVENT_ID),
    )
    setup_service = AdminSetupService(users_repo, AdminDefaults.from_config(config))

    return Container(
        conn=conn,
        users_repo=users_repo,
        scans_repo=scans_repo,
        tokens=tokens,
        auth_service=auth_service,
        user_service=user_service,
        qr_service=qr_service,
        setup_service=setup_service,
        guards=Guards(auth_service),
    )


def build_container(*, db_config: dict, config: Mapping) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble_container(
        users_repo=MySQLUserRepository(conn),
        scans_repo=MySQLScanRepository(conn),
        config=config,
        conn=conn,
    )
