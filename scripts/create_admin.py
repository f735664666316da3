"""Create (or promote) the configured admin account from the shell.

Reads ADMIN_NAME / ADMIN_EMAIL / ADMIN_PHONE / ADMIN_PASSWORD like POST /setup/create-admin.
"""
from __future__ import annotations

import importlib
import sys

from dotenv import load_dotenv

from event_checkin.container import build_container
from event_checkin.core.enums import SetupOutcome
from event_checkin.core.exceptions import DomainError
from event_checkin.settings import get_settings_module


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    config = {name: getattr(settings, name) for name in dir(settings) if name.isupper()}

    container = build_container(db_config=dict(settings.DB_CONFIG), config=config)
    try:
        outcome, admin = container.setup_service.create_admin()
    except DomainError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    label = {
        SetupOutcome.CREATED: "Admin user created",
        SetupOutcome.PROMOTED: "Existing user updated to admin",
        SetupOutcome.EXISTS: "Admin user already exists",
    }[outcome]
    print(f"{label}: {admin.name} <{admin.email}> role={admin.role.value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
