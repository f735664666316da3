from __future__ import annotations

import importlib

from event_checkin.database.bootstrap import apply_schema, list_tables
from event_checkin.database.connection import DBConfig
from event_checkin.settings import get_settings_module


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    tables = list_tables(db_config)
    print(f"OK: Applied schema.sql -> {DBConfig.from_dict(db_config).describe()} (tables={len(tables)})")


if __name__ == "__main__":
    main()
