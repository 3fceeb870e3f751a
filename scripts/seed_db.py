from __future__ import annotations

import importlib

from dotenv import load_dotenv

from store_attendance.config import get_settings_module
from store_attendance.database.bootstrap import DEMO_STORES, DEMO_USERS, ensure_demo_directory


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_directory(db_config)

    print(
        f"OK: Seeded {len(DEMO_STORES)} stores and {len(DEMO_USERS)} users -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
