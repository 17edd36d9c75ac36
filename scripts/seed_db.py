from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.rfid_attendance.rfid_attendance.database.bootstrap import apply_seed_sql, ensure_admin
from src.rfid_attendance.rfid_attendance.database.connection import DBConfig


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    settings = importlib.import_module(get_settings_module())
    db_config = DBConfig.from_mapping(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")

    email = getattr(settings, "ADMIN_EMAIL", "")
    password = getattr(settings, "ADMIN_PASSWORD", "")
    if email and password:
        ensure_admin(db_config, email=email, password=password)
        print(f"OK: Admin account ready -> {email}")

    print(f"OK: Seeded database -> {db_config.describe()}")


if __name__ == "__main__":
    main()
