"""Create the first super admin from SUPER_ADMIN_EMAIL / SUPER_ADMIN_PASSWORD."""

from __future__ import annotations

import importlib
import sys

from dotenv import load_dotenv

from attendfy.database.bootstrap import ensure_super_admin
from attendfy.settings import get_settings_module


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    email = getattr(settings, "SUPER_ADMIN_EMAIL", "")

    created = ensure_super_admin(
        db_config,
        email=email,
        password=getattr(settings, "SUPER_ADMIN_PASSWORD", ""),
        employee_id=getattr(settings, "SUPER_ADMIN_EMPLOYEE_ID", "SA000001"),
    )
    if not email:
        print("SKIP: SUPER_ADMIN_EMAIL is not set", file=sys.stderr)
        return 1

    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    if created:
        print(f"OK: Created super admin {email} -> {target}")
    else:
        print(f"OK: Super admin {email} not created (email or employee id already in use) -> {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
