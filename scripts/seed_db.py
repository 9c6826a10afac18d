"""Create (or re-confirm) the admin account from ADMIN_EMAIL / ADMIN_PASSWORD."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.school_admin.school_admin.container import build_container


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())

    email = getattr(settings, "ADMIN_EMAIL", None)
    password = getattr(settings, "ADMIN_PASSWORD", None)
    if not email or not password:
        raise SystemExit("Set ADMIN_EMAIL and ADMIN_PASSWORD first.")

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        identity_backend=getattr(settings, "IDENTITY_BACKEND", "local"),
        supabase_config=getattr(settings, "SUPABASE_CONFIG", None),
    )
    identity_id = container.account_service.ensure_admin(
        name=getattr(settings, "ADMIN_NAME", "Administrator"),
        email=email,
        password=password,
    )
    print(f"OK: Admin account ready -> {email} (id={identity_id})")


if __name__ == "__main__":
    main()
