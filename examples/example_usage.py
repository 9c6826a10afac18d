"""Example: drive the registration workflow through the service layer (no Flask).

Controllers are a thin layer; the workflow lives in the services.
"""

import importlib

from config import get_settings_module

from src.school_admin.school_admin.container import build_container
from src.school_admin.school_admin.core.enums import Role


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    req = container.registration_service.submit_request(
        {"name": "Karim", "email": "karim@example.com", "role": "student", "class": "6-A"}
    )
    print("submitted:", req.to_dict())

    admin_id = container.account_service.ensure_admin(
        name=settings.ADMIN_NAME, email=settings.ADMIN_EMAIL, password=settings.ADMIN_PASSWORD
    )
    result = container.registration_service.approve(
        current_role=Role.ADMIN, admin_id=admin_id, request_id=req.request_id
    )
    print("approved:", result.to_dict())


if __name__ == "__main__":
    main()
