from __future__ import annotations

from src.api.deps import issue_smoke_token
from src.core.auth import Role

ADMIN_ID = "user-admin"
MANAGER_ID = "user-manager"
STAFF_ID = "user-staff"
STAFF_TWO_ID = "user-staff-2"


def auth_headers(user_id: str = ADMIN_ID, role: Role = Role.ADMIN) -> dict[str, str]:
    token = issue_smoke_token(user_id, role=role, email=f"{user_id}@example.com")
    return {"Authorization": f"Bearer {token}"}


def admin_headers() -> dict[str, str]:
    return auth_headers(ADMIN_ID, Role.ADMIN)


def manager_headers() -> dict[str, str]:
    return auth_headers(MANAGER_ID, Role.MANAGER)


def staff_headers() -> dict[str, str]:
    return auth_headers(STAFF_ID, Role.USER)
