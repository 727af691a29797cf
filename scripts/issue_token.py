#!/usr/bin/env python3
"""Print bearer tokens for the seeded users, for manual API testing.

Run with:
    python scripts/issue_token.py [user_id role]
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core.auth import Role, create_access_token  # noqa: E402
from scripts.seed_users import SEED_USERS  # noqa: E402


def main(argv: list[str]) -> None:
    if len(argv) == 2:
        user_id, role = argv
        if not Role.contains(role):
            raise SystemExit(f"Unknown role: {role}")
        print(create_access_token(user_id, roles=[role]))
        return

    for user in SEED_USERS:
        token = create_access_token(user["id"], roles=[user["role"].value], email=user["email"])
        print(f"{user['name']} ({user['role'].value}):\n{token}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
