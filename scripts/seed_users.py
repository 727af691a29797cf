#!/usr/bin/env python3
"""
Seed a local database with one user per role.

Users normally come from the identity provider; this only fills the
``users`` table so assets can be created and assigned during development.

Run with:
    python scripts/seed_users.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import asyncio  # noqa: E402

from sqlalchemy import select  # noqa: E402

from src.infrastructure.db.models import UserModel, UserRole  # noqa: E402
from src.infrastructure.db.session import dispose_engine, get_session_factory  # noqa: E402

SEED_USERS = [
    {
        "id": "00000000-0000-0000-0000-000000000001",
        "email": "admin@example.com",
        "name": "Local Admin",
        "role": UserRole.ADMIN,
    },
    {
        "id": "00000000-0000-0000-0000-000000000002",
        "email": "manager@example.com",
        "name": "Local Manager",
        "role": UserRole.MANAGER,
    },
    {
        "id": "00000000-0000-0000-0000-000000000003",
        "email": "staff@example.com",
        "name": "Local Staff",
        "role": UserRole.USER,
    },
]


async def seed_users() -> None:
    session_factory = get_session_factory()
    async with session_factory() as session:
        existing = set(
            (
                await session.execute(
                    select(UserModel.id).where(UserModel.id.in_([u["id"] for u in SEED_USERS]))
                )
            ).scalars()
        )
        created = 0
        for user in SEED_USERS:
            if user["id"] in existing:
                continue
            session.add(UserModel(**user))
            created += 1
        await session.commit()

    await dispose_engine()
    print(f"Seeded {created} user(s), {len(existing)} already present.")


if __name__ == "__main__":
    asyncio.run(seed_users())
