"""Seed the built-in roles (school_admin, student, subject_teacher, class_teacher).

Usage:
    python -m scripts.seed_roles
Provisioning only looks roles up by name and fails with RoleNotSeeded when
one is missing. Safe to re-run: existing roles are left untouched.
"""

import asyncio
import logging
import sys

from app.application.interfaces import tables
from app.application.interfaces.repositories import IRelationalStore
from app.domain.enums import BuiltinRole
from app.infrastructure.supabase import (
    PostgrestStore,
    close_supabase,
    get_supabase_client,
    init_supabase,
)
from app.shared.telemetry import setup_logging

logger = logging.getLogger(__name__)


async def seed_builtin_roles(store: IRelationalStore) -> list[str]:
    """Insert every missing built-in role; return the names that were created."""
    created = []
    for role in BuiltinRole:
        if await store.select_one(tables.ROLES, {"name": role.value}) is not None:
            continue
        await store.insert(tables.ROLES, {"name": role.value})
        created.append(role.value)
    return created


async def main() -> None:
    setup_logging()
    client = get_supabase_client() if init_supabase() else None
    if client is None:
        print("Supabase client could not be initialized", file=sys.stderr)
        sys.exit(1)
    try:
        created = await seed_builtin_roles(PostgrestStore(client))
    finally:
        await close_supabase()
    if created:
        logger.info("Seeded roles: %s", ", ".join(created))
    else:
        logger.info("All built-in roles already present")


if __name__ == "__main__":
    asyncio.run(main())
