"""Seed roles and the permission catalogue.

Safe to run repeatedly: existing roles, permissions and links are reused.

    python seed.py
"""

import asyncio
import logging

from core.get_db import AsyncSessionLocal
from core.settings import settings
from services.role_service import RoleService

logger = logging.getLogger("seed")


async def main():
    async with AsyncSessionLocal() as db:
        roles = await RoleService(db).seed()

    for role in roles:
        names = sorted(
            f"{link.permission.name}/{link.permission.access.value}"
            for link in role.permissions
        )
        logger.info(
            "%s%s: %s",
            role.name,
            " (super admin)" if role.is_super_admin else "",
            ", ".join(names) or "-",
        )


if __name__ == "__main__":
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    asyncio.run(main())
