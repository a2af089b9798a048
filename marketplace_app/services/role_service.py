import logging
from typing import List
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from core.exceptions import ConflictError, NotFoundError
from core.mapper import ORMMapper
from core.settings import settings
from core.validate_enum import validate_enum
from models.enums import APP_ROLES, PERMISSIONS, AccessLevel
from repos.role_repo import RoleRepo
from schemas.schema import RoleOut

logger = logging.getLogger(__name__)


class RoleService:
    def __init__(self, db):
        self.repo: RoleRepo = RoleRepo(db)
        self.mapper: ORMMapper = ORMMapper()

    async def _get_or_create_role(self, name: str):
        role = await self.repo.get_by_name(name)
        if role:
            return role
        role = await self.repo.create(
            name, is_super_admin=name == settings.SUPER_ADMIN_ROLE
        )
        logger.info("Created role %s (super admin: %s)", name, role.is_super_admin)
        return role

    async def _get_or_create_permission(self, name: str, role_name: str, access):
        permission = await self.repo.find_permission(name, role_name, access)
        if permission:
            return permission
        return await self.repo.create_permission(name, role_name, access)

    async def seed(self) -> List[RoleOut]:
        roles = [await self._get_or_create_role(name) for name in APP_ROLES]
        await self._get_or_create_role(settings.SUPER_ADMIN_ROLE)

        linked = 0
        for role in roles:
            for name, access in PERMISSIONS:
                if access != AccessLevel.ALL and access.value != role.name:
                    continue
                permission = await self._get_or_create_permission(
                    name, role.name, access
                )
                if await self.repo.get_link(role.id, permission.id):
                    continue
                await self.repo.link(role.id, permission.id)
                linked += 1

        logger.info("Role seeding complete, %d new permission links", linked)
        return await self.list_roles()

    async def create_role(self, name: str) -> RoleOut:
        name = name.strip().upper()
        if await self.repo.get_by_name(name):
            raise ConflictError(f"Role {name} already exists")
        role = await self._get_or_create_role(name)
        return await self.get_role(role.id)

    async def grant(self, role_id: UUID, name: str, access) -> RoleOut:
        role = await self.repo.get_by_id(role_id)
        if not role:
            raise NotFoundError("Role not found")

        access = validate_enum(access, AccessLevel, field="access")
        permission = await self._get_or_create_permission(name, role.name, access)

        if await self.repo.get_link(role.id, permission.id):
            raise ConflictError(
                f"Permission {name}/{access.value} already assigned to {role.name}"
            )
        try:
            await self.repo.link(role.id, permission.id)
        except IntegrityError:
            raise ConflictError(
                f"Permission {name}/{access.value} already assigned to {role.name}"
            )

        logger.info("Granted %s/%s to role %s", name, access.value, role.name)
        return await self.get_role(role.id)

    async def revoke(self, role_id: UUID, name: str, access) -> RoleOut:
        role = await self.repo.get_by_id(role_id)
        if not role:
            raise NotFoundError("Role not found")

        access = validate_enum(access, AccessLevel, field="access")
        permission = await self.repo.find_permission(name, role.name, access)
        link = (
            await self.repo.get_link(role.id, permission.id) if permission else None
        )
        if not link:
            raise NotFoundError(
                f"Permission {name}/{access.value} is not assigned to {role.name}"
            )

        await self.repo.unlink(link)
        logger.info("Revoked %s/%s from role %s", name, access.value, role.name)
        return await self.get_role(role.id)

    async def list_roles(self) -> List[RoleOut]:
        roles = await self.repo.get_all_with_permissions()
        return self.mapper.many(roles, RoleOut, order_by=lambda role: role.name)

    async def get_role(self, role_id: UUID) -> RoleOut:
        role = await self.repo.get_with_permissions(role_id)
        if not role:
            raise NotFoundError("Role not found")
        return self.mapper.one(role, RoleOut)
