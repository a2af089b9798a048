import uuid
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload

from models.enums import AccessLevel
from models.models import Permission, Role, RolePermission, User


class RoleRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, role_id: uuid.UUID) -> Optional[Role]:
        result = await self.db.execute(select(Role).where(Role.id == role_id))
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[Role]:
        result = await self.db.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()

    async def get_all_with_permissions(self) -> List[Role]:
        stmt = (
            select(Role)
            .options(selectinload(Role.permissions).selectinload(RolePermission.permission))
            .order_by(Role.name)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def get_with_permissions(self, role_id: uuid.UUID) -> Optional[Role]:
        stmt = (
            select(Role)
            .options(selectinload(Role.permissions).selectinload(RolePermission.permission))
            .where(Role.id == role_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_user_role(self, user_id: uuid.UUID) -> Optional[Role]:
        stmt = select(Role).join(User, User.role_id == Role.id).where(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_role_grants(self, role_id: uuid.UUID) -> Sequence[Tuple[str, str]]:
        stmt = (
            select(Permission.name, Permission.access)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
        )
        result = await self.db.execute(stmt)
        return result.all()

    async def get_all_permission_names(self) -> List[str]:
        result = await self.db.execute(select(Permission.name).distinct())
        return result.scalars().all()

    async def create(self, name: str, *, is_super_admin: bool) -> Role:
        role = Role(name=name, is_super_admin=is_super_admin)
        self.db.add(role)
        try:
            await self.db.commit()
            await self.db.refresh(role)
            return role
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def find_permission(
        self, name: str, role: str, access: AccessLevel
    ) -> Optional[Permission]:
        stmt = select(Permission).where(
            Permission.name == name,
            Permission.role == role,
            Permission.access == access,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create_permission(
        self, name: str, role: str, access: AccessLevel
    ) -> Permission:
        permission = Permission(name=name, role=role, access=access)
        self.db.add(permission)
        try:
            await self.db.commit()
            await self.db.refresh(permission)
            return permission
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def get_link(
        self, role_id: uuid.UUID, permission_id: uuid.UUID
    ) -> Optional[RolePermission]:
        stmt = select(RolePermission).where(
            RolePermission.role_id == role_id,
            RolePermission.permission_id == permission_id,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def link(self, role_id: uuid.UUID, permission_id: uuid.UUID) -> RolePermission:
        link = RolePermission(role_id=role_id, permission_id=permission_id)
        self.db.add(link)
        try:
            await self.db.commit()
            await self.db.refresh(link)
            return link
        except IntegrityError:
            await self.db.rollback()
            raise

    async def unlink(self, link: RolePermission) -> None:
        try:
            await self.db.delete(link)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
