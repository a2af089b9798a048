import logging
from typing import Iterable, List, Sequence, Tuple
from uuid import UUID

from core.exceptions import ForbiddenError, UserNotFound
from policy.permission_policy import (
    ANY_ACCESS,
    Decision,
    HeldPermission,
    PermissionRequirement,
    match_permissions,
)
from repos.role_repo import RoleRepo

logger = logging.getLogger(__name__)

RequirementLike = PermissionRequirement | Tuple[str, object]


def to_requirements(
    required: Iterable[RequirementLike] | None,
) -> List[PermissionRequirement]:
    requirements = []
    for entry in required or []:
        if isinstance(entry, PermissionRequirement):
            requirements.append(entry)
        else:
            name, access = entry
            requirements.append(PermissionRequirement.of(name, access))
    return requirements


class AuthorizationService:
    def __init__(self, db):
        self.role_repo: RoleRepo = RoleRepo(db)

    async def held_permissions(self, user_id: UUID) -> List[HeldPermission]:
        role = await self.role_repo.get_user_role(user_id)
        if role is None:
            raise UserNotFound()

        if role.is_super_admin:
            names = await self.role_repo.get_all_permission_names()
            return [HeldPermission(name=name, access=ANY_ACCESS) for name in names]

        grants = await self.role_repo.get_role_grants(role.id)
        return [
            HeldPermission(name=name, access=getattr(access, "value", access))
            for name, access in grants
        ]

    async def evaluate(
        self, user_id: UUID, required: Sequence[RequirementLike] | None
    ) -> Decision:
        requirements = to_requirements(required)
        if not requirements:
            return Decision(allowed=True)

        held = await self.held_permissions(user_id)
        decision = match_permissions(held, requirements)
        if not decision:
            logger.warning("Permission denied for user %s: %s", user_id, decision.reason)
        return decision

    async def authorize(
        self, user_id: UUID, required: Sequence[RequirementLike] | None
    ) -> Decision:
        decision = await self.evaluate(user_id, required)
        if not decision:
            raise ForbiddenError(decision.reason)
        return decision
