import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import Unauthenticated, UserNotFound
from core.get_current_user import get_current_user
from core.get_db import get_db_async
from models.models import User
from services.authorization_service import AuthorizationService, to_requirements

logger = logging.getLogger(__name__)


def require_permissions(*entries):
    """Route dependency: resolve the caller, then run the permission check.

    ``entries`` are ``(name, access)`` pairs where ``access`` is one level or
    a list of acceptable levels. Returns the authenticated ``User``.
    """
    requirements = to_requirements(entries)

    async def dependency(
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ) -> User:
        try:
            await AuthorizationService(db).authorize(current_user.id, requirements)
        except UserNotFound:
            logger.warning("User %s vanished during permission check", current_user.id)
            raise Unauthenticated()
        return current_user

    return dependency
