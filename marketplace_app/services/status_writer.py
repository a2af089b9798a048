import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import ForbiddenTransition
from models.enums import EntityKind
from policy.transitions import TransitionTable
from repos.status_history_repo import StatusHistoryRepo

logger = logging.getLogger(__name__)


class StatusWriter:
    """Guarded status writes shared by every lifecycle service.

    ``move`` stages the change; ``commit`` flushes it together with whatever
    else the caller staged on the same session.
    """

    def __init__(self, db):
        self.history_repo: StatusHistoryRepo = StatusHistoryRepo(db)

    async def move(
        self,
        entity,
        *,
        kind: EntityKind,
        table: TransitionTable,
        target,
        actor_id: UUID | None,
        values: dict | None = None,
    ) -> None:
        current = entity.status
        table.check(current, target)

        moved = await self.history_repo.compare_and_set(
            type(entity), entity.id, expected=current, new=target, values=values
        )
        if not moved:
            await self.history_repo.db_rollback()
            logger.warning(
                "Lost race moving %s %s from %s to %s",
                kind.value,
                entity.id,
                current.value,
                target.value,
            )
            raise ForbiddenTransition(
                f"{table.entity.capitalize()} changed while processing; "
                f"it is no longer {current.value}"
            )

        await self.history_repo.log_change(
            entity_type=kind,
            entity_id=entity.id,
            old_status=current,
            new_status=target,
            user_id=actor_id,
        )
        logger.info(
            "%s %s moved %s -> %s by %s",
            kind.value,
            entity.id,
            current.value,
            target.value,
            actor_id,
        )

    async def record_creation(self, entity, *, kind: EntityKind, actor_id: UUID | None):
        await self.history_repo.log_change(
            entity_type=kind,
            entity_id=entity.id,
            old_status=None,
            new_status=entity.status,
            user_id=actor_id,
        )

    async def commit(self, entity):
        try:
            await self.history_repo.db.commit()
            await self.history_repo.db.refresh(entity)
        except SQLAlchemyError:
            logger.exception("Rolling back status write for %s", entity.id)
            await self.history_repo.db_rollback()
            raise
        return entity
