from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update

from models.enums import EntityKind
from models.models import StatusHistory


class StatusHistoryRepo:
    def __init__(self, db):
        self.db = db

    async def compare_and_set(
        self,
        model,
        entity_id: UUID,
        *,
        expected,
        new,
        values: Optional[dict] = None,
    ) -> bool:
        """Write ``new`` only if the row still holds ``expected``.

        Returns False when another request moved the row first. The session
        copy of the row is left as is; callers refresh after commit.
        """
        stmt = (
            update(model)
            .where(model.id == entity_id, model.status == expected)
            .values(status=new, **(values or {}))
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1

    async def log_change(
        self,
        *,
        entity_type: EntityKind,
        entity_id: UUID,
        old_status,
        new_status,
        user_id: UUID | None = None,
    ) -> StatusHistory:
        log = StatusHistory(
            entity_type=entity_type.value,
            entity_id=entity_id,
            old_status=old_status.value if old_status is not None else None,
            new_status=new_status.value,
            changed_by=user_id,
        )
        self.db.add(log)
        return log

    async def get_for(self, entity_type: EntityKind, entity_id: UUID) -> List[StatusHistory]:
        stmt = (
            select(StatusHistory)
            .where(
                StatusHistory.entity_type == entity_type.value,
                StatusHistory.entity_id == entity_id,
            )
            .order_by(StatusHistory.changed_at)
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def db_rollback(self):
        await self.db.rollback()
