import uuid
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from models.enums import CLOSED_TOUR_STATUSES
from models.models import PropertyTour


class TourRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, tour_id: uuid.UUID) -> Optional[PropertyTour]:
        result = await self.db.execute(
            select(PropertyTour).where(PropertyTour.id == tour_id)
        )
        return result.scalar_one_or_none()

    async def get_open_tour(
        self, *, requested_by_id: uuid.UUID, property_id: uuid.UUID
    ) -> Optional[PropertyTour]:
        stmt = select(PropertyTour).where(
            PropertyTour.requested_by_id == requested_by_id,
            PropertyTour.property_id == property_id,
            PropertyTour.status.not_in(CLOSED_TOUR_STATUSES),
        )
        result = await self.db.execute(stmt.limit(1))
        return result.scalars().first()

    async def add(self, tour_data: dict) -> PropertyTour:
        tour = PropertyTour(**tour_data)
        self.db.add(tour)
        await self.db.flush()
        return tour

    async def update_fields(self, tour_id: uuid.UUID, **values) -> None:
        await self.db.execute(
            update(PropertyTour)
            .where(PropertyTour.id == tour_id)
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )

    async def db_commit_and_refresh(self, value):
        try:
            await self.db.commit()
            await self.db.refresh(value)
        except SQLAlchemyError:
            await self.db.rollback()
            raise
