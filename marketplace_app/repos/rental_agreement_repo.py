import uuid
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from models.models import RentalAgreement

class RentalAgreementRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, agreement_id: uuid.UUID) -> Optional[RentalAgreement]:
        result = await self.db.execute(
            select(RentalAgreement).where(RentalAgreement.id == agreement_id)
        )
        return result.scalar_one_or_none()

    async def get_by_booking(self, booking_id: uuid.UUID) -> Optional[RentalAgreement]:
        result = await self.db.execute(
            select(RentalAgreement).where(RentalAgreement.booking_id == booking_id)
        )
        return result.scalar_one_or_none()

    async def add(self, agreement_data: dict) -> RentalAgreement:
        agreement = RentalAgreement(**agreement_data)
        self.db.add(agreement)
        await self.db.flush()
        return agreement

    async def update_fields(self, agreement_id: uuid.UUID, **values) -> None:
        if not values:
            return
        await self.db.execute(
            update(RentalAgreement)
            .where(RentalAgreement.id == agreement_id)
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
