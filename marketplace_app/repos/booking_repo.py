import uuid
from datetime import date
from typing import Optional

from sqlalchemy import select

from models.enums import INACTIVE_BOOKING_STATUSES
from models.models import PropertyBooking


class BookingRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, booking_id: uuid.UUID) -> Optional[PropertyBooking]:
        result = await self.db.execute(
            select(PropertyBooking).where(PropertyBooking.id == booking_id)
        )
        return result.scalar_one_or_none()

    async def find_overlapping(
        self,
        *,
        property_id: uuid.UUID,
        check_in: date,
        checkout: date,
        user_id: uuid.UUID | None = None,
    ) -> Optional[PropertyBooking]:
        stmt = select(PropertyBooking).where(
            PropertyBooking.property_id == property_id,
            PropertyBooking.status.not_in(INACTIVE_BOOKING_STATUSES),
            PropertyBooking.check_in_date <= checkout,
            PropertyBooking.checkout_date >= check_in,
        )
        if user_id is not None:
            stmt = stmt.where(PropertyBooking.user_id == user_id)
        result = await self.db.execute(stmt.limit(1))
        return result.scalars().first()

    async def add(self, booking_data: dict) -> PropertyBooking:
        booking = PropertyBooking(**booking_data)
        self.db.add(booking)
        await self.db.flush()
        return booking
