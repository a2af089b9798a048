import uuid
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from models.enums import PropertyStatus
from models.models import Listing, Property


class PropertyRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, property_id: uuid.UUID) -> Optional[Property]:
        result = await self.db.execute(
            select(Property).where(Property.id == property_id)
        )
        return result.scalar_one_or_none()

    async def get_listing(self, listing_id: uuid.UUID) -> Optional[Listing]:
        result = await self.db.execute(select(Listing).where(Listing.id == listing_id))
        return result.scalar_one_or_none()

    async def create(self, property_data: dict) -> Property:
        prop = Property(**property_data)
        self.db.add(prop)
        try:
            await self.db.commit()
            await self.db.refresh(prop)
            return prop
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def create_listing(self, listing_data: dict) -> Listing:
        listing = Listing(**listing_data)
        self.db.add(listing)
        try:
            await self.db.commit()
            await self.db.refresh(listing)
            return listing
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def transfer_ownership(
        self, property_id: uuid.UUID, new_owner_id: uuid.UUID
    ) -> int:
        # Staged only; purchase completion commits it with the status write.
        result = await self.db.execute(
            update(Property)
            .where(Property.id == property_id)
            .values(owner_id=new_owner_id, status=PropertyStatus.SOLD)
        )
        return result.rowcount
