import uuid
from typing import Optional

from sqlalchemy import select

from models.models import Offer


class OfferRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, offer_id: uuid.UUID) -> Optional[Offer]:
        result = await self.db.execute(select(Offer).where(Offer.id == offer_id))
        return result.scalar_one_or_none()

    async def add(self, offer_data: dict) -> Offer:
        offer = Offer(**offer_data)
        self.db.add(offer)
        await self.db.flush()
        return offer
