import uuid
from typing import Optional

from sqlalchemy import select

from models.models import Purchase


class PurchaseRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, purchase_id: uuid.UUID) -> Optional[Purchase]:
        result = await self.db.execute(select(Purchase).where(Purchase.id == purchase_id))
        return result.scalar_one_or_none()

    async def add(self, purchase_data: dict) -> Purchase:
        purchase = Purchase(**purchase_data)
        self.db.add(purchase)
        await self.db.flush()
        return purchase
