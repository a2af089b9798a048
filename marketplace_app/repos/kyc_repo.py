import uuid
from typing import Optional

from sqlalchemy import select

from models.models import KYC


class KycRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, kyc_id: uuid.UUID) -> Optional[KYC]:
        result = await self.db.execute(select(KYC).where(KYC.id == kyc_id))
        return result.scalar_one_or_none()

    async def get_by_user(self, user_id: uuid.UUID) -> Optional[KYC]:
        result = await self.db.execute(select(KYC).where(KYC.user_id == user_id))
        return result.scalar_one_or_none()

    async def add(self, kyc_data: dict) -> KYC:
        kyc = KYC(**kyc_data)
        self.db.add(kyc)
        await self.db.flush()
        return kyc
