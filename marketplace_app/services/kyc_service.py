import logging
from uuid import UUID

from core.exceptions import ConflictError, NotFoundError, ValidationFailed
from core.mapper import ORMMapper
from models.enums import EntityKind, KycStatus
from policy.transitions import KYC_TRANSITIONS
from repos.kyc_repo import KycRepo
from repos.user_repo import UserRepo
from schemas.schema import KycOut, KycReject, KycSubmit
from services.status_writer import StatusWriter

logger = logging.getLogger(__name__)


class KycService:
    def __init__(self, db):
        self.repo: KycRepo = KycRepo(db)
        self.user_repo: UserRepo = UserRepo(db)
        self.status: StatusWriter = StatusWriter(db)
        self.mapper: ORMMapper = ORMMapper()

    async def _get_kyc(self, kyc_id: UUID):
        kyc = await self.repo.get_by_id(kyc_id)
        if not kyc:
            raise NotFoundError("KYC record not found")
        return kyc

    async def submit(self, payload: KycSubmit, current_user) -> KycOut:
        if await self.repo.get_by_user(current_user.id):
            raise ConflictError("KYC already submitted")

        kyc = await self.repo.add(
            {
                "user_id": current_user.id,
                "document_type": payload.document_type.strip(),
                "document_number": payload.document_number.strip(),
                "status": KycStatus.PENDING,
            }
        )
        await self.status.record_creation(
            kyc, kind=EntityKind.KYC, actor_id=current_user.id
        )
        await self.status.commit(kyc)
        logger.info("KYC %s submitted by %s", kyc.id, current_user.id)
        return self.mapper.one(kyc, KycOut)

    async def approve(self, kyc_id: UUID, current_user) -> KycOut:
        kyc = await self._get_kyc(kyc_id)

        await self.status.move(
            kyc,
            kind=EntityKind.KYC,
            table=KYC_TRANSITIONS,
            target=KycStatus.APPROVED,
            actor_id=current_user.id,
            values={"reviewer_id": current_user.id, "reason": None},
        )
        await self.user_repo.mark_kyc_verified(kyc.user_id)
        await self.status.commit(kyc)
        logger.info("KYC %s approved; user %s verified", kyc.id, kyc.user_id)
        return self.mapper.one(kyc, KycOut)

    async def reject(self, kyc_id: UUID, payload: KycReject, current_user) -> KycOut:
        reason = (payload.reason or "").strip()
        if not reason:
            raise ValidationFailed("A rejection reason is required")
        kyc = await self._get_kyc(kyc_id)

        await self.status.move(
            kyc,
            kind=EntityKind.KYC,
            table=KYC_TRANSITIONS,
            target=KycStatus.REJECTED,
            actor_id=current_user.id,
            values={"reviewer_id": current_user.id, "reason": reason},
        )
        await self.status.commit(kyc)
        return self.mapper.one(kyc, KycOut)
