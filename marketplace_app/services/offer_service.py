import logging
from uuid import UUID

from core.exceptions import ForbiddenError, NotFoundError, ValidationFailed
from core.mapper import ORMMapper
from core.validate_enum import validate_enum
from models.enums import EntityKind, OfferStatus
from policy.model_policy import ModelPolicy
from policy.transitions import OFFER_ADMIN_TRANSITIONS
from repos.offer_repo import OfferRepo
from repos.property_repo import PropertyRepo
from repos.user_repo import UserRepo
from schemas.schema import OfferCreate, OfferOut, OfferStatusUpdate
from services.status_writer import StatusWriter

logger = logging.getLogger(__name__)


class OfferService:
    def __init__(self, db):
        self.repo: OfferRepo = OfferRepo(db)
        self.property_repo: PropertyRepo = PropertyRepo(db)
        self.user_repo: UserRepo = UserRepo(db)
        self.status: StatusWriter = StatusWriter(db)
        self.policy: ModelPolicy = ModelPolicy()
        self.mapper: ORMMapper = ORMMapper()

    async def _get_offer(self, offer_id: UUID):
        offer = await self.repo.get_by_id(offer_id)
        if not offer:
            raise NotFoundError("Offer not found")
        return offer

    async def create(self, payload: OfferCreate, current_user) -> OfferOut:
        if not await self.user_repo.exists(current_user.id):
            raise NotFoundError("Buyer not found")
        if not await self.property_repo.get_by_id(payload.property_id):
            raise NotFoundError("Property not found")
        if payload.amount < 0:
            raise ValidationFailed("Offer amount cannot be negative")

        offer = await self.repo.add(
            {
                "buyer_id": current_user.id,
                "property_id": payload.property_id,
                "amount": payload.amount,
                "message": payload.message,
                "status": OfferStatus.PENDING,
            }
        )
        await self.status.record_creation(
            offer, kind=EntityKind.OFFER, actor_id=current_user.id
        )
        await self.status.commit(offer)
        return self.mapper.one(offer, OfferOut)

    async def withdraw(self, offer_id: UUID, current_user) -> OfferOut:
        offer = await self._get_offer(offer_id)
        if not await self.policy.can_withdraw_offer(offer, current_user.id):
            raise ForbiddenError("Only a pending offer can be withdrawn by its buyer")

        moved = await self.status.history_repo.compare_and_set(
            type(offer),
            offer.id,
            expected=OfferStatus.PENDING,
            new=OfferStatus.WITHDRAWN,
        )
        if not moved:
            await self.status.history_repo.db_rollback()
            raise ForbiddenError("Only a pending offer can be withdrawn by its buyer")

        await self.status.history_repo.log_change(
            entity_type=EntityKind.OFFER,
            entity_id=offer.id,
            old_status=OfferStatus.PENDING,
            new_status=OfferStatus.WITHDRAWN,
            user_id=current_user.id,
        )
        await self.status.commit(offer)
        logger.info("Offer %s withdrawn by %s", offer.id, current_user.id)
        return self.mapper.one(offer, OfferOut)

    async def update_status(
        self, offer_id: UUID, payload: OfferStatusUpdate, current_user
    ) -> OfferOut:
        offer = await self._get_offer(offer_id)
        target = validate_enum(payload.status, OfferStatus, field="status")

        await self.status.move(
            offer,
            kind=EntityKind.OFFER,
            table=OFFER_ADMIN_TRANSITIONS,
            target=target,
            actor_id=current_user.id,
        )
        await self.status.commit(offer)
        return self.mapper.one(offer, OfferOut)
