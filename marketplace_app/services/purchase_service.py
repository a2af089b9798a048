import logging
from uuid import UUID

from core.exceptions import NotAvailableError, NotFoundError, ValidationFailed
from core.mapper import ORMMapper
from core.validate_enum import validate_enum
from models.enums import EntityKind, ListingType, PurchaseStatus
from models.utils import utcnow
from policy.transitions import PURCHASE_TRANSITIONS
from repos.property_repo import PropertyRepo
from repos.purchase_repo import PurchaseRepo
from repos.user_repo import UserRepo
from schemas.schema import PurchaseCreate, PurchaseOut, PurchaseStatusUpdate
from services.status_writer import StatusWriter

logger = logging.getLogger(__name__)


class PurchaseService:
    def __init__(self, db):
        self.repo: PurchaseRepo = PurchaseRepo(db)
        self.property_repo: PropertyRepo = PropertyRepo(db)
        self.user_repo: UserRepo = UserRepo(db)
        self.status: StatusWriter = StatusWriter(db)
        self.mapper: ORMMapper = ORMMapper()

    async def create(self, payload: PurchaseCreate, current_user) -> PurchaseOut:
        listing = await self.property_repo.get_listing(payload.listing_id)
        if not listing or listing.listing_type != ListingType.FOR_SALE:
            raise NotAvailableError("Listing not available for sale")

        if listing.listed_by_id != payload.seller_id:
            raise ValidationFailed("Seller does not own this listing")

        if not await self.user_repo.exists(current_user.id):
            raise NotFoundError("Buyer not found")
        if current_user.id == payload.seller_id:
            raise ValidationFailed("Buyer and seller cannot be the same user")

        purchase = await self.repo.add(
            {
                "property_id": listing.property_id,
                "listing_id": listing.id,
                "buyer_id": current_user.id,
                "seller_id": payload.seller_id,
                "purchase_price": payload.purchase_price,
                "purchase_date": payload.purchase_date or utcnow(),
                "closing_date": payload.closing_date,
                "notes": payload.notes,
                "status": PurchaseStatus.PENDING,
            }
        )
        await self.status.record_creation(
            purchase, kind=EntityKind.PURCHASE, actor_id=current_user.id
        )
        await self.status.commit(purchase)
        logger.info("Purchase %s opened on listing %s", purchase.id, listing.id)
        return self.mapper.one(purchase, PurchaseOut)

    async def update_status(
        self, purchase_id: UUID, payload: PurchaseStatusUpdate, current_user
    ) -> PurchaseOut:
        purchase = await self.repo.get_by_id(purchase_id)
        if not purchase:
            raise NotFoundError("Purchase not found")
        target = validate_enum(payload.status, PurchaseStatus, field="status")

        await self.status.move(
            purchase,
            kind=EntityKind.PURCHASE,
            table=PURCHASE_TRANSITIONS,
            target=target,
            actor_id=current_user.id,
        )

        if target == PurchaseStatus.COMPLETED:
            # Ownership and SOLD land in the same commit as the status write.
            moved = await self.property_repo.transfer_ownership(
                purchase.property_id, purchase.buyer_id
            )
            if not moved:
                await self.status.history_repo.db_rollback()
                raise NotFoundError("Property not found")
            logger.info(
                "Property %s transferred to buyer %s",
                purchase.property_id,
                purchase.buyer_id,
            )

        await self.status.commit(purchase)
        return self.mapper.one(purchase, PurchaseOut)
