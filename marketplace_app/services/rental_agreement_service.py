import logging
from uuid import UUID

from core.date_helper import validate_date_range
from core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotAvailableError,
    NotFoundError,
    ValidationFailed,
)
from core.mapper import ORMMapper
from core.validate_enum import validate_enum
from models.enums import BookingStatus, EntityKind, ListingType, RentalStatus
from policy.model_policy import ModelPolicy
from policy.transitions import RENTAL_TRANSITIONS
from repos.booking_repo import BookingRepo
from repos.property_repo import PropertyRepo
from repos.rental_agreement_repo import RentalAgreementRepo
from schemas.schema import (
    RentalAgreementCreate,
    RentalAgreementOut,
    RentalAgreementUpdate,
    RentalStatusUpdate,
)
from services.status_writer import StatusWriter

logger = logging.getLogger(__name__)


class RentalAgreementService:
    def __init__(self, db):
        self.repo: RentalAgreementRepo = RentalAgreementRepo(db)
        self.booking_repo: BookingRepo = BookingRepo(db)
        self.property_repo: PropertyRepo = PropertyRepo(db)
        self.status: StatusWriter = StatusWriter(db)
        self.policy: ModelPolicy = ModelPolicy()
        self.mapper: ORMMapper = ORMMapper()

    async def _get_agreement(self, agreement_id: UUID):
        agreement = await self.repo.get_by_id(agreement_id)
        if not agreement:
            raise NotFoundError("Rental agreement not found")
        return agreement

    async def create(
        self, payload: RentalAgreementCreate, current_user
    ) -> RentalAgreementOut:
        booking = await self.booking_repo.get_by_id(payload.booking_id)
        if not booking or booking.status != BookingStatus.APPROVED:
            raise NotAvailableError("Booking not found or not approved")
        if booking.property_id != payload.property_id:
            raise ValidationFailed("Booking does not belong to this property")

        prop = await self.property_repo.get_by_id(booking.property_id)
        if not prop:
            raise NotFoundError("Property not found")

        listing = await self.property_repo.get_listing(booking.listing_id)
        if not listing or listing.listing_type != ListingType.FOR_RENT:
            raise NotAvailableError("Listing is not available for rent")

        if await self.repo.get_by_booking(booking.id):
            raise ConflictError("A rental agreement already exists for this booking")

        start_date, end_date = validate_date_range(
            payload.start_date, payload.end_date
        )
        if payload.amount < 0 or payload.deposit_amount < 0:
            raise ValidationFailed("Amounts cannot be negative")

        agreement = await self.repo.add(
            {
                "property_id": prop.id,
                "listing_id": listing.id,
                "tenant_id": booking.user_id,
                "landlord_id": prop.owner_id,
                "booking_id": booking.id,
                "amount": payload.amount,
                "deposit_amount": payload.deposit_amount,
                "start_date": start_date,
                "end_date": end_date,
                "terms_accepted": False,
                "status": RentalStatus.PENDING,
            }
        )
        await self.status.record_creation(
            agreement, kind=EntityKind.RENTAL_AGREEMENT, actor_id=current_user.id
        )
        await self.status.commit(agreement)
        logger.info(
            "Rental agreement %s created from booking %s", agreement.id, booking.id
        )
        return self.mapper.one(agreement, RentalAgreementOut)

    async def accept_terms(self, agreement_id: UUID, current_user) -> RentalAgreementOut:
        agreement = await self._get_agreement(agreement_id)
        if not await self.policy.is_tenant(agreement, current_user.id):
            raise ForbiddenError("Only the tenant can accept the agreement terms")

        if not agreement.terms_accepted:
            await self.repo.update_fields(agreement.id, terms_accepted=True)
            await self.repo.db_commit_and_refresh(agreement)
            logger.info("Terms accepted on rental agreement %s", agreement.id)
        return self.mapper.one(agreement, RentalAgreementOut)

    async def update_status(
        self, agreement_id: UUID, payload: RentalStatusUpdate, current_user
    ) -> RentalAgreementOut:
        agreement = await self._get_agreement(agreement_id)
        target = validate_enum(payload.status, RentalStatus, field="status")

        await self.status.move(
            agreement,
            kind=EntityKind.RENTAL_AGREEMENT,
            table=RENTAL_TRANSITIONS,
            target=target,
            actor_id=current_user.id,
        )
        await self.status.commit(agreement)
        return self.mapper.one(agreement, RentalAgreementOut)

    async def update_fields(
        self, agreement_id: UUID, payload: RentalAgreementUpdate, current_user
    ) -> RentalAgreementOut:
        agreement = await self._get_agreement(agreement_id)
        values = {}

        if payload.amount is not None:
            values["amount"] = payload.amount
        if payload.deposit_amount is not None:
            values["deposit_amount"] = payload.deposit_amount

        # A lone start_date or end_date is ignored; stored dates stay.
        if payload.start_date and payload.end_date:
            start_date, end_date = validate_date_range(
                payload.start_date, payload.end_date
            )
            values["start_date"] = start_date
            values["end_date"] = end_date

        if values:
            await self.repo.update_fields(agreement.id, **values)
            await self.repo.db_commit_and_refresh(agreement)
            logger.info(
                "Rental agreement %s updated by %s: %s",
                agreement.id,
                current_user.id,
                sorted(values),
            )
        return self.mapper.one(agreement, RentalAgreementOut)
