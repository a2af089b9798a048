import logging
from uuid import UUID

from core.date_helper import parse_date, validate_date_range
from core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotAvailableError,
    NotFoundError,
    ValidationFailed,
)
from core.mapper import ORMMapper
from core.settings import settings
from models.enums import BookingStatus, EntityKind, ListingType
from policy.model_policy import ModelPolicy
from policy.transitions import BOOKING_TRANSITIONS
from repos.booking_repo import BookingRepo
from repos.property_repo import PropertyRepo
from schemas.schema import BookingCreate, BookingOut, BookingResponse
from services.status_writer import StatusWriter

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(self, db):
        self.repo: BookingRepo = BookingRepo(db)
        self.property_repo: PropertyRepo = PropertyRepo(db)
        self.status: StatusWriter = StatusWriter(db)
        self.policy: ModelPolicy = ModelPolicy()
        self.mapper: ORMMapper = ORMMapper()

    async def _get_booking(self, booking_id: UUID):
        booking = await self.repo.get_by_id(booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    async def create(self, payload: BookingCreate, current_user) -> BookingOut:
        prop = await self.property_repo.get_by_id(payload.property_id)
        if not prop:
            raise NotFoundError("Property not found")

        listing = await self.property_repo.get_listing(payload.listing_id)
        if (
            not listing
            or listing.property_id != prop.id
            or listing.listing_type != ListingType.FOR_RENT
            or not listing.is_active
        ):
            raise NotAvailableError("Listing is not available for booking")

        check_in, checkout = validate_date_range(
            parse_date(payload.check_in_date, field="check_in_date"),
            parse_date(payload.checkout_date, field="checkout_date"),
            start_field="check_in_date",
            end_field="checkout_date",
        )

        per_user = settings.BOOKING_OVERLAP_SCOPE == "user"
        overlapping = await self.repo.find_overlapping(
            property_id=prop.id,
            check_in=check_in,
            checkout=checkout,
            user_id=current_user.id if per_user else None,
        )
        if overlapping:
            logger.warning(
                "Overlapping booking %s blocks request by %s on property %s",
                overlapping.id,
                current_user.id,
                prop.id,
            )
            raise ConflictError(
                "You already have a booking for these dates"
                if per_user
                else "Property is already booked for these dates"
            )

        booking = await self.repo.add(
            {
                "property_id": prop.id,
                "listing_id": listing.id,
                "user_id": current_user.id,
                "check_in_date": check_in,
                "checkout_date": checkout,
                "request_message": payload.request_message,
                "status": BookingStatus.PENDING,
            }
        )
        await self.status.record_creation(
            booking, kind=EntityKind.BOOKING, actor_id=current_user.id
        )
        await self.status.commit(booking)
        logger.info("Booking %s requested by %s", booking.id, current_user.id)
        return self.mapper.one(booking, BookingOut)

    async def cancel(self, booking_id: UUID, current_user) -> BookingOut:
        booking = await self._get_booking(booking_id)
        if not await self.policy.is_booking_requester(booking, current_user.id):
            raise ForbiddenError("Only the requester can cancel this booking")

        await self.status.move(
            booking,
            kind=EntityKind.BOOKING,
            table=BOOKING_TRANSITIONS,
            target=BookingStatus.CANCELLED,
            actor_id=current_user.id,
        )
        await self.status.commit(booking)
        return self.mapper.one(booking, BookingOut)

    async def _review(
        self, booking_id: UUID, payload: BookingResponse, current_user, target
    ) -> BookingOut:
        message = (payload.response_message or "").strip()
        if not message:
            raise ValidationFailed("Response message is required")

        booking = await self._get_booking(booking_id)
        if not await self.policy.can_review_booking(booking, current_user.id):
            raise ForbiddenError("You cannot approve or reject your own booking")

        await self.status.move(
            booking,
            kind=EntityKind.BOOKING,
            table=BOOKING_TRANSITIONS,
            target=target,
            actor_id=current_user.id,
            values={"response_message": message},
        )
        await self.status.commit(booking)
        return self.mapper.one(booking, BookingOut)

    async def approve(
        self, booking_id: UUID, payload: BookingResponse, current_user
    ) -> BookingOut:
        return await self._review(
            booking_id, payload, current_user, BookingStatus.APPROVED
        )

    async def reject(
        self, booking_id: UUID, payload: BookingResponse, current_user
    ) -> BookingOut:
        return await self._review(
            booking_id, payload, current_user, BookingStatus.REJECTED
        )
