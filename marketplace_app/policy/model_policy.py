import uuid

from models.enums import OfferStatus
from models.models import Offer, PropertyBooking, PropertyTour, RentalAgreement


class ModelPolicy:
    @staticmethod
    async def is_booking_requester(
        booking: PropertyBooking, user_id: uuid.UUID
    ) -> bool:
        return booking.user_id == user_id

    @staticmethod
    async def can_review_booking(booking: PropertyBooking, user_id: uuid.UUID) -> bool:
        return booking.user_id != user_id

    @staticmethod
    async def is_tour_requester(tour: PropertyTour, user_id: uuid.UUID) -> bool:
        return tour.requested_by_id == user_id

    @staticmethod
    async def is_tenant(agreement: RentalAgreement, user_id: uuid.UUID) -> bool:
        return agreement.tenant_id == user_id

    @staticmethod
    async def can_withdraw_offer(offer: Offer, user_id: uuid.UUID) -> bool:
        return offer.status == OfferStatus.PENDING and offer.buyer_id == user_id
