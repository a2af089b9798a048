import uuid
from decimal import Decimal

import pytest

from core.exceptions import ForbiddenError, NotFoundError, ValidationFailed
from models.enums import BookingStatus, OfferStatus
from schemas.schema import BookingCreate, OfferCreate
from services.booking_service import BookingService
from services.offer_service import OfferService
from services.transition_service import ACTIONS, TransitionService


async def pending_booking(db, buyer, rental, days):
    prop, listing = rental
    return await BookingService(db).create(
        BookingCreate(
            property_id=prop.id,
            listing_id=listing.id,
            check_in_date=days(5),
            checkout_date=days(10),
        ),
        buyer,
    )


def test_every_action_declares_permissions():
    for key, action in ACTIONS.items():
        assert action.required, key
        assert hasattr(action.service, action.method), key


@pytest.mark.parametrize(
    "entity, action",
    [("invoice", "approve"), ("booking", "teleport"), ("kyc", "withdraw")],
)
async def test_unknown_entity_or_action(seeded, admin, entity, action):
    with pytest.raises(ValidationFailed):
        await TransitionService(seeded).apply_transition(
            entity, uuid.uuid4(), action, admin, {}
        )


async def test_invalid_id(seeded, admin):
    with pytest.raises(ValidationFailed):
        await TransitionService(seeded).apply_transition(
            "booking", "not-a-uuid", "cancel", admin
        )


async def test_buyer_cannot_approve_booking(seeded, buyer, rental, days):
    booking = await pending_booking(seeded, buyer, rental, days)

    with pytest.raises(ForbiddenError) as exc:
        await TransitionService(seeded).apply_transition(
            "booking", booking.id, "approve", buyer, {"response_message": "ok"}
        )
    assert "APPROVE" in exc.value.message


async def test_admin_approves_through_dispatcher(seeded, buyer, admin, rental, days):
    booking = await pending_booking(seeded, buyer, rental, days)

    approved = await TransitionService(seeded).apply_transition(
        "booking", str(booking.id), "approve", admin, {"response_message": "Welcome"}
    )
    assert approved.status == BookingStatus.APPROVED
    assert approved.response_message == "Welcome"


async def test_payload_is_validated(seeded, buyer, admin, rental, days):
    booking = await pending_booking(seeded, buyer, rental, days)

    with pytest.raises(ValidationFailed) as exc:
        await TransitionService(seeded).apply_transition(
            "booking", booking.id, "approve", admin, {}
        )
    assert "response_message" in exc.value.message


async def test_buyer_withdraws_offer_through_dispatcher(seeded, buyer, sale):
    prop, _ = sale
    offer = await OfferService(seeded).create(
        OfferCreate(property_id=prop.id, amount=Decimal("1000")), buyer
    )

    withdrawn = await TransitionService(seeded).apply_transition(
        "offer", offer.id, "withdraw", buyer
    )
    assert withdrawn.status == OfferStatus.WITHDRAWN


async def test_handler_errors_propagate(seeded, admin):
    with pytest.raises(NotFoundError):
        await TransitionService(seeded).apply_transition(
            "offer", uuid.uuid4(), "update_status", admin, {"status": "ACCEPTED"}
        )
