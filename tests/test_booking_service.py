import uuid

import pytest
from sqlalchemy import update

from core.exceptions import (
    ConflictError,
    ForbiddenError,
    ForbiddenTransition,
    NotAvailableError,
    NotFoundError,
    ValidationFailed,
)
from core.settings import settings
from models.enums import BookingStatus, EntityKind
from models.models import PropertyBooking
from repos.status_history_repo import StatusHistoryRepo
from schemas.schema import BookingCreate, BookingResponse
from services.booking_service import BookingService


def booking_payload(rental, check_in, checkout, **extra):
    prop, listing = rental
    return BookingCreate(
        property_id=prop.id,
        listing_id=listing.id,
        check_in_date=check_in,
        checkout_date=checkout,
        **extra,
    )


async def test_request_booking_is_pending(seeded, buyer, rental, days):
    booking = await BookingService(seeded).create(
        booking_payload(rental, days(5), days(10), request_message="Two guests"),
        buyer,
    )

    assert booking.status == BookingStatus.PENDING
    assert booking.user_id == buyer.id
    assert booking.request_message == "Two guests"

    history = await StatusHistoryRepo(seeded).get_for(EntityKind.BOOKING, booking.id)
    assert [(h.old_status, h.new_status) for h in history] == [(None, "PENDING")]


async def test_overlapping_booking_for_same_user_conflicts(seeded, buyer, rental, days):
    service = BookingService(seeded)
    await service.create(booking_payload(rental, days(5), days(10)), buyer)

    with pytest.raises(ConflictError):
        await service.create(booking_payload(rental, days(7), days(12)), buyer)


async def test_touching_windows_overlap(seeded, buyer, rental, days):
    service = BookingService(seeded)
    await service.create(booking_payload(rental, days(5), days(10)), buyer)

    with pytest.raises(ConflictError):
        await service.create(booking_payload(rental, days(10), days(14)), buyer)


async def test_disjoint_windows_are_fine(seeded, buyer, rental, days):
    service = BookingService(seeded)
    await service.create(booking_payload(rental, days(5), days(10)), buyer)
    second = await service.create(booking_payload(rental, days(11), days(14)), buyer)
    assert second.status == BookingStatus.PENDING


async def test_cancelled_booking_frees_the_window(seeded, buyer, rental, days):
    service = BookingService(seeded)
    first = await service.create(booking_payload(rental, days(5), days(10)), buyer)
    await service.cancel(first.id, buyer)

    again = await service.create(booking_payload(rental, days(5), days(10)), buyer)
    assert again.status == BookingStatus.PENDING


async def test_other_users_may_overlap_by_default(
    seeded, buyer, make_user, rental, days
):
    other = await make_user("BUYER")
    service = BookingService(seeded)
    await service.create(booking_payload(rental, days(5), days(10)), buyer)

    second = await service.create(booking_payload(rental, days(6), days(9)), other)
    assert second.status == BookingStatus.PENDING


async def test_property_scope_blocks_other_users(
    seeded, buyer, make_user, rental, days, monkeypatch
):
    monkeypatch.setattr(settings, "BOOKING_OVERLAP_SCOPE", "property")
    other = await make_user("BUYER")
    service = BookingService(seeded)
    await service.create(booking_payload(rental, days(5), days(10)), buyer)

    with pytest.raises(ConflictError):
        await service.create(booking_payload(rental, days(6), days(9)), other)


@pytest.mark.parametrize(
    "check_in, checkout, message",
    [
        (-1, 3, "check_in_date cannot be in the past"),
        (5, 5, "checkout_date must be after check_in_date"),
        (6, 4, "checkout_date must be after check_in_date"),
    ],
)
async def test_date_guards(seeded, buyer, rental, days, check_in, checkout, message):
    with pytest.raises(ValidationFailed) as exc:
        await BookingService(seeded).create(
            booking_payload(rental, days(check_in), days(checkout)), buyer
        )
    assert exc.value.message == message


async def test_unparseable_date(seeded, buyer, rental, days):
    with pytest.raises(ValidationFailed) as exc:
        await BookingService(seeded).create(
            booking_payload(rental, "next tuesday", days(3)), buyer
        )
    assert "check_in_date" in exc.value.message


async def test_sale_listing_cannot_be_booked(seeded, buyer, sale, days):
    with pytest.raises(NotAvailableError):
        await BookingService(seeded).create(
            booking_payload(sale, days(5), days(10)), buyer
        )


async def test_unknown_property(seeded, buyer, rental, days):
    _, listing = rental
    payload = BookingCreate(
        property_id=uuid.uuid4(),
        listing_id=listing.id,
        check_in_date=days(5),
        checkout_date=days(10),
    )
    with pytest.raises(NotFoundError):
        await BookingService(seeded).create(payload, buyer)


async def test_admin_approves_pending_booking(seeded, buyer, admin, rental, days):
    service = BookingService(seeded)
    booking = await service.create(booking_payload(rental, days(5), days(10)), buyer)

    approved = await service.approve(
        booking.id, BookingResponse(response_message="See you then"), admin
    )

    assert approved.status == BookingStatus.APPROVED
    assert approved.response_message == "See you then"

    history = await StatusHistoryRepo(seeded).get_for(EntityKind.BOOKING, booking.id)
    assert ("PENDING", "APPROVED", admin.id) in [
        (h.old_status, h.new_status, h.changed_by) for h in history
    ]


async def test_review_only_from_pending(seeded, buyer, admin, rental, days):
    service = BookingService(seeded)
    booking = await service.create(booking_payload(rental, days(5), days(10)), buyer)
    await service.reject(booking.id, BookingResponse(response_message="Booked out"), admin)

    with pytest.raises(ForbiddenTransition):
        await service.approve(booking.id, BookingResponse(response_message="ok"), admin)


async def test_requester_cannot_review_own_booking(seeded, buyer, rental, days):
    service = BookingService(seeded)
    booking = await service.create(booking_payload(rental, days(5), days(10)), buyer)

    with pytest.raises(ForbiddenError):
        await service.approve(booking.id, BookingResponse(response_message="ok"), buyer)


async def test_blank_response_message_rejected(seeded, buyer, admin, rental, days):
    service = BookingService(seeded)
    booking = await service.create(booking_payload(rental, days(5), days(10)), buyer)

    with pytest.raises(ValidationFailed):
        await service.reject(
            booking.id, BookingResponse.model_construct(response_message="   "), admin
        )


async def test_only_requester_cancels(seeded, buyer, admin, rental, days):
    service = BookingService(seeded)
    booking = await service.create(booking_payload(rental, days(5), days(10)), buyer)

    with pytest.raises(ForbiddenError):
        await service.cancel(booking.id, admin)


async def test_cancel_after_approval_is_forbidden(seeded, buyer, admin, rental, days):
    service = BookingService(seeded)
    booking = await service.create(booking_payload(rental, days(5), days(10)), buyer)
    await service.approve(booking.id, BookingResponse(response_message="ok"), admin)

    with pytest.raises(ForbiddenTransition):
        await service.cancel(booking.id, buyer)


async def test_lost_race_is_reported(seeded, buyer, admin, rental, days):
    service = BookingService(seeded)
    booking = await service.create(booking_payload(rental, days(5), days(10)), buyer)

    # Another writer rejects the row behind the session's back.
    await seeded.execute(
        update(PropertyBooking)
        .where(PropertyBooking.id == booking.id)
        .values(status=BookingStatus.REJECTED)
        .execution_options(synchronize_session=False)
    )
    await seeded.commit()

    with pytest.raises(ForbiddenTransition):
        await service.approve(booking.id, BookingResponse(response_message="yes"), admin)

    stored = await seeded.get(PropertyBooking, booking.id, populate_existing=True)
    assert stored.status == BookingStatus.REJECTED
