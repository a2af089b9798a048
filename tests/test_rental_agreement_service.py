from decimal import Decimal

import pytest
import pytest_asyncio

from core.exceptions import (
    ConflictError,
    ForbiddenError,
    ForbiddenTransition,
    NotAvailableError,
    ValidationFailed,
)
from models.enums import BookingStatus, RentalStatus
from schemas.schema import (
    BookingCreate,
    BookingResponse,
    RentalAgreementCreate,
    RentalAgreementUpdate,
    RentalStatusUpdate,
)
from services.booking_service import BookingService
from services.rental_agreement_service import RentalAgreementService


async def request_booking(db, tenant, rental, days):
    prop, listing = rental
    return await BookingService(db).create(
        BookingCreate(
            property_id=prop.id,
            listing_id=listing.id,
            check_in_date=days(5),
            checkout_date=days(10),
        ),
        tenant,
    )


@pytest_asyncio.fixture
async def approved_booking(seeded, buyer, admin, rental, days):
    booking = await request_booking(seeded, buyer, rental, days)
    return await BookingService(seeded).approve(
        booking.id, BookingResponse(response_message="Approved"), admin
    )


def agreement_payload(booking, days, start=5, end=365, **extra):
    data = {
        "property_id": booking.property_id,
        "booking_id": booking.id,
        "amount": Decimal("1500.00"),
        "deposit_amount": Decimal("3000.00"),
        "start_date": days(start),
        "end_date": days(end),
    }
    data.update(extra)
    return RentalAgreementCreate(**data)


async def test_agreement_from_approved_booking(
    seeded, buyer, seller, approved_booking, days
):
    agreement = await RentalAgreementService(seeded).create(
        agreement_payload(approved_booking, days), buyer
    )

    assert agreement.status == RentalStatus.PENDING
    assert agreement.tenant_id == buyer.id
    assert agreement.landlord_id == seller.id
    assert agreement.booking_id == approved_booking.id
    assert agreement.terms_accepted is False


async def test_pending_booking_is_not_available(seeded, buyer, rental, days):
    booking = await request_booking(seeded, buyer, rental, days)
    assert booking.status == BookingStatus.PENDING

    with pytest.raises(NotAvailableError):
        await RentalAgreementService(seeded).create(
            agreement_payload(booking, days), buyer
        )


async def test_one_agreement_per_booking(seeded, buyer, approved_booking, days):
    service = RentalAgreementService(seeded)
    await service.create(agreement_payload(approved_booking, days), buyer)

    with pytest.raises(ConflictError):
        await service.create(agreement_payload(approved_booking, days), buyer)


async def test_agreement_dates_are_guarded(seeded, buyer, approved_booking, days):
    with pytest.raises(ValidationFailed) as exc:
        await RentalAgreementService(seeded).create(
            agreement_payload(approved_booking, days, start=10, end=10), buyer
        )
    assert exc.value.message == "end_date must be after start_date"


async def test_only_tenant_accepts_terms(seeded, buyer, admin, approved_booking, days):
    service = RentalAgreementService(seeded)
    agreement = await service.create(agreement_payload(approved_booking, days), buyer)

    with pytest.raises(ForbiddenError):
        await service.accept_terms(agreement.id, admin)

    accepted = await service.accept_terms(agreement.id, buyer)
    again = await service.accept_terms(agreement.id, buyer)
    assert accepted.terms_accepted is True
    assert again.terms_accepted is True


async def test_status_table(seeded, buyer, admin, approved_booking, days, strict_transitions):
    service = RentalAgreementService(seeded)
    agreement = await service.create(agreement_payload(approved_booking, days), buyer)

    with pytest.raises(ForbiddenTransition):
        await service.update_status(
            agreement.id, RentalStatusUpdate(status=RentalStatus.EXPIRED), admin
        )

    active = await service.update_status(
        agreement.id, RentalStatusUpdate(status=RentalStatus.ACTIVE), admin
    )
    assert active.status == RentalStatus.ACTIVE

    ended = await service.update_status(
        agreement.id, RentalStatusUpdate(status=RentalStatus.TERMINATED), admin
    )
    assert ended.status == RentalStatus.TERMINATED


async def test_relaxed_status_overwrite(
    seeded, buyer, admin, approved_booking, days, relaxed_transitions
):
    service = RentalAgreementService(seeded)
    agreement = await service.create(agreement_payload(approved_booking, days), buyer)

    expired = await service.update_status(
        agreement.id, RentalStatusUpdate(status=RentalStatus.EXPIRED), admin
    )
    assert expired.status == RentalStatus.EXPIRED


async def test_partial_update(seeded, buyer, admin, approved_booking, days):
    service = RentalAgreementService(seeded)
    agreement = await service.create(agreement_payload(approved_booking, days), buyer)

    updated = await service.update_fields(
        agreement.id, RentalAgreementUpdate(amount=Decimal("1750.00")), admin
    )
    assert updated.amount == Decimal("1750.00")
    assert updated.deposit_amount == Decimal("3000.00")

    moved = await service.update_fields(
        agreement.id,
        RentalAgreementUpdate(start_date=days(7), end_date=days(200)),
        admin,
    )
    assert moved.start_date.isoformat() == days(7)


async def test_lone_date_is_ignored(seeded, buyer, admin, approved_booking, days):
    service = RentalAgreementService(seeded)
    agreement = await service.create(agreement_payload(approved_booking, days), buyer)

    updated = await service.update_fields(
        agreement.id,
        RentalAgreementUpdate(amount=Decimal("999.00"), end_date=days(300)),
        admin,
    )

    assert updated.amount == Decimal("999.00")
    assert updated.start_date == agreement.start_date
    assert updated.end_date == agreement.end_date
    assert updated.end_date.isoformat() == days(365)
