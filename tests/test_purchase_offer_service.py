import uuid
from decimal import Decimal

import pytest

from core.exceptions import (
    ForbiddenError,
    ForbiddenTransition,
    NotAvailableError,
    NotFoundError,
    ValidationFailed,
)
from models.enums import OfferStatus, PropertyStatus, PurchaseStatus
from models.models import Property, Purchase
from repos.property_repo import PropertyRepo
from schemas.schema import (
    OfferCreate,
    OfferStatusUpdate,
    PurchaseCreate,
    PurchaseStatusUpdate,
)
from services.offer_service import OfferService
from services.purchase_service import PurchaseService


def purchase_payload(sale, seller, **extra):
    _, listing = sale
    data = {
        "listing_id": listing.id,
        "seller_id": seller.id,
        "purchase_price": Decimal("250000.00"),
    }
    data.update(extra)
    return PurchaseCreate(**data)


async def test_completion_transfers_ownership(seeded, buyer, seller, admin, sale):
    prop, _ = sale
    service = PurchaseService(seeded)
    purchase = await service.create(purchase_payload(sale, seller), buyer)

    assert purchase.status == PurchaseStatus.PENDING
    assert purchase.purchase_date is not None

    done = await service.update_status(
        purchase.id, PurchaseStatusUpdate(status=PurchaseStatus.COMPLETED), admin
    )
    assert done.status == PurchaseStatus.COMPLETED

    stored = await seeded.get(Property, prop.id, populate_existing=True)
    assert stored.owner_id == buyer.id
    assert stored.status == PropertyStatus.SOLD


async def test_paid_then_completed(seeded, buyer, seller, admin, sale):
    prop, _ = sale
    service = PurchaseService(seeded)
    purchase = await service.create(purchase_payload(sale, seller), buyer)

    paid = await service.update_status(
        purchase.id, PurchaseStatusUpdate(status=PurchaseStatus.PAID), admin
    )
    assert paid.status == PurchaseStatus.PAID
    stored = await seeded.get(Property, prop.id, populate_existing=True)
    assert stored.owner_id == seller.id

    await service.update_status(
        purchase.id, PurchaseStatusUpdate(status=PurchaseStatus.COMPLETED), admin
    )
    stored = await seeded.get(Property, prop.id, populate_existing=True)
    assert stored.owner_id == buyer.id


async def test_completed_purchase_is_terminal(seeded, buyer, seller, admin, sale):
    service = PurchaseService(seeded)
    purchase = await service.create(purchase_payload(sale, seller), buyer)
    await service.update_status(
        purchase.id, PurchaseStatusUpdate(status=PurchaseStatus.COMPLETED), admin
    )

    with pytest.raises(ForbiddenTransition):
        await service.update_status(
            purchase.id, PurchaseStatusUpdate(status=PurchaseStatus.CANCELLED), admin
        )


async def test_failed_transfer_leaves_purchase_and_property_untouched(
    seeded, buyer, seller, admin, sale, monkeypatch
):
    prop, _ = sale
    property_id, seller_id = prop.id, seller.id
    service = PurchaseService(seeded)
    purchase = await service.create(purchase_payload(sale, seller), buyer)

    async def no_rows(self, *args):
        return 0

    monkeypatch.setattr(PropertyRepo, "transfer_ownership", no_rows)

    with pytest.raises(NotFoundError):
        await service.update_status(
            purchase.id, PurchaseStatusUpdate(status=PurchaseStatus.COMPLETED), admin
        )

    stored_purchase = await seeded.get(Purchase, purchase.id, populate_existing=True)
    assert stored_purchase.status == PurchaseStatus.PENDING
    stored = await seeded.get(Property, property_id, populate_existing=True)
    assert stored.owner_id == seller_id
    assert stored.status == PropertyStatus.PENDING


async def test_cancelled_purchase_keeps_owner(seeded, buyer, seller, admin, sale):
    prop, _ = sale
    service = PurchaseService(seeded)
    purchase = await service.create(purchase_payload(sale, seller), buyer)
    await service.update_status(
        purchase.id, PurchaseStatusUpdate(status=PurchaseStatus.CANCELLED), admin
    )

    stored = await seeded.get(Property, prop.id, populate_existing=True)
    assert stored.owner_id == seller.id
    assert stored.status == PropertyStatus.PENDING


async def test_rent_listing_cannot_be_purchased(seeded, buyer, seller, rental):
    with pytest.raises(NotAvailableError):
        await PurchaseService(seeded).create(purchase_payload(rental, seller), buyer)


async def test_seller_must_be_lister(seeded, buyer, admin, sale):
    with pytest.raises(ValidationFailed):
        await PurchaseService(seeded).create(purchase_payload(sale, admin), buyer)


async def test_seller_cannot_buy_own_listing(seeded, seller, sale):
    with pytest.raises(ValidationFailed):
        await PurchaseService(seeded).create(purchase_payload(sale, seller), seller)


async def test_offer_lifecycle(seeded, buyer, admin, sale):
    prop, _ = sale
    service = OfferService(seeded)
    offer = await service.create(
        OfferCreate(property_id=prop.id, amount=Decimal("240000"), message="Cash"),
        buyer,
    )
    assert offer.status == OfferStatus.PENDING

    withdrawn = await service.withdraw(offer.id, buyer)
    assert withdrawn.status == OfferStatus.WITHDRAWN


async def test_withdraw_accepted_offer_is_forbidden(seeded, buyer, admin, sale):
    prop, _ = sale
    service = OfferService(seeded)
    offer = await service.create(
        OfferCreate(property_id=prop.id, amount=Decimal("240000")), buyer
    )
    accepted = await service.update_status(
        offer.id, OfferStatusUpdate(status=OfferStatus.ACCEPTED), admin
    )
    assert accepted.status == OfferStatus.ACCEPTED

    with pytest.raises(ForbiddenError):
        await service.withdraw(offer.id, buyer)


async def test_only_buyer_withdraws(seeded, buyer, admin, sale):
    prop, _ = sale
    service = OfferService(seeded)
    offer = await service.create(
        OfferCreate(property_id=prop.id, amount=Decimal("1")), buyer
    )

    with pytest.raises(ForbiddenError):
        await service.withdraw(offer.id, admin)


async def test_admin_cannot_withdraw_via_status(
    seeded, buyer, admin, sale, strict_transitions
):
    prop, _ = sale
    service = OfferService(seeded)
    offer = await service.create(
        OfferCreate(property_id=prop.id, amount=Decimal("1")), buyer
    )

    with pytest.raises(ForbiddenTransition):
        await service.update_status(
            offer.id, OfferStatusUpdate(status=OfferStatus.WITHDRAWN), admin
        )


async def test_offer_on_unknown_property(seeded, buyer):
    with pytest.raises(NotFoundError):
        await OfferService(seeded).create(
            OfferCreate(property_id=uuid.uuid4(), amount=Decimal("10")), buyer
        )


async def test_admin_cannot_withdraw_even_when_relaxed(
    seeded, buyer, admin, sale, relaxed_transitions
):
    prop, _ = sale
    service = OfferService(seeded)
    offer = await service.create(
        OfferCreate(property_id=prop.id, amount=Decimal("1")), buyer
    )

    with pytest.raises(ForbiddenTransition):
        await service.update_status(
            offer.id, OfferStatusUpdate(status=OfferStatus.WITHDRAWN), admin
        )

    withdrawn = await service.withdraw(offer.id, buyer)
    assert withdrawn.status == OfferStatus.WITHDRAWN
