import pytest

from core.exceptions import ConflictError, ForbiddenTransition, ValidationFailed
from models.enums import KycStatus
from models.models import User
from schemas.schema import KycReject, KycSubmit
from services.kyc_service import KycService


def submission():
    return KycSubmit(document_type="PASSPORT", document_number="A1234567")


async def test_one_submission_per_user(seeded, buyer):
    service = KycService(seeded)
    kyc = await service.submit(submission(), buyer)
    assert kyc.status == KycStatus.PENDING

    with pytest.raises(ConflictError):
        await service.submit(submission(), buyer)


async def test_approval_verifies_user(seeded, buyer, admin):
    service = KycService(seeded)
    kyc = await service.submit(submission(), buyer)

    approved = await service.approve(kyc.id, admin)
    assert approved.status == KycStatus.APPROVED
    assert approved.reviewer_id == admin.id
    assert approved.reason is None

    user = await seeded.get(User, buyer.id, populate_existing=True)
    assert user.kyc_verified is True


async def test_rejected_submission_can_be_approved_later(seeded, buyer, admin):
    service = KycService(seeded)
    kyc = await service.submit(submission(), buyer)

    rejected = await service.reject(kyc.id, KycReject(reason="Blurry scan"), admin)
    assert rejected.status == KycStatus.REJECTED
    assert rejected.reason == "Blurry scan"

    with pytest.raises(ForbiddenTransition):
        await service.reject(kyc.id, KycReject(reason="Still blurry"), admin)

    approved = await service.approve(kyc.id, admin)
    assert approved.reason is None


async def test_approved_submission_is_final(seeded, buyer, admin):
    service = KycService(seeded)
    kyc = await service.submit(submission(), buyer)
    await service.approve(kyc.id, admin)

    with pytest.raises(ForbiddenTransition):
        await service.approve(kyc.id, admin)


async def test_reject_requires_reason(seeded, buyer, admin):
    service = KycService(seeded)
    kyc = await service.submit(submission(), buyer)

    with pytest.raises(ValidationFailed):
        await service.reject(kyc.id, KycReject.model_construct(reason="  "), admin)
