from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from models.enums import (
    AccessLevel,
    BookingStatus,
    KycStatus,
    OfferStatus,
    PurchaseStatus,
    RentalStatus,
    TourStatus,
    TourType,
)


class PermissionOut(BaseModel):
    id: uuid.UUID
    name: str
    access: AccessLevel
    model_config = {"from_attributes": True}


class RolePermissionOut(BaseModel):
    permission: PermissionOut
    model_config = {"from_attributes": True}


class RoleOut(BaseModel):
    id: uuid.UUID
    name: str
    is_super_admin: bool
    permissions: List[RolePermissionOut] = []
    model_config = {"from_attributes": True}


class BookingCreate(BaseModel):
    property_id: uuid.UUID
    listing_id: uuid.UUID
    check_in_date: str
    checkout_date: str
    request_message: Optional[str] = None


class BookingResponse(BaseModel):
    response_message: str = Field(..., min_length=1)

    @field_validator("response_message", mode="before")
    @classmethod
    def strip_message(cls, value: str):
        return value.strip() if isinstance(value, str) else value


class BookingOut(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    listing_id: uuid.UUID
    user_id: uuid.UUID
    check_in_date: date
    checkout_date: date
    status: BookingStatus
    request_message: Optional[str] = None
    response_message: Optional[str] = None
    model_config = {"from_attributes": True}


class TourCreate(BaseModel):
    property_id: uuid.UUID
    listing_id: uuid.UUID
    scheduled_date: str
    scheduled_time: str = Field(..., pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    tour_type: TourType
    meeting_link: Optional[str] = None
    meeting_password: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None


class TourReschedule(BaseModel):
    scheduled_date: str
    scheduled_time: str = Field(..., pattern=r"^([01]\d|2[0-3]):[0-5]\d$")


class TourFeedback(BaseModel):
    feedback: str = Field(..., min_length=1)


class TourAssignAgent(BaseModel):
    agent_id: uuid.UUID


class TourStatusUpdate(BaseModel):
    status: TourStatus


class TourOut(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    listing_id: uuid.UUID
    requested_by_id: uuid.UUID
    agent_id: Optional[uuid.UUID] = None
    scheduled_date: date
    scheduled_time: str
    tour_type: TourType
    feedback: Optional[str] = None
    status: TourStatus
    model_config = {"from_attributes": True}


class RentalAgreementCreate(BaseModel):
    property_id: uuid.UUID
    booking_id: uuid.UUID
    amount: Decimal = Field(..., ge=0)
    deposit_amount: Decimal = Field(..., ge=0)
    start_date: str
    end_date: str


class RentalAgreementUpdate(BaseModel):
    amount: Optional[Decimal] = Field(None, ge=0)
    deposit_amount: Optional[Decimal] = Field(None, ge=0)
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class RentalStatusUpdate(BaseModel):
    status: RentalStatus


class RentalAgreementOut(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    listing_id: uuid.UUID
    tenant_id: uuid.UUID
    landlord_id: uuid.UUID
    booking_id: uuid.UUID
    amount: Decimal
    deposit_amount: Decimal
    start_date: date
    end_date: date
    terms_accepted: bool
    status: RentalStatus
    model_config = {"from_attributes": True}


class PurchaseCreate(BaseModel):
    listing_id: uuid.UUID
    seller_id: uuid.UUID
    purchase_price: Decimal = Field(..., gt=0)
    purchase_date: Optional[datetime] = None
    closing_date: Optional[date] = None
    notes: Optional[str] = None


class PurchaseStatusUpdate(BaseModel):
    status: PurchaseStatus


class PurchaseOut(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    listing_id: uuid.UUID
    buyer_id: uuid.UUID
    seller_id: uuid.UUID
    purchase_price: Decimal
    purchase_date: datetime
    closing_date: Optional[date] = None
    status: PurchaseStatus
    model_config = {"from_attributes": True}


class OfferCreate(BaseModel):
    property_id: uuid.UUID
    amount: Decimal = Field(..., ge=0)
    message: Optional[str] = None


class OfferStatusUpdate(BaseModel):
    status: OfferStatus


class OfferOut(BaseModel):
    id: uuid.UUID
    buyer_id: uuid.UUID
    property_id: uuid.UUID
    amount: Decimal
    message: Optional[str] = None
    status: OfferStatus
    model_config = {"from_attributes": True}


class KycSubmit(BaseModel):
    document_type: str = Field(..., min_length=2)
    document_number: str = Field(..., min_length=3)


class KycReject(BaseModel):
    reason: str = Field(..., min_length=1)


class KycOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    document_type: str
    status: KycStatus
    reviewer_id: Optional[uuid.UUID] = None
    reason: Optional[str] = None
    model_config = {"from_attributes": True}