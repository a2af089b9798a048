from enum import Enum


class AccessLevel(str, Enum):
    ALL = "ALL"
    ADMIN = "ADMIN"
    USER = "USER"
    SELLER = "SELLER"
    BUYER = "BUYER"
    SUPPORT_STAFF = "SUPPORT_STAFF"


class ListingType(str, Enum):
    FOR_RENT = "FOR_RENT"
    FOR_SALE = "FOR_SALE"


class PropertyStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    RENTED = "RENTED"
    SOLD = "SOLD"
    ARCHIVED = "ARCHIVED"


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class TourStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"
    REJECTED = "REJECTED"


class TourType(str, Enum):
    IN_PERSON = "IN_PERSON"
    VIRTUAL = "VIRTUAL"


class RentalStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    TERMINATED = "TERMINATED"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class PurchaseStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class OfferStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"


class KycStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class EntityKind(str, Enum):
    BOOKING = "booking"
    TOUR = "tour"
    RENTAL_AGREEMENT = "rental_agreement"
    PURCHASE = "purchase"
    OFFER = "offer"
    KYC = "kyc"


# Statuses that no longer hold a date window or a tour slot.
INACTIVE_BOOKING_STATUSES = {BookingStatus.CANCELLED, BookingStatus.REJECTED}
CLOSED_TOUR_STATUSES = {
    TourStatus.CANCELLED,
    TourStatus.COMPLETED,
    TourStatus.NO_SHOW,
    TourStatus.REJECTED,
}

APP_ROLES = ["ADMIN", "USER", "SUPPORT_STAFF", "SELLER", "BUYER"]

PERMISSIONS = [
    ("READ", AccessLevel.ALL),
    ("WRITE", AccessLevel.ALL),
    ("DELETE", AccessLevel.ADMIN),
    ("UPDATE", AccessLevel.ADMIN),
    ("VIEW", AccessLevel.ALL),
    ("CREATE", AccessLevel.ADMIN),
    ("MANAGE", AccessLevel.ADMIN),
    ("APPROVE", AccessLevel.ADMIN),
    ("REJECT", AccessLevel.ADMIN),
    ("UPDATE_PROPERTY", AccessLevel.SELLER),
    ("BOOK_PROPERTY", AccessLevel.BUYER),
]
