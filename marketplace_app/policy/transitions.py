import logging
from enum import Enum
from typing import Dict, FrozenSet, Generic, Iterable, Mapping, TypeVar

from core.exceptions import ForbiddenTransition
from core.settings import settings
from models.enums import (
    BookingStatus,
    KycStatus,
    OfferStatus,
    PurchaseStatus,
    RentalStatus,
    TourStatus,
)

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Enum)


class TransitionTable(Generic[S]):
    def __init__(
        self,
        entity: str,
        edges: Mapping[S, FrozenSet[S] | set],
        *,
        relaxable: bool = False,
        forbidden_targets: Iterable[S] = (),
    ):
        self.entity = entity
        self.edges: Dict[S, FrozenSet[S]] = {
            src: frozenset(dst) for src, dst in edges.items()
        }
        # Relaxable tables fall back to overwrite-anything when
        # STRICT_STATUS_TRANSITIONS is off.
        self.relaxable = relaxable
        # Never reachable through this table, relaxed or not.
        self.forbidden_targets: FrozenSet[S] = frozenset(forbidden_targets)

    def allowed_from(self, current: S) -> FrozenSet[S]:
        return self.edges.get(current, frozenset())

    def is_terminal(self, status: S) -> bool:
        return not self.allowed_from(status)

    def check(self, current: S, target: S) -> None:
        if target in self.forbidden_targets:
            raise ForbiddenTransition(
                f"Cannot move {self.entity} to {target.value} through this action"
            )

        if target in self.allowed_from(current):
            return

        if self.relaxable and not settings.STRICT_STATUS_TRANSITIONS:
            logger.warning(
                "Unguarded %s transition %s -> %s applied",
                self.entity,
                current.value,
                target.value,
            )
            return

        raise ForbiddenTransition(
            f"Cannot move {self.entity} from {current.value} to {target.value}"
        )


BOOKING_TRANSITIONS = TransitionTable(
    "booking",
    {
        BookingStatus.PENDING: {
            BookingStatus.APPROVED,
            BookingStatus.REJECTED,
            BookingStatus.CANCELLED,
        },
    },
)

TOUR_TRANSITIONS = TransitionTable(
    "tour",
    {
        TourStatus.PENDING: {
            TourStatus.CONFIRMED,
            TourStatus.REJECTED,
            TourStatus.CANCELLED,
        },
        TourStatus.CONFIRMED: {
            TourStatus.COMPLETED,
            TourStatus.NO_SHOW,
            TourStatus.CANCELLED,
        },
    },
    relaxable=True,
)

RENTAL_TRANSITIONS = TransitionTable(
    "rental agreement",
    {
        RentalStatus.PENDING: {RentalStatus.ACTIVE, RentalStatus.CANCELLED},
        RentalStatus.ACTIVE: {RentalStatus.TERMINATED, RentalStatus.EXPIRED},
    },
    relaxable=True,
)

PURCHASE_TRANSITIONS = TransitionTable(
    "purchase",
    {
        PurchaseStatus.PENDING: {
            PurchaseStatus.PAID,
            PurchaseStatus.COMPLETED,
            PurchaseStatus.CANCELLED,
        },
        PurchaseStatus.PAID: {PurchaseStatus.COMPLETED, PurchaseStatus.CANCELLED},
    },
)

# WITHDRAWN is reachable only through the buyer's withdraw action.
OFFER_ADMIN_TRANSITIONS = TransitionTable(
    "offer",
    {OfferStatus.PENDING: {OfferStatus.ACCEPTED, OfferStatus.REJECTED}},
    relaxable=True,
    forbidden_targets={OfferStatus.WITHDRAWN},
)

KYC_TRANSITIONS = TransitionTable(
    "kyc submission",
    {
        KycStatus.PENDING: {KycStatus.APPROVED, KycStatus.REJECTED},
        KycStatus.REJECTED: {KycStatus.APPROVED},
    },
)
