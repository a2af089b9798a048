"""Single entry point that routes ``(entity, action)`` to its state machine.

Each registered action declares the permissions it needs and the pydantic
schema its payload must satisfy; the evaluator runs before the handler.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from core.exceptions import ValidationFailed
from core.validate_enum import validate_enum
from models.enums import AccessLevel, EntityKind
from policy.permission_policy import PermissionRequirement
from schemas.schema import (
    BookingResponse,
    KycReject,
    OfferStatusUpdate,
    PurchaseStatusUpdate,
    RentalAgreementUpdate,
    RentalStatusUpdate,
    TourAssignAgent,
    TourFeedback,
    TourReschedule,
    TourStatusUpdate,
)
from services.authorization_service import AuthorizationService
from services.booking_service import BookingService
from services.kyc_service import KycService
from services.offer_service import OfferService
from services.purchase_service import PurchaseService
from services.rental_agreement_service import RentalAgreementService
from services.tour_service import TourService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransitionAction:
    service: type
    method: str
    required: Tuple[PermissionRequirement, ...]
    schema: Optional[Type[BaseModel]] = None


def _needs(name: str, access: AccessLevel) -> Tuple[PermissionRequirement, ...]:
    return (PermissionRequirement.of(name, access),)


ACTIONS: Dict[Tuple[EntityKind, str], TransitionAction] = {
    (EntityKind.BOOKING, "approve"): TransitionAction(
        BookingService, "approve", _needs("APPROVE", AccessLevel.ADMIN), BookingResponse
    ),
    (EntityKind.BOOKING, "reject"): TransitionAction(
        BookingService, "reject", _needs("REJECT", AccessLevel.ADMIN), BookingResponse
    ),
    (EntityKind.BOOKING, "cancel"): TransitionAction(
        BookingService, "cancel", _needs("WRITE", AccessLevel.ALL)
    ),
    (EntityKind.TOUR, "cancel"): TransitionAction(
        TourService, "cancel", _needs("WRITE", AccessLevel.ALL)
    ),
    (EntityKind.TOUR, "reschedule"): TransitionAction(
        TourService, "reschedule", _needs("WRITE", AccessLevel.ALL), TourReschedule
    ),
    (EntityKind.TOUR, "submit_feedback"): TransitionAction(
        TourService, "submit_feedback", _needs("WRITE", AccessLevel.ALL), TourFeedback
    ),
    (EntityKind.TOUR, "update_status"): TransitionAction(
        TourService, "update_status", _needs("UPDATE", AccessLevel.ADMIN), TourStatusUpdate
    ),
    (EntityKind.TOUR, "assign_agent"): TransitionAction(
        TourService, "assign_agent", _needs("MANAGE", AccessLevel.ADMIN), TourAssignAgent
    ),
    (EntityKind.RENTAL_AGREEMENT, "accept_terms"): TransitionAction(
        RentalAgreementService, "accept_terms", _needs("WRITE", AccessLevel.ALL)
    ),
    (EntityKind.RENTAL_AGREEMENT, "update_status"): TransitionAction(
        RentalAgreementService,
        "update_status",
        _needs("UPDATE", AccessLevel.ADMIN),
        RentalStatusUpdate,
    ),
    (EntityKind.RENTAL_AGREEMENT, "update"): TransitionAction(
        RentalAgreementService,
        "update_fields",
        _needs("UPDATE", AccessLevel.ADMIN),
        RentalAgreementUpdate,
    ),
    (EntityKind.PURCHASE, "update_status"): TransitionAction(
        PurchaseService,
        "update_status",
        _needs("UPDATE", AccessLevel.ADMIN),
        PurchaseStatusUpdate,
    ),
    (EntityKind.OFFER, "withdraw"): TransitionAction(
        OfferService, "withdraw", _needs("WRITE", AccessLevel.ALL)
    ),
    (EntityKind.OFFER, "update_status"): TransitionAction(
        OfferService, "update_status", _needs("UPDATE", AccessLevel.ADMIN), OfferStatusUpdate
    ),
    (EntityKind.KYC, "approve"): TransitionAction(
        KycService, "approve", _needs("APPROVE", AccessLevel.ADMIN)
    ),
    (EntityKind.KYC, "reject"): TransitionAction(
        KycService, "reject", _needs("REJECT", AccessLevel.ADMIN), KycReject
    ),
}


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


class TransitionService:
    def __init__(self, db):
        self.db = db
        self.authorization: AuthorizationService = AuthorizationService(db)

    @staticmethod
    def resolve(entity, action: str) -> TransitionAction:
        kind = validate_enum(entity, EntityKind, field="entity")
        registered = ACTIONS.get((kind, action))
        if registered is None:
            raise ValidationFailed(f"Unknown action '{action}' for {kind.value}")
        return registered

    async def apply_transition(
        self, entity, entity_id, action: str, actor, payload: dict | None = None
    ):
        registered = self.resolve(entity, action)

        try:
            target_id = (
                entity_id
                if isinstance(entity_id, uuid.UUID)
                else uuid.UUID(str(entity_id))
            )
        except ValueError:
            raise ValidationFailed(f"Invalid id: {entity_id}")

        await self.authorization.authorize(actor.id, registered.required)

        handler = getattr(registered.service(self.db), registered.method)
        if registered.schema is None:
            logger.info("Applying %s.%s on %s", registered.service.__name__, action, target_id)
            return await handler(target_id, actor)

        try:
            body = registered.schema.model_validate(payload or {})
        except ValidationError as exc:
            raise ValidationFailed(_validation_message(exc))

        logger.info("Applying %s.%s on %s", registered.service.__name__, action, target_id)
        return await handler(target_id, body, actor)
