import logging
from uuid import UUID

from core.date_helper import parse_date
from core.exceptions import (
    ConflictError,
    ForbiddenError,
    ForbiddenTransition,
    NotFoundError,
    ValidationFailed,
)
from core.mapper import ORMMapper
from core.validate_enum import validate_enum
from models.enums import EntityKind, TourStatus, TourType
from models.utils import today
from policy.model_policy import ModelPolicy
from policy.transitions import TOUR_TRANSITIONS
from repos.property_repo import PropertyRepo
from repos.tour_repo import TourRepo
from repos.user_repo import UserRepo
from schemas.schema import (
    TourAssignAgent,
    TourCreate,
    TourFeedback,
    TourOut,
    TourReschedule,
    TourStatusUpdate,
)
from services.status_writer import StatusWriter

logger = logging.getLogger(__name__)


class TourService:
    def __init__(self, db):
        self.repo: TourRepo = TourRepo(db)
        self.property_repo: PropertyRepo = PropertyRepo(db)
        self.user_repo: UserRepo = UserRepo(db)
        self.status: StatusWriter = StatusWriter(db)
        self.policy: ModelPolicy = ModelPolicy()
        self.mapper: ORMMapper = ORMMapper()

    async def _get_tour(self, tour_id: UUID):
        tour = await self.repo.get_by_id(tour_id)
        if not tour:
            raise NotFoundError("Tour not found")
        return tour

    @staticmethod
    def _scheduled_date(value):
        scheduled = parse_date(value, field="scheduled_date")
        if scheduled < today():
            raise ValidationFailed("scheduled_date cannot be in the past")
        return scheduled

    async def create(self, payload: TourCreate, current_user) -> TourOut:
        prop = await self.property_repo.get_by_id(payload.property_id)
        if not prop:
            raise NotFoundError("Property not found")

        listing = await self.property_repo.get_listing(payload.listing_id)
        if not listing or listing.property_id != prop.id:
            raise NotFoundError("Listing not found")

        open_tour = await self.repo.get_open_tour(
            requested_by_id=current_user.id, property_id=prop.id
        )
        if open_tour:
            raise ConflictError(
                "You already have an active tour for this property "
                f"(status: {open_tour.status.value})"
            )

        scheduled = self._scheduled_date(payload.scheduled_date)
        tour_type = validate_enum(payload.tour_type, TourType, field="tour_type")

        tour = await self.repo.add(
            {
                "property_id": prop.id,
                "listing_id": listing.id,
                "requested_by_id": current_user.id,
                "scheduled_date": scheduled,
                "scheduled_time": payload.scheduled_time,
                "tour_type": tour_type,
                "meeting_link": payload.meeting_link,
                "meeting_password": payload.meeting_password,
                "location": payload.location,
                "notes": payload.notes,
                "status": TourStatus.PENDING,
            }
        )
        await self.status.record_creation(
            tour, kind=EntityKind.TOUR, actor_id=current_user.id
        )
        await self.status.commit(tour)
        logger.info("Tour %s scheduled by %s", tour.id, current_user.id)
        return self.mapper.one(tour, TourOut)

    async def cancel(self, tour_id: UUID, current_user) -> TourOut:
        tour = await self._get_tour(tour_id)
        if not await self.policy.is_tour_requester(tour, current_user.id):
            raise ForbiddenError("Only the requester can cancel this tour")
        if tour.status != TourStatus.PENDING:
            raise ForbiddenTransition("Only pending tours can be cancelled")

        await self.status.move(
            tour,
            kind=EntityKind.TOUR,
            table=TOUR_TRANSITIONS,
            target=TourStatus.CANCELLED,
            actor_id=current_user.id,
        )
        await self.status.commit(tour)
        return self.mapper.one(tour, TourOut)

    async def reschedule(
        self, tour_id: UUID, payload: TourReschedule, current_user
    ) -> TourOut:
        tour = await self._get_tour(tour_id)
        if not await self.policy.is_tour_requester(tour, current_user.id):
            raise ForbiddenError("Only the requester can reschedule this tour")
        if tour.status != TourStatus.PENDING:
            raise ForbiddenTransition("Only pending tours can be rescheduled")

        scheduled = self._scheduled_date(payload.scheduled_date)
        await self.repo.update_fields(
            tour.id,
            scheduled_date=scheduled,
            scheduled_time=payload.scheduled_time,
        )
        await self.repo.db_commit_and_refresh(tour)
        logger.info("Tour %s rescheduled to %s %s", tour.id, scheduled, payload.scheduled_time)
        return self.mapper.one(tour, TourOut)

    async def update_status(
        self, tour_id: UUID, payload: TourStatusUpdate, current_user
    ) -> TourOut:
        tour = await self._get_tour(tour_id)
        target = validate_enum(payload.status, TourStatus, field="status")

        await self.status.move(
            tour,
            kind=EntityKind.TOUR,
            table=TOUR_TRANSITIONS,
            target=target,
            actor_id=current_user.id,
        )
        await self.status.commit(tour)
        return self.mapper.one(tour, TourOut)

    async def submit_feedback(
        self, tour_id: UUID, payload: TourFeedback, current_user
    ) -> TourOut:
        tour = await self._get_tour(tour_id)
        if not await self.policy.is_tour_requester(tour, current_user.id):
            raise ForbiddenError("Only the requester can leave feedback on this tour")
        if tour.status != TourStatus.COMPLETED:
            raise ForbiddenTransition("Feedback is only accepted for completed tours")

        await self.repo.update_fields(tour.id, feedback=payload.feedback.strip())
        await self.repo.db_commit_and_refresh(tour)
        return self.mapper.one(tour, TourOut)

    async def assign_agent(
        self, tour_id: UUID, payload: TourAssignAgent, current_user
    ) -> TourOut:
        tour = await self._get_tour(tour_id)
        if not await self.user_repo.exists(payload.agent_id):
            raise NotFoundError("Agent not found")

        await self.repo.update_fields(tour.id, agent_id=payload.agent_id)
        await self.repo.db_commit_and_refresh(tour)
        logger.info(
            "Agent %s assigned to tour %s by %s",
            payload.agent_id,
            tour.id,
            current_user.id,
        )
        return self.mapper.one(tour, TourOut)
