"""Event catalogue and the seat allocator.

A registration is one ``find_one_and_update`` whose filter demands a free seat
and the absence of the registrant, and whose update takes the seat and records
the registrant. MongoDB applies single-document updates atomically, so two
requests racing for the last seat cannot both match; there is no in-process
lock and nothing here assumes one process.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from haven import utils
from haven.core.core import Service
from haven.core.db import store_errors
from haven.core.modules.event.models import Event, EventCategory, RegistrationResult
from haven.core.pagination import PaginationResult, paginate
from haven.errors import (
    AlreadyRegisteredError,
    BadIdentityError,
    MissingFieldError,
    NotFoundError,
    SoldOutError,
    StoreUnavailableError,
    UserError,
    ValidationError,
)

logger = structlog.get_logger(__name__)


def build_register_filter(event_id: UUID, user_id: UUID) -> dict[str, Any]:
    """Match the event only while it has a free seat and user_id holds none of them."""
    return {
        "_id": event_id,
        "available_seats": {"$gt": 0},
        "registrations": {"$ne": user_id},
    }


def build_register_update(user_id: UUID) -> dict[str, Any]:
    return {"$inc": {"available_seats": -1}, "$push": {"registrations": user_id}}


def build_cancel_filter(event_id: UUID, user_id: UUID) -> dict[str, Any]:
    return {"_id": event_id, "registrations": user_id}


def build_cancel_update(user_id: UUID) -> dict[str, Any]:
    return {"$inc": {"available_seats": 1}, "$pull": {"registrations": user_id}}


def classify_rejection(event: dict[str, Any] | None, user_id: UUID) -> UserError:
    """Explain why the conditional registration update matched nothing.

    Reads only; the decision was already made by the store. An existing
    registration wins over a full event.
    """
    if event is None:
        return NotFoundError("Event not found")
    if user_id in event.get("registrations", []):
        return AlreadyRegisteredError()
    return SoldOutError()


class EventService(Service):
    """Events and concurrency-safe seat allocation."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("events")

    async def on_start(self) -> None:
        await self._collection.create_index([("date", 1)])

    async def create_event(
        self,
        title: str,
        description: str,
        category: EventCategory,
        date: datetime,
        time: str,
        location: str,
        seat_capacity: int,
        image_url: str | None = None,
    ) -> Event:
        """Create an event with every seat available."""
        for name, value in (("title", title), ("description", description), ("time", time), ("location", location)):
            if not value.strip():
                raise MissingFieldError(f"Field '{name}' is required")
        if seat_capacity < 0:
            raise ValidationError("Seat capacity cannot be negative")

        event = Event(
            title=title,
            description=description,
            category=category,
            date=date,
            time=time,
            location=location,
            image_url=image_url,
            seat_capacity=seat_capacity,
            available_seats=seat_capacity,
        )
        with store_errors():
            await self._collection.insert_one(event.to_mongo())
        logger.info("event_created", event_id=str(event.id), seat_capacity=seat_capacity)
        return event

    async def get_event(self, event_id: UUID) -> Event:
        with store_errors():
            doc = await self._collection.find_one({"_id": event_id})
        if doc is None:
            raise NotFoundError("Event not found")
        return Event.model_validate(doc)

    async def list_events(self, limit: int = 50, offset: int = 0) -> PaginationResult[Event]:
        """Get paginated events ordered by date."""
        with store_errors():
            return await paginate(self._collection, Event, {}, [("date", 1)], limit, offset)

    async def _resolve_identity(self, event_id: UUID, identity: str | UUID) -> UUID:
        user_id = utils.parse_uuid(identity)
        if user_id is None or not await self.core.services.user.has_user(user_id):
            logger.info("registration_rejected", event_id=str(event_id), identity_id=str(identity), kind="bad_identity")
            raise BadIdentityError(f"Invalid identity '{identity}'")
        return user_id

    async def register(self, event_id: UUID, identity: str | UUID) -> RegistrationResult:
        """Take one seat at the event for identity.

        Raises:
            BadIdentityError: identity is malformed or names no user
            NotFoundError: event does not exist
            AlreadyRegisteredError: identity already holds a seat
            SoldOutError: no seats left
            StoreUnavailableError: the store could not be reached in time
        """
        log = logger.bind(event_id=str(event_id), identity_id=str(identity))

        current = None
        try:
            user_id = await self._resolve_identity(event_id, identity)
            with store_errors():
                doc = await self._collection.find_one_and_update(
                    build_register_filter(event_id, user_id),
                    build_register_update(user_id),
                    return_document=ReturnDocument.AFTER,
                )
                if doc is None:
                    # Read-only diagnosis; never retried as a write
                    current = await self._collection.find_one(
                        {"_id": event_id}, {"available_seats": 1, "registrations": 1}
                    )
        except StoreUnavailableError:
            log.warning("registration_failed", kind="store_unavailable")
            raise

        if doc is None:
            error = classify_rejection(current, user_id)
            log.info("registration_rejected", kind=error.error_type)
            raise error

        event = Event.model_validate(doc)
        log.info("registration_succeeded", available_seats=event.available_seats)
        return RegistrationResult(available_seats=event.available_seats, event=event)

    async def cancel_registration(self, event_id: UUID, user_id: UUID) -> Event:
        """Release the seat held by user_id; NotFoundError if there is none."""
        log = logger.bind(event_id=str(event_id), identity_id=str(user_id))
        try:
            with store_errors():
                doc = await self._collection.find_one_and_update(
                    build_cancel_filter(event_id, user_id),
                    build_cancel_update(user_id),
                    return_document=ReturnDocument.AFTER,
                )
        except StoreUnavailableError:
            log.warning("cancellation_failed", kind="store_unavailable")
            raise

        if doc is None:
            log.info("cancellation_rejected", kind="not_found")
            raise NotFoundError("Registration not found")

        event = Event.model_validate(doc)
        log.info("registration_cancelled", available_seats=event.available_seats)
        return event
