"""Event and registration endpoints."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Query
from pydantic import BaseModel, Field

from haven.core.modules.event.models import Event, EventCategory, RegistrationResult
from haven.core.pagination import PaginationResult
from haven.web.deps import AppDep, CurrentUserDep
from haven.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["events"])


class CreateEventRequest(BaseModel):
    """Request to create an event."""

    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    category: EventCategory
    date: datetime
    time: str = Field(..., min_length=1, description="Start time, e.g. 18:30")
    location: str = Field(..., min_length=1)
    image_url: str | None = None
    seat_capacity: int = Field(..., ge=0, description="Number of seats; 0 closes registration")


class RegisterRequest(BaseModel):
    """Registration request. identity_id defaults to the authenticated user."""

    identity_id: str | None = Field(None, description="User ID to register; must be the authenticated user")


@router.get(
    "/events",
    summary="List events",
    description="Get paginated events ordered by date. Public.",
    operation_id="listEvents",
    responses={200: {"description": "Paginated list of events"}},
)
async def list_events(
    app: AppDep,
    limit: Annotated[int, Query(ge=1, le=200, description="Maximum items to return")] = 50,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
) -> PaginationResult[Event]:
    return await app.get_events(limit, offset)


@router.get(
    "/events/{event_id}",
    summary="Get event",
    operation_id="getEvent",
    responses={
        200: {"description": "Event details"},
        404: {"model": ErrorResponse, "description": "Event not found"},
    },
)
async def get_event(event_id: UUID, app: AppDep) -> Event:
    return await app.get_event(event_id)


@router.post(
    "/events",
    summary="Create event",
    description="Create an event with all seats available. Admin only.",
    operation_id="createEvent",
    status_code=201,
    responses={
        201: {"description": "Event created"},
        400: {"model": ErrorResponse, "description": "Invalid event data"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
    },
)
async def create_event(request: CreateEventRequest, app: AppDep, user_id: CurrentUserDep) -> Event:
    return await app.create_event(
        user_id,
        request.title,
        request.description,
        request.category,
        request.date,
        request.time,
        request.location,
        request.seat_capacity,
        request.image_url,
    )


@router.post(
    "/events/{event_id}/register",
    summary="Register for event",
    description=(
        "Take one seat at the event. The seat check and the seat update are a single atomic store "
        "operation, so an event is never oversold. Each user can hold at most one seat per event."
    ),
    operation_id="registerForEvent",
    status_code=201,
    responses={
        201: {"description": "Registration successful"},
        400: {"model": ErrorResponse, "description": "No available seats (sold_out) or invalid identity (bad_identity)"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "identity_id names another user"},
        404: {"model": ErrorResponse, "description": "Event not found"},
        409: {"model": ErrorResponse, "description": "Already registered (already_registered)"},
    },
)
async def register_for_event(
    event_id: UUID,
    app: AppDep,
    user_id: CurrentUserDep,
    request: Annotated[RegisterRequest | None, Body()] = None,
) -> RegistrationResult:
    identity_id = request.identity_id if request else None
    return await app.register_for_event(user_id, event_id, identity_id)


@router.delete(
    "/events/{event_id}/register",
    summary="Cancel registration",
    description="Release the current user's seat at the event.",
    operation_id="cancelRegistration",
    status_code=204,
    responses={
        204: {"description": "Registration cancelled"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Event not found or not registered"},
    },
)
async def cancel_registration(event_id: UUID, app: AppDep, user_id: CurrentUserDep) -> None:
    await app.cancel_registration(user_id, event_id)
