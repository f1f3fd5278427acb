"""Events with seat-limited registration."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from haven.core.db import MongoModel
from haven.utils import now


class EventCategory(StrEnum):
    WORKSHOP = "workshop"
    SEMINAR = "seminar"
    CONFERENCE = "conference"
    SOCIAL = "social"


class Event(MongoModel):
    """Event with a fixed number of seats.

    available_seats and registrations change together, only through a single
    conditional update, so that available_seats == seat_capacity - len(registrations)
    and available_seats never drops below zero.
    Indexed on date.
    """

    title: str
    description: str
    category: EventCategory
    date: datetime
    time: str  # e.g. "18:30"
    location: str
    image_url: str | None = None
    seat_capacity: int = Field(..., ge=0)
    available_seats: int = Field(..., ge=0)
    registrations: list[UUID] = Field(default_factory=list)  # unique user IDs
    created_at: datetime = Field(default_factory=now)


class RegistrationResult(BaseModel):
    """Confirmation of a successful registration."""

    message: str = Field("Registration successful", description="Human-readable confirmation")
    available_seats: int = Field(..., description="Seats left after this registration", ge=0)
    event: Event = Field(..., description="Event state after this registration")
