"""Counseling appointments."""

from datetime import datetime
from enum import StrEnum

from pydantic import Field

from haven.core.db import MongoModel
from haven.utils import now


class CounselorType(StrEnum):
    PSYCHOLOGIST = "psychologist"
    THERAPIST = "therapist"
    COUNSELOR = "counselor"


class AppointmentStatus(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Appointment(MongoModel):
    """Counseling appointment request.

    Stored in the counseling_appointments collection, indexed on (date, time).
    """

    name: str
    email: str
    phone: str
    date: datetime
    time: str
    counselor_type: CounselorType = CounselorType.PSYCHOLOGIST
    status: AppointmentStatus = AppointmentStatus.PENDING
    created_at: datetime = Field(default_factory=now)
