from datetime import datetime
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from haven.core.core import Service
from haven.core.db import store_errors
from haven.core.modules.appointment.models import Appointment, CounselorType
from haven.core.modules.user.validators import normalize_email
from haven.core.pagination import PaginationResult, paginate
from haven.errors import MissingFieldError

logger = structlog.get_logger(__name__)


class AppointmentService(Service):
    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("counseling_appointments")

    async def on_start(self) -> None:
        await self._collection.create_index([("date", 1), ("time", 1)])

    async def create_appointment(
        self,
        name: str,
        email: str,
        phone: str,
        date: datetime,
        time: str,
        counselor_type: CounselorType | None = None,
    ) -> Appointment:
        """Schedule a pending appointment."""
        if not all(value.strip() for value in (name, email, phone, time)):
            raise MissingFieldError("All fields are required")
        appointment = Appointment(
            name=name,
            email=normalize_email(email),
            phone=phone,
            date=date,
            time=time,
            counselor_type=counselor_type or CounselorType.PSYCHOLOGIST,
        )
        with store_errors():
            await self._collection.insert_one(appointment.to_mongo())
        logger.info("appointment_created", appointment_id=str(appointment.id), counselor_type=appointment.counselor_type)
        return appointment

    async def list_appointments(self, limit: int = 50, offset: int = 0) -> PaginationResult[Appointment]:
        """Get paginated appointments in chronological order."""
        with store_errors():
            return await paginate(self._collection, Appointment, {}, [("date", 1), ("time", 1)], limit, offset)
