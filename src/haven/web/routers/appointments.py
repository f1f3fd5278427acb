"""Counseling appointment endpoints."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from haven.core.modules.appointment.models import Appointment, CounselorType
from haven.core.pagination import PaginationResult
from haven.web.deps import AppDep
from haven.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["appointments"])


class CreateAppointmentRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    date: datetime
    time: str = Field(..., min_length=1, description="Preferred time, e.g. 14:00")
    counselor_type: CounselorType | None = Field(
        None, alias="counselorType", description="Defaults to psychologist"
    )

    model_config = {"populate_by_name": True}


@router.get(
    "/appointments",
    summary="List appointments",
    description="Get paginated appointments in chronological order.",
    operation_id="listAppointments",
    responses={200: {"description": "Paginated list of appointments"}},
)
async def list_appointments(
    app: AppDep,
    limit: Annotated[int, Query(ge=1, le=200, description="Maximum items to return")] = 50,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
) -> PaginationResult[Appointment]:
    return await app.get_appointments(limit, offset)


@router.post(
    "/appointments",
    summary="Schedule appointment",
    operation_id="createAppointment",
    status_code=201,
    responses={
        201: {"description": "Appointment scheduled"},
        400: {"model": ErrorResponse, "description": "All fields are required"},
    },
)
async def create_appointment(request: CreateAppointmentRequest, app: AppDep) -> Appointment:
    return await app.create_appointment(
        request.name, request.email, request.phone, request.date, request.time, request.counselor_type
    )
