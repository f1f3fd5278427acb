"""Build information and the option lists clients need to render forms."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from haven.core.modules.appointment.models import AppointmentStatus, CounselorType
from haven.core.modules.event.models import EventCategory
from haven.core.modules.job.models import JobType
from haven.web.deps import AppDep, CurrentUserDep
from haven.web.openapi import ErrorResponse

router = APIRouter(tags=["metadata"])


class VersionInfo(BaseModel):
    version: str = Field(..., description="Installed package version")
    git_commit_hash: str
    git_commit_date: str
    build_time: str


class Choices(BaseModel):
    """Allowed values of every enumerated request field."""

    event_categories: list[EventCategory]
    job_types: list[JobType]
    counselor_types: list[CounselorType]
    appointment_statuses: list[AppointmentStatus]


@router.get(
    "/metadata/version",
    summary="Get version information",
    description="Returns the package version and the build's git commit and build time.",
    operation_id="getVersion",
    responses={
        200: {"description": "Version and build information"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_version(app: AppDep, _: CurrentUserDep) -> VersionInfo:
    return VersionInfo.model_validate(app.get_version())


@router.get(
    "/metadata/choices",
    summary="Get enumerated field values",
    description="Event categories, job types, counselor types and appointment statuses, in display order. Public.",
    operation_id="getChoices",
    responses={200: {"description": "Allowed values per field"}},
)
async def get_choices() -> Choices:
    return Choices(
        event_categories=list(EventCategory),
        job_types=list(JobType),
        counselor_types=list(CounselorType),
        appointment_statuses=list(AppointmentStatus),
    )
