from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from haven.core.modules.job.models import Job, JobType
from haven.core.pagination import PaginationResult
from haven.web.deps import AppDep
from haven.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["jobs"])


class CreateJobRequest(BaseModel):
    title: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    type: JobType | None = Field(None, description="Defaults to full-time")


@router.get(
    "/jobs",
    summary="List jobs",
    description="Get paginated job listings, newest first.",
    operation_id="listJobs",
    responses={200: {"description": "Paginated list of jobs"}},
)
async def list_jobs(
    app: AppDep,
    limit: Annotated[int, Query(ge=1, le=200, description="Maximum items to return")] = 50,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
) -> PaginationResult[Job]:
    return await app.get_jobs(limit, offset)


@router.post(
    "/jobs",
    summary="Add job",
    operation_id="createJob",
    status_code=201,
    responses={
        201: {"description": "Job added"},
        400: {"model": ErrorResponse, "description": "All fields except type are required"},
    },
)
async def create_job(request: CreateJobRequest, app: AppDep) -> Job:
    return await app.create_job(request.title, request.company, request.location, request.description, request.type)
