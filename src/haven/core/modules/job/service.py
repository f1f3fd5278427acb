from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from haven.core.core import Service
from haven.core.db import store_errors
from haven.core.modules.job.models import Job, JobType
from haven.core.pagination import PaginationResult, paginate
from haven.errors import MissingFieldError

logger = structlog.get_logger(__name__)


class JobService(Service):
    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("jobs")

    async def on_start(self) -> None:
        await self._collection.create_index([("created_at", -1)])

    async def create_job(
        self, title: str, company: str, location: str, description: str, type: JobType | None = None
    ) -> Job:
        if not all(value.strip() for value in (title, company, location, description)):
            raise MissingFieldError("All fields except type are required")
        job = Job(title=title, company=company, location=location, description=description, type=type or JobType.FULL_TIME)
        with store_errors():
            await self._collection.insert_one(job.to_mongo())
        logger.info("job_created", job_id=str(job.id))
        return job

    async def list_jobs(self, limit: int = 50, offset: int = 0) -> PaginationResult[Job]:
        """Get paginated jobs, newest first."""
        with store_errors():
            return await paginate(self._collection, Job, {}, [("created_at", -1)], limit, offset)
