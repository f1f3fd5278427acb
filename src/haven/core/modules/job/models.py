from datetime import datetime
from enum import StrEnum

from pydantic import Field

from haven.core.db import MongoModel
from haven.utils import now


class JobType(StrEnum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    INTERNSHIP = "internship"


class Job(MongoModel):
    """Job listing."""

    title: str
    company: str
    location: str
    description: str
    type: JobType = JobType.FULL_TIME
    created_at: datetime = Field(default_factory=now)
