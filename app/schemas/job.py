from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from typing import List, Optional
from datetime import datetime
from uuid import UUID

from app.core.sanitize import clean_text
from app.models.job import JobStatus

MAX_LENGTHS = {"company": 50, "position": 100}


class JobCreateRequest(BaseModel):
    """Schema for creating a new job"""
    company: str = Field(..., min_length=1, max_length=50)
    position: str = Field(..., min_length=1, max_length=100)
    status: JobStatus = JobStatus.PENDING

    @field_validator("company", "position")
    @classmethod
    def sanitize(cls, v: str, info: ValidationInfo) -> str:
        if not v.strip():
            raise ValueError("Company or Position fields cannot be empty")
        return clean_text(v, info.field_name.capitalize(), max_length=MAX_LENGTHS[info.field_name])


class JobUpdateRequest(JobCreateRequest):
    """
    Schema for updating a job.

    Company and position must always be sent; status keeps its current
    value when omitted.
    """
    status: Optional[JobStatus] = None


class JobResponse(BaseModel):
    """Schema for job response"""
    id: int
    company: str
    position: str
    status: JobStatus
    created_by: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class JobEnvelope(BaseModel):
    job: JobResponse


class JobListResponse(BaseModel):
    jobs: List[JobResponse]
    count: int
