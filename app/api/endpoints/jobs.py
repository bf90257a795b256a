import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import authenticate_user
from app.core.exceptions import NotFoundError
from app.core.security import AuthenticatedIdentity
from app.crud import job as job_crud
from app.models.job import JobStatus
from app.schemas.job import (
    JobCreateRequest,
    JobUpdateRequest,
    JobEnvelope,
    JobListResponse,
    JobResponse,
)

# Every route in this router sits behind the access guard
router = APIRouter(
    prefix="/jobs",
    tags=["Jobs"],
    dependencies=[Depends(authenticate_user)],
)
logger = logging.getLogger(__name__)


def _get_owned_job_or_404(db: Session, job_id: int, identity: AuthenticatedIdentity):
    job = job_crud.get_for_owner(db, job_id, identity.user_id)
    if not job:
        raise NotFoundError(f"No job with id {job_id}")
    return job


@router.get("", response_model=JobListResponse)
def list_jobs(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1),
    status: Optional[JobStatus] = None,
    identity: AuthenticatedIdentity = Depends(authenticate_user),
    db: Session = Depends(get_db)
):
    """
    List the current user's jobs, newest first.

    Args:
        skip: Number of records to skip (default: 0)
        limit: Maximum number of records to return (default: 100, max: 100)
        status: Optional filter by job status (pending, interview, declined)
    """
    if limit > 100:
        limit = 100

    jobs = job_crud.get_multi_for_owner(db, identity.user_id, skip=skip, limit=limit, status=status)
    return JobListResponse(
        jobs=[JobResponse.model_validate(job) for job in jobs],
        count=len(jobs)
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=JobEnvelope)
def create_job(
    request: JobCreateRequest,
    identity: AuthenticatedIdentity = Depends(authenticate_user),
    db: Session = Depends(get_db)
):
    """
    Create a new job owned by the current user.
    """
    new_job = job_crud.create(db, identity.user_id, request)
    logger.info(f"Created job {new_job.id} for user {identity.user_id}")

    return JobEnvelope(job=JobResponse.model_validate(new_job))


@router.get("/{job_id}", response_model=JobEnvelope)
def get_job(
    job_id: int,
    identity: AuthenticatedIdentity = Depends(authenticate_user),
    db: Session = Depends(get_db)
):
    """
    Retrieve one of the current user's jobs by ID.

    Jobs owned by other users are reported as not found.
    """
    job = _get_owned_job_or_404(db, job_id, identity)
    return JobEnvelope(job=JobResponse.model_validate(job))


@router.patch("/{job_id}", response_model=JobEnvelope)
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    identity: AuthenticatedIdentity = Depends(authenticate_user),
    db: Session = Depends(get_db)
):
    """
    Update company, position and optionally status of a job.
    """
    job = _get_owned_job_or_404(db, job_id, identity)
    job = job_crud.update(db, job, request)
    logger.info(f"Updated job {job_id} for user {identity.user_id}")

    return JobEnvelope(job=JobResponse.model_validate(job))


@router.delete("/{job_id}")
def delete_job(
    job_id: int,
    identity: AuthenticatedIdentity = Depends(authenticate_user),
    db: Session = Depends(get_db)
):
    """
    Delete one of the current user's jobs.
    """
    job = _get_owned_job_or_404(db, job_id, identity)
    job_crud.delete(db, job)

    logger.info(f"Deleted job {job_id} for user {identity.user_id}")
    return {"msg": "Job removed"}
