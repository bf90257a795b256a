"""
CRUD operations for Job model.

Implements the Repository pattern to encapsulate all database operations
for jobs. Every query is scoped to the owning user, so one user can never
read or modify another user's jobs.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from app.models.job import Job, JobStatus
from app.schemas.job import JobCreateRequest, JobUpdateRequest


def create(db: Session, owner_id: UUID, job_data: JobCreateRequest) -> Job:
    """
    Create a new job in the database.

    Args:
        db: Database session
        owner_id: ID of the user creating the job
        job_data: Validated job creation data

    Returns:
        Created Job instance with id
    """
    db_job = Job(
        company=job_data.company,
        position=job_data.position,
        status=job_data.status,
        created_by=owner_id,
    )

    db.add(db_job)
    db.commit()
    db.refresh(db_job)

    return db_job


def get_for_owner(db: Session, job_id: int, owner_id: UUID) -> Optional[Job]:
    """
    Retrieve a job by its ID if it belongs to the given user.

    Returns:
        Job instance if found, None otherwise
    """
    return db.query(Job).filter(Job.id == job_id, Job.created_by == owner_id).first()


def get_multi_for_owner(
    db: Session,
    owner_id: UUID,
    skip: int = 0,
    limit: int = 100,
    status: Optional[JobStatus] = None
) -> List[Job]:
    """
    Retrieve a user's jobs, newest first, with pagination and optional filtering.

    Args:
        db: Database session
        owner_id: ID of the owning user
        skip: Number of records to skip (offset)
        limit: Maximum number of records to return
        status: Optional status filter

    Returns:
        List of Job instances
    """
    query = db.query(Job).filter(Job.created_by == owner_id)

    # Apply status filter if provided
    if status:
        query = query.filter(Job.status == status)

    return query.order_by(Job.created_at.desc(), Job.id.desc()).offset(skip).limit(limit).all()


def update(db: Session, job: Job, job_data: JobUpdateRequest) -> Job:
    """Apply an update to a job the caller already owns."""
    job.company = job_data.company
    job.position = job_data.position
    if job_data.status is not None:
        job.status = job_data.status

    db.commit()
    db.refresh(job)

    return job


def delete(db: Session, job: Job) -> None:
    db.delete(job)
    db.commit()
