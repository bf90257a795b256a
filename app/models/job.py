import enum
from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class JobStatus(str, enum.Enum):
    """
    Application status of a job record.

    - PENDING: Application sent, no answer yet
    - INTERVIEW: Interview scheduled or in progress
    - DECLINED: Application turned down
    """
    PENDING = "pending"
    INTERVIEW = "interview"
    DECLINED = "declined"


class Job(Base):
    """
    Job model representing a job application tracked by a user.
    Every job belongs to exactly one user.
    """
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    company = Column(String(50), nullable=False)
    position = Column(String(100), nullable=False)
    status = Column(
        Enum(JobStatus, values_callable=lambda e: [m.value for m in e]),
        default=JobStatus.PENDING,
        nullable=False,
        index=True
    )

    # Ownership: all queries filter by created_by
    created_by = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    owner = relationship("User", back_populates="jobs")

    def __repr__(self):
        return f"<Job(id={self.id}, company='{self.company}', status={self.status.value})>"
