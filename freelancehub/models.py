from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# Application statuses: pending → qualified → assignment-sent → interview-scheduled → accepted/rejected
STATUS_PENDING = "pending"
STATUS_AUTO_REJECTED = "auto-rejected"  # Skill mismatch at screening
STATUS_UNDER_REVIEW = "under-review"
STATUS_QUALIFIED = "qualified"
STATUS_IN_REVIEW = "in-review"
STATUS_ASSIGNMENT_SENT = "assignment-sent"
STATUS_ASSIGNMENT_SUBMITTED = "assignment-submitted"
STATUS_INTERVIEW_SCHEDULED = "interview-scheduled"
STATUS_INTERVIEW_COMPLETED = "interview-completed"
STATUS_ACCEPTED = "accepted"
STATUS_REJECTED = "rejected"
STATUS_WITHDRAWN = "withdrawn"

APPLICATION_STATUSES = [
    STATUS_PENDING,
    STATUS_AUTO_REJECTED,
    STATUS_UNDER_REVIEW,
    STATUS_QUALIFIED,
    STATUS_IN_REVIEW,
    STATUS_ASSIGNMENT_SENT,
    STATUS_ASSIGNMENT_SUBMITTED,
    STATUS_INTERVIEW_SCHEDULED,
    STATUS_INTERVIEW_COMPLETED,
    STATUS_ACCEPTED,
    STATUS_REJECTED,
    STATUS_WITHDRAWN,
]

TIMELINE_STAGES = [
    "application_submitted",
    "auto_screened",
    "manual_review_started",
    "assignment_sent",
    "assignment_submitted",
    "assignment_reviewed",
    "interview_scheduled",
    "interview_completed",
    "final_decision",
]


class Freelancer(Base):
    __tablename__ = "freelancers"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    applications = relationship("Application", back_populates="freelancer")


class Company(Base):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    organization = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    jobs = relationship("Job", back_populates="company")


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    company = relationship("Company", back_populates="jobs")
    applications = relationship("Application", back_populates="job")


class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="SET NULL"), nullable=True, index=True)
    freelancer_id = Column(
        Integer, ForeignKey("freelancers.id", ondelete="SET NULL"), nullable=True, index=True
    )
    cover_letter = Column(Text, default="")
    proposed_rate = Column(Float, nullable=True)
    status = Column(String(50), default=STATUS_PENDING, nullable=False, index=True)

    # Assignment phase - NULL submitted_at means not yet submitted
    assignment_title = Column(String(255), nullable=True)
    assignment_deadline = Column(DateTime, nullable=True, index=True)
    assignment_submitted_at = Column(DateTime, nullable=True)
    assignment_submission_url = Column(String(500), nullable=True)

    # Interview phase
    interview_scheduled_date = Column(DateTime, nullable=True, index=True)
    interview_meeting_link = Column(String(500), nullable=True)
    interview_is_completed = Column(Boolean, default=False, nullable=False)
    interview_completed_at = Column(DateTime, nullable=True)

    response = Column(Text, nullable=True)  # Outcome note shown to the freelancer
    response_date = Column(DateTime, nullable=True)
    applied_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    job = relationship("Job", back_populates="applications")
    freelancer = relationship("Freelancer", back_populates="applications")
    timeline = relationship(
        "ApplicationTimelineEntry",
        back_populates="application",
        order_by="ApplicationTimelineEntry.id",
        cascade="all, delete-orphan",
    )


class ApplicationTimelineEntry(Base):
    """Append-only audit log of an application's stages"""

    __tablename__ = "application_timeline"

    id = Column(Integer, primary_key=True, index=True)
    application_id = Column(
        Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True
    )
    stage = Column(String(50), nullable=False)  # One of TIMELINE_STAGES
    status = Column(String(255), nullable=False)
    timestamp = Column(DateTime, nullable=False)
    notes = Column(Text, nullable=True)

    application = relationship("Application", back_populates="timeline")
