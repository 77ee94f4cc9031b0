"""
Shared pytest fixtures for all tests.

Provides an in-memory database per test, application factories and mocked
email senders so no test reaches a real mail provider.
"""

import os
from datetime import datetime
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure test environment before the package reads its configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ.pop("SMTP_HOST", None)

from freelancehub import email_service  # noqa: E402
from freelancehub.database import Base  # noqa: E402
from freelancehub.models import (  # noqa: E402
    STATUS_ASSIGNMENT_SENT,
    Application,
    Company,
    Freelancer,
    Job,
)

EMAIL_SENDERS = [
    "send_assignment_deadline_missed_email",
    "send_assignment_deadline_missed_company_email",
    "send_interview_missed_email",
    "send_assignment_deadline_reminder_email",
]


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def engine():
    """In-memory SQLite shared across threads for the duration of one test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


# ============================================================================
# TEST DATA
# ============================================================================


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 6, 2, 12, 0, 0)


@pytest.fixture
def make_application(db):
    """Create an application with its freelancer, job and company"""

    def _make(
        status: str = STATUS_ASSIGNMENT_SENT,
        freelancer_email: str = "dev@example.com",
        company_email: str = "hiring@acme.example",
        with_job: bool = True,
        with_company: bool = True,
        **fields,
    ) -> Application:
        count = db.query(Application).count() + 1
        freelancer = Freelancer(
            full_name=f"Freelancer {count}",
            email=freelancer_email and f"{count}-{freelancer_email}",
        )
        db.add(freelancer)

        job = None
        if with_job:
            company = None
            if with_company:
                company = Company(
                    organization=f"Acme {count}",
                    email=company_email and f"{count}-{company_email}",
                )
                db.add(company)
            job = Job(title=f"Backend Engineer {count}", company=company)
            db.add(job)

        application = Application(freelancer=freelancer, job=job, status=status, **fields)
        db.add(application)
        db.commit()
        db.refresh(application)
        return application

    return _make


# ============================================================================
# EMAIL MOCKS
# ============================================================================


@pytest.fixture
def mock_emails():
    """Replace every deadline email sender with an AsyncMock"""
    mocks = {name: AsyncMock(return_value={"id": f"msg-{name}"}) for name in EMAIL_SENDERS}
    patchers = [patch.object(email_service, name, mock) for name, mock in mocks.items()]
    for patcher in patchers:
        patcher.start()
    yield mocks
    for patcher in patchers:
        patcher.stop()
