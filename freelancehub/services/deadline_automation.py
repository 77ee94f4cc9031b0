"""
Automated deadline handling for applications
Handles assignment-sent → rejected when the assignment deadline passes unsubmitted
Handles interview-scheduled → rejected when the interview was not attended
Sends reminders for assignments due within the reminder window
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from .. import config, email_service
from ..email_templates import format_datetime
from ..models import (
    STATUS_ASSIGNMENT_SENT,
    STATUS_INTERVIEW_SCHEDULED,
    STATUS_REJECTED,
    Application,
    ApplicationTimelineEntry,
    Job,
)

logger = logging.getLogger(__name__)

FINAL_DECISION_STAGE = "final_decision"
ASSIGNMENT_MISSED_RESPONSE = "Assignment deadline missed"
INTERVIEW_MISSED_RESPONSE = "Interview was not attended"
ASSIGNMENT_MISSED_TIMELINE_STATUS = "Rejected - Deadline expired"
INTERVIEW_MISSED_TIMELINE_STATUS = "Rejected - Interview not attended"
UNKNOWN_JOB_TITLE = "the position"
UNKNOWN_CANDIDATE_NAME = "A candidate"


def expired_assignment_filter(now: datetime) -> list:
    return [
        Application.status == STATUS_ASSIGNMENT_SENT,
        Application.assignment_deadline < now,
        Application.assignment_submitted_at.is_(None),
    ]


def missed_interview_filter(now: datetime) -> list:
    # Strict: an interview exactly one grace period ago is not yet missed
    cutoff = now - timedelta(hours=config.INTERVIEW_GRACE_PERIOD_HOURS)
    return [
        Application.status == STATUS_INTERVIEW_SCHEDULED,
        Application.interview_is_completed.is_(False),
        Application.interview_scheduled_date < cutoff,
    ]


def upcoming_deadline_filter(now: datetime) -> list:
    window_end = now + timedelta(hours=config.REMINDER_WINDOW_HOURS)
    return [
        Application.status == STATUS_ASSIGNMENT_SENT,
        Application.assignment_deadline >= now,
        Application.assignment_deadline <= window_end,
        Application.assignment_submitted_at.is_(None),
    ]


def hours_until(deadline: datetime, now: datetime) -> int:
    """Whole hours left before a deadline, halves rounded up"""
    return math.floor((deadline - now) / timedelta(hours=1) + 0.5)


def _load_matches(db: Session, criteria: list) -> list[Application]:
    return (
        db.query(Application)
        .options(
            joinedload(Application.freelancer),
            joinedload(Application.job).joinedload(Job.company),
        )
        .filter(*criteria)
        .order_by(Application.id.asc())
        .all()
    )


def _parties(application: Application) -> dict:
    """Copy what the notifications need before the row is written and expired"""
    freelancer = application.freelancer
    job = application.job
    company = job.company if job else None
    full_name = freelancer.full_name if freelancer else None
    return {
        "application_id": application.id,
        # Greeting in freelancer-facing emails ("Hi there")
        "freelancer_name": full_name or "there",
        # Names the freelancer in company-facing emails
        "candidate_name": full_name or UNKNOWN_CANDIDATE_NAME,
        "freelancer_email": freelancer.email if freelancer else None,
        "job_title": job.title if job else UNKNOWN_JOB_TITLE,
        "company_email": company.email if company else None,
        "assignment_deadline": application.assignment_deadline,
        "interview_scheduled_date": application.interview_scheduled_date,
    }


def reject_if_still_due(
    db: Session,
    application_id: int,
    criteria: list,
    response: str,
    timeline_status: str,
    notes: str,
    now: datetime,
) -> bool:
    """
    Conditionally reject one application and append its timeline entry

    The UPDATE carries the same predicate the sweep selected with, so an
    application submitted or completed after the scan is left untouched.

    Returns:
        bool: True if the application was rejected by this call
    """
    updated = (
        db.query(Application)
        .filter(Application.id == application_id, *criteria)
        .update(
            {
                Application.status: STATUS_REJECTED,
                Application.response: response,
                Application.response_date: now,
            },
            synchronize_session=False,
        )
    )
    if not updated:
        db.rollback()
        return False

    db.add(
        ApplicationTimelineEntry(
            application_id=application_id,
            stage=FINAL_DECISION_STAGE,
            status=timeline_status,
            timestamp=now,
            notes=notes,
        )
    )
    db.commit()
    return True


async def _notify(summary: dict, label: str, to: Optional[str], send, **kwargs) -> None:
    """Best-effort email: failures are counted and logged, never raised"""
    if not to:
        logger.debug(f"⚠️ No email address for {label} - skipping")
        return
    try:
        response = await send(to=to, **kwargs)
        summary["emails_sent"] += 1
        message_id = response.get("id") if isinstance(response, dict) else response
        logger.info(f"✅ {label} email sent to {to} (id={message_id})")
    except Exception as e:
        summary["emails_failed"] += 1
        logger.error(f"❌ Failed to send {label} email to {to}: {e}")


def _new_summary() -> dict:
    return {
        "matched": 0,
        "rejected": 0,
        "skipped": 0,
        "failed": 0,
        "emails_sent": 0,
        "emails_failed": 0,
    }


async def _reject_matches(
    db: Session,
    now: datetime,
    filter_for,
    from_status: str,
    response: str,
    timeline_status: str,
    notes_for,
    notifications_for,
) -> dict:
    """
    Shared rejection loop for both sweeps

    Every matched application is re-checked at write time with `filter_for(now)`.
    A record that fails to write is counted and the loop moves on; emails are
    only sent for applications this call actually rejected.
    """
    summary = _new_summary()

    matches = _load_matches(db, filter_for(now))
    summary["matched"] = len(matches)
    logger.info(f"⏰ Found {len(matches)} {from_status} applications past due")

    for parties in [_parties(application) for application in matches]:
        application_id = parties["application_id"]

        try:
            rejected = reject_if_still_due(
                db,
                application_id,
                filter_for(now),
                response=response,
                timeline_status=timeline_status,
                notes=notes_for(parties),
                now=now,
            )
        except Exception as e:
            db.rollback()
            summary["failed"] += 1
            logger.error(f"❌ Failed to reject application {application_id}: {e}")
            continue

        if not rejected:
            summary["skipped"] += 1
            logger.info(f"ℹ️ Application {application_id} changed since scan - left untouched")
            continue

        summary["rejected"] += 1
        logger.info(f"✅ Application {application_id} transitioned: {from_status} → rejected")

        for label, to, send, kwargs in notifications_for(parties):
            await _notify(summary, label, to, send, **kwargs)

    return summary


async def check_expired_assignments(db: Session, now: Optional[datetime] = None) -> dict:
    """
    Reject applications whose assignment deadline passed without a submission

    Both the freelancer and the owning company are notified once the
    rejection is committed.

    Returns:
        dict: Summary of the sweep
    """

    def notifications(parties: dict) -> list:
        deadline = parties["assignment_deadline"]
        return [
            (
                "assignment deadline missed",
                parties["freelancer_email"],
                email_service.send_assignment_deadline_missed_email,
                {
                    "freelancer_name": parties["freelancer_name"],
                    "job_title": parties["job_title"],
                    "deadline": deadline,
                },
            ),
            (
                "company assignment deadline missed",
                parties["company_email"],
                email_service.send_assignment_deadline_missed_company_email,
                {
                    "freelancer_name": parties["candidate_name"],
                    "job_title": parties["job_title"],
                    "deadline": deadline,
                },
            ),
        ]

    summary = await _reject_matches(
        db,
        now or datetime.utcnow(),
        expired_assignment_filter,
        from_status=STATUS_ASSIGNMENT_SENT,
        response=ASSIGNMENT_MISSED_RESPONSE,
        timeline_status=ASSIGNMENT_MISSED_TIMELINE_STATUS,
        notes_for=lambda parties: (
            f"Assignment deadline ({format_datetime(parties['assignment_deadline'])}) was missed"
        ),
        notifications_for=notifications,
    )
    logger.info(f"📊 Expired assignment sweep summary: {summary}")
    return summary


async def check_expired_interviews(db: Session, now: Optional[datetime] = None) -> dict:
    """
    Reject applications whose interview passed the grace period uncompleted

    Only the freelancer is notified.

    Returns:
        dict: Summary of the sweep
    """

    def notifications(parties: dict) -> list:
        return [
            (
                "interview missed",
                parties["freelancer_email"],
                email_service.send_interview_missed_email,
                {
                    "freelancer_name": parties["freelancer_name"],
                    "job_title": parties["job_title"],
                    "scheduled_date": parties["interview_scheduled_date"],
                },
            ),
        ]

    summary = await _reject_matches(
        db,
        now or datetime.utcnow(),
        missed_interview_filter,
        from_status=STATUS_INTERVIEW_SCHEDULED,
        response=INTERVIEW_MISSED_RESPONSE,
        timeline_status=INTERVIEW_MISSED_TIMELINE_STATUS,
        notes_for=lambda parties: (
            f"Interview scheduled for {format_datetime(parties['interview_scheduled_date'])} "
            "was not attended"
        ),
        notifications_for=notifications,
    )
    logger.info(f"📊 Missed interview sweep summary: {summary}")
    return summary


async def run_deadline_sweep(db: Session, now: Optional[datetime] = None) -> dict:
    """
    Hourly tick: expired assignments first, then missed interviews

    A failing sweep is logged and does not prevent the other one.
    """
    now = now or datetime.utcnow()
    results = {}
    for name, sweep in (
        ("assignments", check_expired_assignments),
        ("interviews", check_expired_interviews),
    ):
        try:
            results[name] = await sweep(db, now)
        except Exception as e:
            db.rollback()
            logger.error(f"❌ Deadline sweep '{name}' failed: {str(e)}")
            results[name] = {**_new_summary(), "error": str(e)}
    return results


async def send_deadline_reminders(db: Session, now: Optional[datetime] = None) -> dict:
    """
    Remind freelancers of assignments due within the reminder window

    Notification only: no application is modified, so re-running is harmless.
    """
    now = now or datetime.utcnow()
    summary = {"matched": 0, "sent": 0, "skipped": 0, "failed": 0}

    upcoming = _load_matches(db, upcoming_deadline_filter(now))
    summary["matched"] = len(upcoming)

    for parties in [_parties(application) for application in upcoming]:
        if not parties["freelancer_email"]:
            summary["skipped"] += 1
            continue

        deadline = parties["assignment_deadline"]
        hours_left = hours_until(deadline, now)
        try:
            await email_service.send_assignment_deadline_reminder_email(
                to=parties["freelancer_email"],
                freelancer_name=parties["freelancer_name"],
                job_title=parties["job_title"],
                deadline=deadline,
                hours_left=hours_left,
            )
            summary["sent"] += 1
        except Exception as e:
            summary["failed"] += 1
            logger.error(
                f"❌ Failed to send deadline reminder for application "
                f"{parties['application_id']}: {e}"
            )

    logger.info(f"✅ Sent {summary['sent']} deadline reminders: {summary}")
    return summary
