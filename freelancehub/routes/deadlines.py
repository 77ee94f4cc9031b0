"""
API endpoints to inspect and manually trigger the deadline scheduler
"""

import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import config
from ..database import get_db
from ..models import APPLICATION_STATUSES, Application
from ..schemas import DeadlineSweepResponse, ReminderResponse, StatusSummary
from ..services.deadline_automation import run_deadline_sweep, send_deadline_reminders
from ..services.job_guard import JobAlreadyRunning, deadline_reminder_guard, deadline_sweep_guard

router = APIRouter(prefix="/deadlines", tags=["deadlines"])


def require_admin_token(x_admin_token: Optional[str] = Header(default=None)) -> None:
    """Verify the scheduler admin token"""
    if not config.SCHEDULER_ADMIN_TOKEN:
        raise HTTPException(status_code=503, detail="Scheduler admin access is not configured")
    if not x_admin_token or not secrets.compare_digest(
        config.SCHEDULER_ADMIN_TOKEN.encode(), x_admin_token.encode()
    ):
        raise HTTPException(status_code=401, detail="Invalid admin token")


@router.get("/summary", response_model=StatusSummary, dependencies=[Depends(require_admin_token)])
async def get_status_summary(db: Session = Depends(get_db)):
    """Count applications by status"""
    status_counts = (
        db.query(Application.status, func.count(Application.id).label("count"))
        .group_by(Application.status)
        .all()
    )

    counts = {status: 0 for status in APPLICATION_STATUSES}
    for status, count in status_counts:
        counts[status] = count

    return StatusSummary(counts=counts, total=sum(counts.values()))


@router.post(
    "/sweep/run", response_model=DeadlineSweepResponse, dependencies=[Depends(require_admin_token)]
)
async def run_sweep_now(db: Session = Depends(get_db)):
    """
    Manually trigger the hourly deadline sweep
    (In production this runs from the ARQ cron worker)
    """
    try:
        with deadline_sweep_guard.hold():
            result = await run_deadline_sweep(db)
    except JobAlreadyRunning:
        raise HTTPException(status_code=409, detail="Deadline sweep already in progress")
    return DeadlineSweepResponse(**result)


@router.post(
    "/reminders/run", response_model=ReminderResponse, dependencies=[Depends(require_admin_token)]
)
async def run_reminders_now(db: Session = Depends(get_db)):
    """Manually send the daily deadline reminders"""
    try:
        with deadline_reminder_guard.hold():
            result = await send_deadline_reminders(db)
    except JobAlreadyRunning:
        raise HTTPException(status_code=409, detail="Deadline reminders already in progress")
    return ReminderResponse(**result)
