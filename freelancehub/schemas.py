from typing import Dict, Optional

from pydantic import BaseModel


class SweepResult(BaseModel):
    matched: int = 0
    rejected: int = 0
    skipped: int = 0
    failed: int = 0
    emails_sent: int = 0
    emails_failed: int = 0
    error: Optional[str] = None


class DeadlineSweepResponse(BaseModel):
    assignments: SweepResult
    interviews: SweepResult


class ReminderResponse(BaseModel):
    matched: int
    sent: int
    skipped: int
    failed: int


class StatusSummary(BaseModel):
    counts: Dict[str, int]
    total: int
