"""Reminder scheduler schemas."""

from datetime import date
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict


class ReminderRunRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kind: Literal["due_soon", "overdue"]
    run_date: date
    selected: int
    sent: int
    failed: int
    skipped: bool


class ReminderStatusRead(BaseModel):
    email_configured: bool
    running: bool
    job_count: int
    jobs: List[str]
    next_runs: Dict[str, Optional[str]]
