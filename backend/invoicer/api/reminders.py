"""Reminder scheduler status and manual runs.

The checks look at every owner's invoices, so these routes are admin only.
"""

from datetime import date

from fastapi import APIRouter, Depends

from backend.invoicer.dependencies.auth import get_current_admin
from backend.invoicer.dependencies.services import get_scheduler
from backend.invoicer.models.user import User
from backend.invoicer.schemas.reminder import ReminderRunRead, ReminderStatusRead
from backend.invoicer.services.reminders import ReminderScheduler

router = APIRouter(prefix="/reminders", tags=["reminders"])


@router.get("/status", response_model=ReminderStatusRead)
async def reminder_status(
    scheduler: ReminderScheduler = Depends(get_scheduler),
    current_admin: User = Depends(get_current_admin),
):
    return scheduler.get_status()


@router.post("/due-soon/run", response_model=ReminderRunRead)
def run_due_soon_check(
    today: date | None = None,
    scheduler: ReminderScheduler = Depends(get_scheduler),
    current_admin: User = Depends(get_current_admin),
):
    return ReminderRunRead.model_validate(scheduler.trigger_due_soon_check(today))


@router.post("/overdue/run", response_model=ReminderRunRead)
def run_overdue_check(
    today: date | None = None,
    scheduler: ReminderScheduler = Depends(get_scheduler),
    current_admin: User = Depends(get_current_admin),
):
    return ReminderRunRead.model_validate(scheduler.trigger_overdue_check(today))
