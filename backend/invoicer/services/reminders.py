"""
Payment reminder scheduling.

Two daily jobs re-evaluate every owner's invoices from scratch:
- due_soon: status is sent and the due date falls within the next few days
- overdue: status is sent and the due date has passed

Nothing is persisted between runs. An invoice that stays eligible is simply
selected again on the next day's run. The scheduler only reads invoices and
sends mail; it never changes invoice status.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta
from typing import Callable, Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from backend.invoicer.models.invoice import Invoice
from backend.invoicer.services.notifications import EmailNotifier, ReminderKind
from backend.invoicer.services.storage import EntityStore

logger = logging.getLogger(__name__)

ELIGIBLE_STATUSES = ("sent",)
DEFAULT_WINDOW_DAYS = 3
STOP_JOIN_TIMEOUT_SECONDS = 5


def is_due_soon(invoice: Invoice, today: date, window_days: int = DEFAULT_WINDOW_DAYS) -> bool:
    if invoice.status not in ELIGIBLE_STATUSES:
        return False
    return today < invoice.due_date <= today + timedelta(days=window_days)


def is_overdue(invoice: Invoice, today: date) -> bool:
    if invoice.status not in ELIGIBLE_STATUSES:
        return False
    return invoice.due_date < today


def select_due_soon(invoices: Iterable[Invoice], today: date, window_days: int = DEFAULT_WINDOW_DAYS) -> List[Invoice]:
    return [invoice for invoice in invoices if is_due_soon(invoice, today, window_days)]


def select_overdue(invoices: Iterable[Invoice], today: date) -> List[Invoice]:
    return [invoice for invoice in invoices if is_overdue(invoice, today)]


def next_run_at(now: datetime, at: time) -> datetime:
    """Next wall-clock occurrence of ``at`` strictly after ``now`` (same tzinfo)."""
    candidate = now.replace(hour=at.hour, minute=at.minute, second=0, microsecond=0)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


@dataclass
class ReminderRunResult:
    kind: str
    run_date: date
    selected: int = 0
    sent: int = 0
    failed: int = 0
    skipped: bool = False


@dataclass
class ReminderJob:
    name: str
    kind: ReminderKind
    at: time
    next_run: Optional[datetime] = None
    last_result: Optional[ReminderRunResult] = field(default=None, repr=False)


class ReminderScheduler:
    """
    Runs the due-soon and overdue checks once a day at fixed local times.

    Each job gets its own daemon thread that sleeps on a shared stop event until
    its next fire time. ``trigger_due_soon_check`` and ``trigger_overdue_check``
    run the same code path on demand.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        notifier: EmailNotifier,
        *,
        timezone: str = "America/New_York",
        due_soon_at: time = time(9, 0),
        overdue_at: time = time(10, 0),
        window_days: int = DEFAULT_WINDOW_DAYS,
    ):
        self.session_factory = session_factory
        self.notifier = notifier
        self.tz = ZoneInfo(timezone)
        self.window_days = window_days
        self.jobs: Dict[str, ReminderJob] = {
            ReminderKind.DUE_SOON.value: ReminderJob(ReminderKind.DUE_SOON.value, ReminderKind.DUE_SOON, due_soon_at),
            ReminderKind.OVERDUE.value: ReminderJob(ReminderKind.OVERDUE.value, ReminderKind.OVERDUE, overdue_at),
        }
        self._stop_event = threading.Event()
        self._threads: Dict[str, threading.Thread] = {}
        logger.info("Email reminder scheduler initialized (%s)", timezone)

    @property
    def running(self) -> bool:
        return any(thread.is_alive() for thread in self._threads.values())

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        for job in self.jobs.values():
            thread = threading.Thread(target=self._run_loop, args=(job,), name=f"reminder-{job.name}", daemon=True)
            self._threads[job.name] = thread
            thread.start()
            logger.info("Started %s reminder job (daily at %s)", job.name, job.at.strftime("%H:%M"))

    def stop(self) -> None:
        self._stop_event.set()
        for name, thread in self._threads.items():
            thread.join(timeout=STOP_JOIN_TIMEOUT_SECONDS)
            logger.info("Stopped %s reminder job", name)
        self._threads.clear()
        for job in self.jobs.values():
            job.next_run = None

    def _now(self) -> datetime:
        return datetime.now(self.tz)

    def _run_loop(self, job: ReminderJob) -> None:
        while not self._stop_event.is_set():
            job.next_run = next_run_at(self._now(), job.at)
            # Compare in UTC so the sleep stays right across DST changes
            delay = (job.next_run.astimezone(UTC) - datetime.now(UTC)).total_seconds()
            if self._stop_event.wait(max(delay, 0)):
                break
            try:
                job.last_result = self._check(job.kind)
            except Exception:
                logger.exception("Error checking %s invoices", job.name)

    def trigger_due_soon_check(self, today: Optional[date] = None) -> ReminderRunResult:
        return self._check(ReminderKind.DUE_SOON, today)

    def trigger_overdue_check(self, today: Optional[date] = None) -> ReminderRunResult:
        return self._check(ReminderKind.OVERDUE, today)

    def _check(self, kind: ReminderKind, today: Optional[date] = None) -> ReminderRunResult:
        run_date = today or self._now().date()
        result = ReminderRunResult(kind=kind.value, run_date=run_date)
        if not self.notifier.is_configured:
            logger.info("Email service not configured - skipping %s reminders", kind.value)
            result.skipped = True
            return result

        db = self.session_factory()
        try:
            candidates = EntityStore(db).get_reminder_candidates(ELIGIBLE_STATUSES)
            if kind is ReminderKind.DUE_SOON:
                eligible = select_due_soon(candidates, run_date, self.window_days)
            else:
                eligible = select_overdue(candidates, run_date)
            result.selected = len(eligible)
            logger.info("Found %d %s invoices for %s", len(eligible), kind.value, run_date.isoformat())

            for invoice in eligible:
                try:
                    delivered = self.notifier.send_reminder(invoice, kind)
                except Exception:
                    logger.exception("Failed to send %s reminder for invoice %s", kind.value, invoice.number)
                    delivered = False
                if delivered:
                    result.sent += 1
                else:
                    result.failed += 1
        finally:
            db.close()

        logger.info(
            "%s reminders for %s: %d sent, %d failed",
            kind.value,
            run_date.isoformat(),
            result.sent,
            result.failed,
        )
        return result

    def get_status(self) -> dict:
        return {
            "email_configured": self.notifier.is_configured,
            "running": self.running,
            "job_count": len(self.jobs),
            "jobs": list(self.jobs),
            "next_runs": {
                name: job.next_run.isoformat() if job.next_run else None for name, job in self.jobs.items()
            },
        }
