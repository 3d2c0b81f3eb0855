"""Request-scoped access to the store and the app-level collaborators."""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from backend.invoicer.db.session import get_db
from backend.invoicer.services.notifications import EmailNotifier
from backend.invoicer.services.reminders import ReminderScheduler
from backend.invoicer.services.storage import EntityStore


def get_store(db: Session = Depends(get_db)) -> EntityStore:
    return EntityStore(db)


def get_notifier(request: Request) -> EmailNotifier:
    return request.app.state.notifier


def get_scheduler(request: Request) -> ReminderScheduler:
    return request.app.state.scheduler
