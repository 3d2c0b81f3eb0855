# Freelance Invoicer backend entrypoint.

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.invoicer.api import auth
from backend.invoicer.api import clients
from backend.invoicer.api import dashboard
from backend.invoicer.api import expenses
from backend.invoicer.api import invoices
from backend.invoicer.api import reminders
from backend.invoicer.core.logging import setup_logging
from backend.invoicer.core.settings import get_settings
from backend.invoicer.core.time import parse_clock
from backend.invoicer.db.base import Base
from backend.invoicer.db.session import SessionLocal, engine
from backend.invoicer.services.notifications import EmailNotifier, load_smtp_config
from backend.invoicer.services.reminders import ReminderScheduler

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.app_name, version=settings.api_version)

# Mail capability is decided once here; everything downstream just asks the notifier.
app.state.notifier = EmailNotifier(load_smtp_config(settings), business_name=settings.business_name)
app.state.scheduler = ReminderScheduler(
    SessionLocal,
    app.state.notifier,
    timezone=settings.timezone,
    due_soon_at=parse_clock(settings.reminder_due_soon_at),
    overdue_at=parse_clock(settings.reminder_overdue_at),
    window_days=settings.reminder_window_days,
)

origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(clients.router)
app.include_router(invoices.router)
app.include_router(expenses.router)
app.include_router(dashboard.router)
app.include_router(reminders.router)


@app.get("/")
def read_root():
    return {"app": "Freelance Invoicer backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def start_reminder_scheduler():
    if settings.reminders_enabled:
        app.state.scheduler.start()
    else:
        logger.info("Reminder scheduler disabled by REMINDERS_ENABLED")


@app.on_event("shutdown")
def stop_reminder_scheduler():
    app.state.scheduler.stop()
