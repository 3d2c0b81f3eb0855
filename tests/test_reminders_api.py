import pytest
from fastapi.testclient import TestClient

from backend.invoicer.db.base import Base
from backend.invoicer.db.session import SessionLocal, engine
from backend.invoicer.dependencies.services import get_scheduler
from backend.invoicer.main import app
from backend.invoicer.services.reminders import ReminderScheduler


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    app.dependency_overrides.clear()


class FakeNotifier:
    def __init__(self, configured=True):
        self.configured = configured
        self.reminders = []

    @property
    def is_configured(self):
        return self.configured

    def send_reminder(self, invoice, kind):
        self.reminders.append((invoice.number, kind.value))
        return True


def register_and_login(client: TestClient, email: str, password: str) -> str:
    client.post("/auth/register", json={"email": email, "password": password})
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()["access_token"]


def use_scheduler(notifier) -> ReminderScheduler:
    scheduler = ReminderScheduler(SessionLocal, notifier)
    app.dependency_overrides[get_scheduler] = lambda: scheduler
    return scheduler


def seed_invoices(client: TestClient, headers: dict) -> None:
    client_id = client.post("/clients/", json={"name": "Acme", "email": "acme@example.com"}, headers=headers).json()["id"]
    for number, due, status in (
        ("INV-SOON", "2030-03-12", "sent"),
        ("INV-LATE", "2030-03-01", "sent"),
        ("INV-PAID", "2030-03-01", "paid"),
    ):
        resp = client.post(
            "/invoices/",
            json={
                "number": number,
                "client_id": client_id,
                "issue_date": "2030-02-01",
                "due_date": due,
                "status": status,
                "line_items": [{"description": "Work", "quantity": 1, "rate": 100}],
            },
            headers=headers,
        )
        assert resp.status_code == 201


def test_reminder_routes_require_admin():
    use_scheduler(FakeNotifier())
    client = TestClient(app)
    register_and_login(client, "admin@example.com", "secret")  # first user becomes admin
    headers = {"Authorization": f"Bearer {register_and_login(client, 'owner@example.com', 'secret')}"}

    assert client.get("/reminders/status", headers=headers).status_code == 403
    assert client.post("/reminders/due-soon/run", headers=headers).status_code == 403
    assert client.post("/reminders/overdue/run", headers=headers).status_code == 403
    assert client.get("/reminders/status").status_code == 401


def test_status_reports_jobs():
    use_scheduler(FakeNotifier())
    client = TestClient(app)
    token = register_and_login(client, "admin@example.com", "secret")

    resp = client.get("/reminders/status", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["email_configured"] is True
    assert data["running"] is False
    assert data["job_count"] == 2
    assert data["jobs"] == ["due_soon", "overdue"]


def test_manual_runs_select_by_due_date():
    notifier = FakeNotifier()
    use_scheduler(notifier)
    client = TestClient(app)
    token = register_and_login(client, "admin@example.com", "secret")
    headers = {"Authorization": f"Bearer {token}"}
    seed_invoices(client, headers)

    due_soon = client.post("/reminders/due-soon/run", params={"today": "2030-03-10"}, headers=headers)
    assert due_soon.status_code == 200
    assert due_soon.json() == {
        "kind": "due_soon",
        "run_date": "2030-03-10",
        "selected": 1,
        "sent": 1,
        "failed": 0,
        "skipped": False,
    }

    overdue = client.post("/reminders/overdue/run", params={"today": "2030-03-10"}, headers=headers)
    assert overdue.status_code == 200
    assert overdue.json()["selected"] == 1
    assert notifier.reminders == [("INV-SOON", "due_soon"), ("INV-LATE", "overdue")]


def test_manual_run_without_email_is_skipped():
    use_scheduler(FakeNotifier(configured=False))
    client = TestClient(app)
    token = register_and_login(client, "admin@example.com", "secret")

    resp = client.post("/reminders/overdue/run", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["skipped"] is True
    assert resp.json()["selected"] == 0
