import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from backend.invoicer.db.base import Base
from backend.invoicer.db.session import engine
from backend.invoicer.main import app


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def register_and_login(client: TestClient, email: str, password: str) -> str:
    client.post("/auth/register", json={"email": email, "password": password})
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()["access_token"]


def _expense(**overrides):
    payload = {"description": "Design software", "amount": "49.99", "category": "software", "date": "2030-02-01"}
    payload.update(overrides)
    return payload


def test_expense_lifecycle():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'e1@example.com', 'secret')}"}

    created = client.post("/expenses/", json=_expense(), headers=headers)
    assert created.status_code == 201
    expense_id = created.json()["id"]
    assert Decimal(created.json()["amount"]) == Decimal("49.99")

    updated = client.patch(f"/expenses/{expense_id}", json={"receipt": "receipts/feb.pdf"}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["receipt"] == "receipts/feb.pdf"
    assert updated.json()["category"] == "software"

    assert [e["id"] for e in client.get("/expenses/", headers=headers).json()] == [expense_id]
    assert client.delete(f"/expenses/{expense_id}", headers=headers).json() == {"deleted": True, "id": expense_id}
    assert client.delete(f"/expenses/{expense_id}", headers=headers).json() == {"deleted": False, "id": expense_id}
    assert client.get(f"/expenses/{expense_id}", headers=headers).status_code == 404


def test_expense_validation():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'e2@example.com', 'secret')}"}
    assert client.post("/expenses/", json=_expense(category="yachts"), headers=headers).status_code == 422
    assert client.post("/expenses/", json=_expense(amount="-1"), headers=headers).status_code == 422


def test_expenses_are_owner_scoped():
    client = TestClient(app)
    headers_a = {"Authorization": f"Bearer {register_and_login(client, 'ea@example.com', 'secret')}"}
    headers_b = {"Authorization": f"Bearer {register_and_login(client, 'eb@example.com', 'secret')}"}
    expense_id = client.post("/expenses/", json=_expense(), headers=headers_a).json()["id"]

    assert client.get("/expenses/", headers=headers_b).json() == []
    assert client.get(f"/expenses/{expense_id}", headers=headers_b).status_code == 404
    assert client.patch(f"/expenses/{expense_id}", json={"amount": "1"}, headers=headers_b).status_code == 404


def test_expense_amount_precision_and_clearing_receipt():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'e3@example.com', 'secret')}"}
    assert client.post("/expenses/", json=_expense(amount="12.345"), headers=headers).status_code == 422

    expense_id = client.post("/expenses/", json=_expense(receipt="receipts/a.pdf"), headers=headers).json()["id"]
    cleared = client.patch(f"/expenses/{expense_id}", json={"receipt": None}, headers=headers)
    assert cleared.status_code == 200
    assert cleared.json()["receipt"] is None
    assert client.patch(f"/expenses/{expense_id}", json={"amount": None}, headers=headers).status_code == 422
