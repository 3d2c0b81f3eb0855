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


def test_create_and_list_clients():
    client = TestClient(app)
    token = register_and_login(client, "c1@example.com", "secret")
    headers = {"Authorization": f"Bearer {token}"}

    resp = client.post(
        "/clients/",
        json={"name": "Acme", "email": "billing@acme.com", "company": "Acme Inc", "billing_rate": "95.00"},
        headers=headers,
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "Acme"
    assert Decimal(data["billing_rate"]) == Decimal("95.00")

    listed = client.get("/clients/", headers=headers)
    assert listed.status_code == 200
    assert [c["id"] for c in listed.json()] == [data["id"]]


def test_client_validation():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'c2@example.com', 'secret')}"}
    assert client.post("/clients/", json={"name": "", "email": "a@example.com"}, headers=headers).status_code == 422
    assert client.post("/clients/", json={"name": "A", "email": "not-an-email"}, headers=headers).status_code == 422


def test_update_client_keeps_unspecified_fields():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'c3@example.com', 'secret')}"}
    client_id = client.post(
        "/clients/", json={"name": "Acme", "email": "acme@example.com", "phone": "555-0100"}, headers=headers
    ).json()["id"]

    resp = client.patch(f"/clients/{client_id}", json={"company": "Acme Holdings"}, headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["company"] == "Acme Holdings"
    assert data["phone"] == "555-0100"


def test_clients_are_owner_scoped():
    client = TestClient(app)
    headers_a = {"Authorization": f"Bearer {register_and_login(client, 'ca@example.com', 'secret')}"}
    headers_b = {"Authorization": f"Bearer {register_and_login(client, 'cb@example.com', 'secret')}"}
    client_id = client.post("/clients/", json={"name": "Acme", "email": "acme@example.com"}, headers=headers_a).json()["id"]

    assert client.get("/clients/", headers=headers_b).json() == []
    assert client.get(f"/clients/{client_id}", headers=headers_b).status_code == 404
    assert client.patch(f"/clients/{client_id}", json={"name": "Mine"}, headers=headers_b).status_code == 404
    assert client.delete(f"/clients/{client_id}", headers=headers_b).json() == {"deleted": False, "id": client_id}
    assert client.get(f"/clients/{client_id}", headers=headers_a).json()["name"] == "Acme"


def test_delete_client_is_idempotent():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'c4@example.com', 'secret')}"}
    client_id = client.post("/clients/", json={"name": "Acme", "email": "acme@example.com"}, headers=headers).json()["id"]

    first = client.delete(f"/clients/{client_id}", headers=headers)
    assert first.status_code == 200
    assert first.json() == {"deleted": True, "id": client_id}
    second = client.delete(f"/clients/{client_id}", headers=headers)
    assert second.status_code == 200
    assert second.json() == {"deleted": False, "id": client_id}
    assert client.get(f"/clients/{client_id}", headers=headers).status_code == 404


def test_clients_require_authentication():
    client = TestClient(app)
    assert client.get("/clients/").status_code == 401


def test_patch_clears_optional_fields_and_rejects_sub_cent_rates():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {register_and_login(client, 'c5@example.com', 'secret')}"}
    client_id = client.post(
        "/clients/", json={"name": "Acme", "email": "acme@example.com", "phone": "555-0100"}, headers=headers
    ).json()["id"]

    cleared = client.patch(f"/clients/{client_id}", json={"phone": None}, headers=headers)
    assert cleared.status_code == 200
    assert cleared.json()["phone"] is None
    assert cleared.json()["name"] == "Acme"

    assert client.patch(f"/clients/{client_id}", json={"name": None}, headers=headers).status_code == 422
    assert client.patch(f"/clients/{client_id}", json={"billing_rate": "95.125"}, headers=headers).status_code == 422
