import pytest
from fastapi.testclient import TestClient

from warehouse.main import app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def admin_payload():
    return {"username": "warehouse", "email": "warehouse@test.local", "password": "Admin@123"}


@pytest.fixture
def admin_id(client, admin_payload):
    response = client.post("/admins/", json=admin_payload)
    assert response.status_code == 201
    return response.json()["id"]


def create_equipment(client, serial_number="CAM001", **overrides):
    payload = {"name": "Camera", "serial_number": serial_number, "category": "Video"}
    payload.update(overrides)
    response = client.post("/equipment/", json=payload)
    assert response.status_code == 201
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/health/db").json() == {"status": "ok"}


def test_admin_create_login_and_me(client, admin_payload, admin_id):
    listed = client.get("/admins/").json()
    assert [row["username"] for row in listed] == ["warehouse"]
    assert "password_hash" not in listed[0]
    assert "password" not in listed[0]

    login = client.post("/admins/login", json={"username": "warehouse", "password": "Admin@123"})
    assert login.status_code == 200
    body = login.json()
    assert body["token_type"] == "bearer"
    assert body["admin"]["id"] == admin_id

    me = client.get("/admins/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["username"] == "warehouse"


def test_admin_login_failure(client, admin_id):
    response = client.post("/admins/login", json={"username": "warehouse", "password": "nope"})
    assert response.status_code == 401


def test_admin_me_requires_token(client):
    assert client.get("/admins/me").status_code == 401
    assert client.get("/admins/me", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_admin_validation_and_duplicates(client, admin_payload, admin_id):
    short = client.post("/admins/", json={**admin_payload, "username": "ab", "email": "x@test.local"})
    assert short.status_code == 422

    bad_email = client.post("/admins/", json={**admin_payload, "username": "another", "email": "not-an-email"})
    assert bad_email.status_code == 422

    duplicate = client.post("/admins/", json={**admin_payload, "email": "other@test.local"})
    assert duplicate.status_code == 409


def test_equipment_catalog_routes(client):
    created = create_equipment(client, description="4K camera", brand="Canon")
    assert created["status"] == "available"
    assert created["brand"] == "Canon"
    assert created["model"] is None

    create_equipment(client, serial_number="MIC001", name="Mic", category="Audio")
    create_equipment(client, serial_number="MIC002", name="Mic 2", category="Audio")

    assert client.post("/equipment/", json={"name": "Dup", "serial_number": "CAM001", "category": "Video"}).status_code == 409
    assert client.post("/equipment/", json={"name": "Bad", "serial_number": "X1", "category": "Video", "status": "lost"}).status_code == 422

    assert client.get("/equipment/categories").json() == ["Audio", "Video"]
    assert [row["serial_number"] for row in client.get("/equipment/", params={"category": "Audio"}).json()] == ["MIC001", "MIC002"]
    assert [row["serial_number"] for row in client.get("/equipment/", params={"search": "4k"}).json()] == ["CAM001"]
    assert client.get("/equipment/", params={"status": "maintenance"}).json() == []

    assert client.get("/equipment/serial/CAM001").json()["id"] == created["id"]
    assert client.get("/equipment/serial/cam001").json() is None
    assert client.get(f"/equipment/{created['id']}").json()["serial_number"] == "CAM001"
    assert client.get("/equipment/9999").json() is None

    updated = client.put(f"/equipment/{created['id']}", json={"brand": None, "name": "Camera Pro"})
    assert updated.status_code == 200
    assert updated.json()["brand"] is None
    assert updated.json()["name"] == "Camera Pro"
    assert client.put("/equipment/9999", json={"name": "Ghost"}).json() is None
    assert client.put(f"/equipment/{created['id']}", json={"status": "checked_out"}).status_code == 409


def test_lifecycle_routes_end_to_end(client, admin_id):
    item = create_equipment(client)

    checkout = client.post(
        "/transactions/check-out",
        json={
            "equipment_id": item["id"],
            "admin_id": admin_id,
            "user_name": "Alice",
            "expected_return_date": "2025-01-10T00:00:00",
        },
    )
    assert checkout.status_code == 201
    assert checkout.json()["transaction_type"] == "check_out"
    assert checkout.json()["actual_return_date"] is None
    assert client.get(f"/equipment/{item['id']}").json()["status"] == "checked_out"

    again = client.post(
        "/transactions/check-out",
        json={"equipment_id": item["id"], "admin_id": admin_id, "user_name": "Bob"},
    )
    assert again.status_code == 409
    assert "checked_out" in again.json()["detail"]

    holder = client.get(f"/equipment/{item['id']}/transactions").json()
    assert holder["current_user"] == "Alice"

    blocked = client.delete(f"/equipment/{item['id']}")
    assert blocked.status_code == 409
    assert "check in" in blocked.json()["detail"]

    check_in = client.post("/transactions/check-in", json={"equipment_id": item["id"], "admin_id": admin_id})
    assert check_in.status_code == 201
    assert check_in.json()["user_name"] == "System"
    assert check_in.json()["actual_return_date"] is not None

    history = client.get(f"/equipment/{item['id']}/transactions").json()
    assert history["equipment"]["status"] == "available"
    assert history["current_user"] is None
    assert [row["transaction_type"] for row in history["transactions"]] == ["check_in", "check_out"]
    assert history["transactions"][1]["actual_return_date"] == check_in.json()["actual_return_date"]

    listed = client.get("/transactions/", params={"equipment_id": item["id"], "transaction_type": "check_out"}).json()
    assert [row["id"] for row in listed] == [checkout.json()["id"]]

    assert client.delete(f"/equipment/{item['id']}").json() == {"deleted": True}
    assert client.delete(f"/equipment/{item['id']}").json() == {"deleted": False}
    assert client.get(f"/equipment/{item['id']}/transactions").json() is None


def test_booking_routes(client, admin_id):
    item = create_equipment(client)

    missing_date = client.post(
        "/transactions/booking",
        json={"equipment_id": item["id"], "admin_id": admin_id, "user_name": "Bob"},
    )
    assert missing_date.status_code == 422

    booked = client.post(
        "/transactions/booking",
        json={
            "equipment_id": item["id"],
            "admin_id": admin_id,
            "user_name": "Bob",
            "expected_return_date": "2025-02-01T12:00:00",
        },
    )
    assert booked.status_code == 201
    assert booked.json()["transaction_type"] == "booking"

    rebook = client.post(
        "/transactions/booking",
        json={
            "equipment_id": item["id"],
            "admin_id": admin_id,
            "user_name": "Carol",
            "expected_return_date": "2025-02-03T12:00:00",
        },
    )
    assert rebook.status_code == 409
    assert "booked" in rebook.json()["detail"]


def test_lifecycle_route_errors(client, admin_id):
    item = create_equipment(client)

    unknown_equipment = client.post(
        "/transactions/check-out",
        json={"equipment_id": 9999, "admin_id": admin_id, "user_name": "Alice"},
    )
    assert unknown_equipment.status_code == 404

    unknown_admin = client.post(
        "/transactions/check-out",
        json={"equipment_id": item["id"], "admin_id": 9999, "user_name": "Alice"},
    )
    assert unknown_admin.status_code == 404

    blank_user = client.post(
        "/transactions/check-out",
        json={"equipment_id": item["id"], "admin_id": admin_id, "user_name": "   "},
    )
    assert blank_user.status_code == 422

    not_out = client.post("/transactions/check-in", json={"equipment_id": item["id"], "admin_id": admin_id})
    assert not_out.status_code == 409
    assert not_out.json()["detail"] == "Equipment is currently available, cannot check in"

    maintenance = client.put(f"/equipment/{item['id']}/status", json={"status": "maintenance"})
    assert maintenance.json()["status"] == "maintenance"
    in_maintenance = client.post("/transactions/check-in", json={"equipment_id": item["id"], "admin_id": admin_id})
    assert in_maintenance.json()["detail"] == "Equipment is currently maintenance, cannot check in"

    assert client.put("/equipment/9999/status", json={"status": "available"}).json() is None


def test_check_out_route_normalises_offset_dates(client, admin_id):
    item = create_equipment(client)

    response = client.post(
        "/transactions/check-out",
        json={
            "equipment_id": item["id"],
            "admin_id": admin_id,
            "user_name": "Alice",
            "expected_return_date": "2025-01-10T00:00:00+05:00",
        },
    )

    assert response.status_code == 201
    history = client.get(f"/equipment/{item['id']}/transactions").json()
    assert history["transactions"][0]["expected_return_date"].startswith("2025-01-09T19:00:00")
