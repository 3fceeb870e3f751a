import pytest

from conftest import STORE_CENTRO, north_of, verdict_payload


@pytest.fixture
def admin_client(client):
    res = client.post("/api/attendance/login", json={"username": "admin", "password": "admin123"})
    assert res.get_json()["state"]["step"] == "authenticated"
    return client


def test_admin_routes_require_login(client):
    assert client.get("/api/admin/users").status_code == 401


def test_admin_routes_require_admin_role(client, vision, selfie):
    client.post("/api/attendance/login", json={"username": "juan", "password": "1234"})
    ticket = client.post("/api/attendance/store", json={"store_id": "STORE-001"}).get_json()["ticket"]
    lat, lng = north_of(STORE_CENTRO, 10)
    client.post("/api/attendance/location", json={"ticket": ticket, "lat": lat, "lng": lng})
    client.post("/api/attendance/action", json={"type": "INGRESO"})
    vision.queue(verdict_payload())
    client.post("/api/attendance/capture", json={"image": selfie})
    client.post("/api/attendance/finish")

    assert client.get("/api/admin/logs").status_code == 403


def test_list_users_hides_passwords(admin_client):
    users = admin_client.get("/api/admin/users").get_json()["users"]
    assert "juan" in [u["username"] for u in users]
    assert all("password" not in u for u in users)


def test_create_and_update_user(admin_client, users_repo):
    payload = {
        "username": "lucia",
        "password": "pw",
        "full_name": "Lucía Díaz",
        "photo_url": "https://photos.example.com/lucia.jpg",
        "role": "auditor",
        "job_title": "Auditora",
        "assigned_store_ids": ["STORE-001"],
    }
    res = admin_client.post("/api/admin/users", json=payload)
    assert res.status_code == 200
    assert users_repo.get_by_username("lucia").password == "pw"

    res = admin_client.post("/api/admin/users", json=payload)
    assert res.status_code == 400
    assert res.get_json()["message"] == "El nombre de usuario ya existe."

    res = admin_client.put(
        "/api/admin/users/lucia", json={**payload, "password": "", "assigned_store_ids": ["STORE-002"]}
    )
    assert res.status_code == 200
    updated = users_repo.get_by_username("lucia")
    assert updated.assigned_store_ids == ("STORE-002",)
    assert updated.password == "pw"


def test_create_user_without_store_is_rejected(admin_client):
    res = admin_client.post(
        "/api/admin/users",
        json={
            "username": "pedro",
            "password": "pw",
            "full_name": "Pedro",
            "photo_url": "https://photos.example.com/p.jpg",
            "role": "manager",
            "assigned_store_ids": [],
        },
    )
    assert res.status_code == 400
    assert res.get_json()["message"] == "Debe asignar al menos una sucursal al empleado."


def test_create_and_update_store(admin_client, stores_repo):
    res = admin_client.post(
        "/api/admin/stores", json={"name": "Sucursal Oeste", "address": "Rivadavia 8000", "lat": -34.63, "lng": -58.47}
    )
    store = res.get_json()["store"]
    assert store["id"].startswith("STORE-")
    assert stores_repo.get_by_id(store["id"]) is not None

    res = admin_client.put(
        f"/api/admin/stores/{store['id']}", json={"name": "Oeste", "address": "Rivadavia 8001", "lat": -34.63, "lng": -58.47}
    )
    assert res.status_code == 200
    assert stores_repo.get_by_id(store["id"]).name == "Oeste"

    res = admin_client.post("/api/admin/stores", json={"name": "", "address": "x", "lat": 1, "lng": 2})
    assert res.status_code == 400


def test_logs_can_be_filtered_to_incidents(admin_client, ledger_with_logs):
    logs = admin_client.get("/api/admin/logs").get_json()["logs"]
    assert [log["id"] for log in logs] == ["log-2", "log-1"]

    logs = admin_client.get("/api/admin/logs?incidents=1").get_json()["logs"]
    assert [log["id"] for log in logs] == ["log-2"]


def test_audits_listing(admin_client):
    res = admin_client.get("/api/admin/audits")
    assert res.status_code == 200
    assert res.get_json()["audits"] == []


@pytest.fixture
def ledger_with_logs(time_logs_repo, fixed_now):
    from datetime import timedelta

    from store_attendance.attendance.model import TimeLog
    from store_attendance.core.enums import ClockType

    for i, incident in ((1, False), (2, True)):
        time_logs_repo.insert(
            TimeLog(
                id=f"log-{i}",
                user_id="juan",
                user_full_name="Juan Pérez",
                user_photo_url="",
                type=ClockType.INGRESO if i == 1 else ClockType.EGRESO,
                timestamp=fixed_now + timedelta(hours=i),
                has_incident=incident,
                incident_detail="Ubicación lejana (350m > 200m)" if incident else None,
                identity_score=90,
                uniform_compliant=True,
            )
        )
    return time_logs_repo
