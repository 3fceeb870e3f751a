from __future__ import annotations

import base64
import io
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
from PIL import Image

from store_attendance.attendance.flow import AttendanceFlow
from store_attendance.attendance.ledger import AttendanceLedger
from store_attendance.container import assemble_container
from store_attendance.core.enums import Role
from store_attendance.core.exceptions import CaptureUnavailableError
from store_attendance.stores.model import Store
from store_attendance.users.model import UserProfile
from store_attendance.verification.service import VerificationService

AVATAR_HOSTS = ("ui-avatars.com",)

STORE_CENTRO = Store("STORE-001", "Sucursal Centro", "Av. Corrientes 1234", -34.603722, -58.381592)
STORE_NORTE = Store("STORE-002", "Sucursal Norte", "Av. Santa Fe 4500", -34.576837, -58.423405)

METERS_PER_DEGREE_LAT = 111_194.93


def north_of(store: Store, meters: float) -> tuple[float, float]:
    return store.lat + meters / METERS_PER_DEGREE_LAT, store.lng


class TickingClock:
    """Starts at ``start`` and advances one minute per call."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + timedelta(minutes=1)
        return value


class InMemoryUsers:
    def __init__(self, users=()):
        self.users = {u.username: u for u in users}

    def get_by_username(self, username: str) -> Optional[UserProfile]:
        return self.users.get(username)

    def list_all(self):
        return sorted(self.users.values(), key=lambda u: u.full_name)

    def create(self, user: UserProfile) -> None:
        self.users[user.username] = user

    def update(self, user: UserProfile) -> bool:
        self.users[user.username] = user
        return True


class InMemoryStores:
    def __init__(self, stores=()):
        self.stores = {s.id: s for s in stores}

    def get_by_id(self, store_id: str):
        return self.stores.get(store_id)

    def list_all(self):
        return sorted(self.stores.values(), key=lambda s: s.id)

    def create(self, store: Store) -> None:
        self.stores[store.id] = store

    def update(self, store: Store) -> bool:
        self.stores[store.id] = store
        return True


class InMemoryTimeLogs:
    def __init__(self, logs=()):
        self.logs = {log.id: log for log in logs}
        self.fail_insert = False
        self.fail_list = False
        self.insert_calls = 0

    def insert(self, log) -> None:
        self.insert_calls += 1
        if self.fail_insert:
            raise ConnectionError("database unreachable")
        self.logs.setdefault(log.id, log)

    def list_all(self):
        if self.fail_list:
            raise ConnectionError("database unreachable")
        return sorted(self.logs.values(), key=lambda log: log.timestamp, reverse=True)


class InMemoryAudits:
    def __init__(self):
        self.records = []
        self.fail = False

    def create(self, record) -> int:
        if self.fail:
            raise ConnectionError("database unreachable")
        self.records.append(record)
        return len(self.records)

    def list_all(self):
        return sorted(self.records, key=lambda r: r.created_at, reverse=True)


class FakeEvidence:
    def __init__(self, base_url: str = "https://bucket.example.com/evidence"):
        self.base_url = base_url
        self.fail = False
        self.uploads = []

    def upload(self, image_data_url: str, identifier: str):
        self.uploads.append(identifier)
        if self.fail:
            return None
        return f"{self.base_url}/{identifier}.jpg"


class FakeHandle:
    def __init__(self, camera: "FakeCamera"):
        self._camera = camera
        self.released = False

    def release(self) -> None:
        if not self.released:
            self.released = True
            self._camera.releases += 1


class FakeCamera:
    def __init__(self):
        self.denied = False
        self.handles = []
        self.releases = 0

    def acquire(self) -> FakeHandle:
        if self.denied:
            raise CaptureUnavailableError("No se pudo acceder a la cámara. Por favor verifique los permisos.")
        handle = FakeHandle(self)
        self.handles.append(handle)
        return handle

    @property
    def open_handles(self) -> int:
        return sum(1 for h in self.handles if not h.released)


class FakeVisionClient:
    """Returns queued payloads; an ``Exception`` instance in the queue is raised."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def queue(self, *responses) -> None:
        self.responses.extend(responses)

    def generate_json(self, parts, *, temperature: float = 0.1) -> dict:
        self.calls.append(parts)
        if not self.responses:
            raise TimeoutError("no response queued")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def verdict_payload(verified=True, score=97, message="Identidad confirmada", uniform=True, details="Buzo negro"):
    return {
        "verified": verified,
        "identityScore": score,
        "message": message,
        "uniformCompliant": uniform,
        "uniformDetails": details,
    }


def _png_data_url(color=(200, 30, 30), size=(8, 8)) -> str:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now) -> TickingClock:
    return TickingClock(fixed_now)


@pytest.fixture
def selfie() -> str:
    return _png_data_url()


@pytest.fixture
def juan() -> UserProfile:
    return UserProfile(
        username="juan",
        full_name="Juan Pérez",
        password="1234",
        role=Role.AUDITOR,
        job_title="Auditor Senior de Campo",
        photo_url="https://photos.example.com/juan.jpg",
        required_uniform="Buzo o campera negra",
        assigned_store_ids=("STORE-001",),
    )


@pytest.fixture
def maria() -> UserProfile:
    return UserProfile(
        username="maria",
        full_name="Maria González",
        password="admin",
        role=Role.MANAGER,
        job_title="Gerente Regional",
        photo_url="https://ui-avatars.com/api/?name=Maria+G",
        required_uniform="Saco o ropa formal",
        assigned_store_ids=("STORE-001", "STORE-002"),
    )


@pytest.fixture
def admin() -> UserProfile:
    return UserProfile(
        username="admin",
        full_name="Soporte IT",
        password="admin123",
        role=Role.ADMIN,
        job_title="Administrador del Sistema",
        photo_url="https://ui-avatars.com/api/?name=Admin+IT",
    )


@pytest.fixture
def users_repo(juan, maria, admin) -> InMemoryUsers:
    lost = UserProfile(
        username="sinsucursal",
        full_name="Sin Sucursal",
        password="pw",
        role=Role.AUDITOR,
        job_title="Auditor",
        photo_url="https://photos.example.com/x.jpg",
    )
    return InMemoryUsers([juan, maria, admin, lost])


@pytest.fixture
def stores_repo() -> InMemoryStores:
    return InMemoryStores([STORE_CENTRO, STORE_NORTE])


@pytest.fixture
def time_logs_repo() -> InMemoryTimeLogs:
    return InMemoryTimeLogs()


@pytest.fixture
def audits_repo() -> InMemoryAudits:
    return InMemoryAudits()


@pytest.fixture
def ledger(time_logs_repo) -> AttendanceLedger:
    return AttendanceLedger(time_logs_repo)


@pytest.fixture
def evidence() -> FakeEvidence:
    return FakeEvidence()


@pytest.fixture
def camera() -> FakeCamera:
    return FakeCamera()


@pytest.fixture
def vision() -> FakeVisionClient:
    return FakeVisionClient()


@pytest.fixture
def flow(users_repo, stores_repo, ledger, vision, evidence, camera, clock) -> AttendanceFlow:
    return AttendanceFlow(
        users=users_repo,
        stores=stores_repo,
        ledger=ledger,
        verifier=VerificationService(vision, avatar_hosts=AVATAR_HOSTS),
        evidence=evidence,
        camera=camera,
        clock=clock,
    )


@pytest.fixture
def container(users_repo, stores_repo, time_logs_repo, audits_repo, vision, evidence, clock):
    return assemble_container(
        users_repo=users_repo,
        stores_repo=stores_repo,
        time_logs_repo=time_logs_repo,
        audits_repo=audits_repo,
        vision_client=vision,
        evidence=evidence,
        avatar_hosts=AVATAR_HOSTS,
        clock=clock,
    )


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from store_attendance.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()
