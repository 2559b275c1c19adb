import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

import pytest
from fastapi.testclient import TestClient

from taskboard.app import create_app
from taskboard.auth.passwords import make_hasher
from taskboard.auth.users import CredentialStore
from taskboard.config import TASKS_COLLECTION, USERS_COLLECTION, Settings
from taskboard.services.task_service import TaskService

from .fakes import FakeDatabase


@pytest.fixture()
def settings() -> Settings:
    # Cheap argon2 parameters keep the suite fast.
    return Settings(
        mongo_uri="mongodb://unused.invalid:27017",
        session_secret="test-secret",
        hash_time_cost=1,
        hash_memory_cost=1024,
    )


@pytest.fixture()
def hasher(settings: Settings):
    return make_hasher(settings.hash_time_cost, settings.hash_memory_cost)


@pytest.fixture()
def db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture()
def credentials(db: FakeDatabase, hasher) -> CredentialStore:
    return CredentialStore(db[USERS_COLLECTION], hasher)


@pytest.fixture()
def tasks(db: FakeDatabase) -> TaskService:
    return TaskService(db[TASKS_COLLECTION])


@pytest.fixture()
def app(settings: Settings, db: FakeDatabase):
    return create_app(settings=settings, database=db)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


def register_and_login(client: TestClient, name: str, email: str, password: str) -> None:
    r = client.post("/register", data={"name": name, "email": email, "password": password}, follow_redirects=False)
    assert r.status_code == 303
    r = client.post("/login", data={"email": email, "password": password}, follow_redirects=False)
    assert r.status_code == 303
