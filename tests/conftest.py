import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from gigauth.app import create_app
from gigauth.auth.passwords import PasswordHasher
from gigauth.auth.session import SessionManager
from gigauth.config import Settings
from gigauth.infra.db import init_db, make_engine, make_session_factory
from gigauth.infra.principal_repo import CredentialStore
from gigauth.services.registration import RegistrationService
from gigauth.services.verification import CredentialVerifier

HASHING_SECRET = "test-hashing-secret"
SESSION_SECRET = "test-session-secret"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings backed by a throwaway SQLite file and cheap Argon2 parameters."""
    return Settings(
        hashing_secret=HASHING_SECRET,
        session_secret=SESSION_SECRET,
        database_url=f"sqlite:///{tmp_path / 'gigauth.db'}",
        argon2_time_cost=1,
        argon2_parallelism=1,
        argon2_memory_cost=64,
        admins_path=tmp_path / "admins.yml",
    )


@pytest.fixture()
def hasher(settings: Settings) -> PasswordHasher:
    return PasswordHasher(
        settings.hashing_secret,
        time_cost=settings.argon2_time_cost,
        parallelism=settings.argon2_parallelism,
        memory_cost=settings.argon2_memory_cost,
    )


@pytest.fixture()
def store(settings: Settings) -> CredentialStore:
    engine = make_engine(settings.database_url)
    init_db(engine)
    yield CredentialStore(make_session_factory(engine))
    engine.dispose()


@pytest.fixture()
def registration(store, hasher) -> RegistrationService:
    return RegistrationService(store, hasher)


@pytest.fixture()
def verifier(store, hasher) -> CredentialVerifier:
    return CredentialVerifier(store, hasher)


class FakeClock:
    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def sessions(clock) -> SessionManager:
    return SessionManager(SESSION_SECRET, max_age=60 * 60 * 24, clock=clock)


@pytest.fixture()
def app(settings):
    application = create_app(settings)
    yield application
    application.state.engine.dispose()


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def worker_body() -> dict:
    return {"email": "a@x.com", "password": "p1", "firstName": "A", "lastName": "B"}


@pytest.fixture()
def employer_body() -> dict:
    return {
        "email": "shop@x.com",
        "password": "s3cret",
        "employerName": "Corner Shop",
        "identificationType": "businessNo",
        "identificationNumber": "12345678",
        "verificationDocuments": [
            {"originalName": "license.pdf", "type": "application/pdf", "storedName": "abc123.pdf"}
        ],
    }
