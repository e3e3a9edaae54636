# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from dataclasses import dataclass, field

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-registration-gate")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "development")

from registration_gate.api.v1.dependencies import get_transports
from registration_gate.db.session import Base
from registration_gate.db.session import get_db as app_get_session
from registration_gate.main import app as fastapi_app
from registration_gate.services.cooldown import CooldownTracker, get_cooldown_tracker
from registration_gate.services.otp_issuer import IdentityPair
from registration_gate.services.session_tokens import RegistrationTokenService
from registration_gate.services.transports import TransportSet

TEST_DB_URL = "sqlite://"
COOLDOWN_SECONDS = 15


class FakeClock:
    """Monotonic clock that only moves when a test advances it."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class RecordingTransport:
    """Transport double that remembers every code it was asked to deliver."""

    accept: bool = True
    sent: list[tuple[str, str]] = field(default_factory=list)

    async def send(self, destination: str, code: str) -> bool:
        self.sent.append((destination, code))
        return self.accept

    @property
    def last_code(self) -> str:
        return self.sent[-1][1]


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Services commit on their own; wipe every table between tests.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cooldowns(clock: FakeClock) -> CooldownTracker:
    return CooldownTracker(COOLDOWN_SECONDS, clock=clock)


@pytest.fixture()
def transports() -> TransportSet:
    return TransportSet(email=RecordingTransport(), mobile=RecordingTransport())


@pytest.fixture()
def token_service() -> RegistrationTokenService:
    return RegistrationTokenService()


@pytest.fixture()
def identity_pair() -> IdentityPair:
    return IdentityPair(email="a@x.com", mobile="+1555")


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    cooldowns: CooldownTracker,
    transports: TransportSet,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_cooldown_tracker] = lambda: cooldowns
    app.dependency_overrides[get_transports] = lambda: transports
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def verified_headers(
    client: TestClient,
    transports: TransportSet,
) -> dict[str, str]:
    """Run the issue-and-verify flow for a@x.com / +1555 and return auth headers."""
    pair = {"email": "a@x.com", "mobile": "+1555"}
    assert client.post("/api/v1/otp/send-email", json=pair).status_code == 200
    assert client.post("/api/v1/otp/send-phone", json=pair).status_code == 200
    response = client.post(
        "/api/v1/otp/verify",
        json={
            **pair,
            "emailOtp": transports.email.last_code,
            "mobileOtp": transports.mobile.last_code,
        },
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
