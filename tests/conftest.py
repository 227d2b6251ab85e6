"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["APP_ENV"] = "test"

from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from zinema.database import Base, get_db  # noqa: E402
from zinema.models.user import User  # noqa: E402, F401
from zinema.services.auth import AuthService  # noqa: E402
from zinema.services.jwt import JWTService, get_jwt_service  # noqa: E402
from zinema.services.notifier import Notifier, get_notifier  # noqa: E402
from zinema.services.passwords import PasswordHasher, get_password_hasher  # noqa: E402
from zinema.services.recovery import RecoveryService  # noqa: E402
from zinema.services.tokens import ResetTokenGenerator  # noqa: E402
from zinema.services.user_store import UserStore  # noqa: E402

TEST_SECRET = "test-secret-key"
VALID_PASSWORD = "Valid1Pass!"


class FakeClock:
    """Controllable replacement for ``utcnow``."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingNotifier(Notifier):
    """Collects recovery emails instead of sending them."""

    def __init__(self) -> None:
        self.sent: list[dict] = []
        self.fail_with: Exception | None = None

    def send(self, recipient: str, subject: str, html_body: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append({"recipient": recipient, "subject": subject, "html": html_body})

    def send_recovery_email(self, recipient: str, reset_link: str) -> None:
        super().send_recovery_email(recipient, reset_link)
        self.sent[-1]["link"] = reset_link


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="hasher")
def hasher_fixture() -> PasswordHasher:
    """Low-cost bcrypt so the suite stays fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture(name="store")
def store_fixture() -> UserStore:
    return UserStore()


@pytest.fixture(name="clock")
def clock_fixture() -> FakeClock:
    return FakeClock(datetime(2025, 1, 1, 12, 0, 0))


@pytest.fixture(name="notifier")
def notifier_fixture() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture(name="jwt_service")
def jwt_service_fixture() -> JWTService:
    return JWTService(secret_key=TEST_SECRET)


@pytest.fixture(name="recovery_service")
def recovery_service_fixture(store, hasher, notifier, clock) -> RecoveryService:
    """Recovery service on a fixed clock."""
    return RecoveryService(
        store=store,
        hasher=hasher,
        tokens=ResetTokenGenerator(),
        notifier=notifier,
        frontend_url="http://frontend.test",
        clock=clock,
    )


@pytest.fixture(name="client")
def client_fixture(
    db_session: Session, hasher: PasswordHasher, notifier: RecordingNotifier, jwt_service: JWTService
):
    """Create a test client with overridden DB and services, and rate limiting off."""
    from main import app
    from zinema.rate_limit import limiter

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_jwt_service] = lambda: jwt_service
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session, store: UserStore, hasher: PasswordHasher, jwt_service: JWTService):
    """Create a test user and return its data plus a session token."""
    auth_service = AuthService(store=store, hasher=hasher, jwt_service=jwt_service)
    user = auth_service.register(
        db_session,
        first_name="Test",
        last_name="User",
        age=30,
        email="test@example.com",
        password=VALID_PASSWORD,
        confirm_password=VALID_PASSWORD,
    )
    token = jwt_service.issue(user_id=user.id, email=user.email)

    return {
        "user_id": user.id,
        "email": user.email,
        "password": VALID_PASSWORD,
        "token": token,
    }


@pytest.fixture(name="auth_headers")
def auth_headers_fixture(test_user: dict) -> dict:
    return {"Authorization": f"Bearer {test_user['token']}"}
