"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from authgate.config import Settings
from authgate.database import Base, build_engine, get_db
from authgate.errors import EmailSendFailed
from authgate.models.user import User  # noqa: F401
from authgate.services.auth import AuthService
from authgate.services.jwt import JWTService
from authgate.services.mailer import Mailer
from authgate.services.user_store import UserStore


class RecordingMailer(Mailer):
    """Mailer double that records messages instead of sending them."""

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        self.sent: list[dict] = []
        self.fail = False

    def send(self, to: str, subject: str, html: str) -> None:
        if self.fail:
            raise EmailSendFailed()
        self.sent.append({"to": to, "subject": subject, "html": html})


@pytest.fixture(name="settings")
def settings_fixture() -> Settings:
    settings = Settings()
    settings.JWT_SECRET_KEY = "test-secret"
    settings.EMAIL_HOST = ""
    settings.OTP_EXPIRES_MINUTES = 10
    settings.SIGNIN_OTP_EXPIRES_MINUTES = 5
    settings.RESET_TOKEN_EXPIRES_MINUTES = 60
    settings.MAX_DISPLAY_PICTURE_MB = 1
    settings.EXPOSE_SIGNIN_OTP = True
    settings.BASE_URL = "http://testserver"
    settings.CORS_ORIGIN = "http://frontend.example.com"
    return settings


@pytest.fixture(name="mailer")
def mailer_fixture(settings: Settings) -> RecordingMailer:
    return RecordingMailer(settings)


@pytest.fixture(name="auth_service")
def auth_service_fixture(settings: Settings, mailer: RecordingMailer) -> AuthService:
    return AuthService(store=UserStore(), mailer=mailer, jwt_service=JWTService(settings), settings=settings)


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = build_engine("sqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="app")
def app_fixture(settings: Settings, mailer: RecordingMailer, auth_service: AuthService):
    from main import create_app

    app = create_app(settings=settings, mailer=mailer)
    app.state.auth_service = auth_service
    return app


@pytest.fixture(name="client")
def client_fixture(app, db_session: Session):
    """Create a test client with overridden DB dependency and disabled rate limiting."""
    from authgate.rate_limit import limiter

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session, auth_service: AuthService, mailer: RecordingMailer):
    """Create an unverified user and return its id, credentials and signup token."""
    result = auth_service.signup(db_session, "Test User", "test@example.com", "password123")
    mailer.sent.clear()
    return {
        "user_id": result.user.id,
        "email": "test@example.com",
        "password": "password123",
        "token": result.token,
    }


@pytest.fixture(name="verified_user")
def verified_user_fixture(db_session: Session, auth_service: AuthService, mailer: RecordingMailer, test_user: dict):
    """The test user after completing email verification."""
    user = db_session.get(User, test_user["user_id"])
    result = auth_service.verify_otp(db_session, user.id, user.otp)
    mailer.sent.clear()
    return {**test_user, "token": result.token}
