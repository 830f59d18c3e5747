import json
import os
from datetime import timedelta
from urllib.parse import parse_qs

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set testing environment before the app reads its settings
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"

from doctors_portal.main import app
from doctors_portal.core.database import get_db, get_redis, Base
from doctors_portal.core.security import create_access_token, UserRole
from doctors_portal.models.service import Service
from doctors_portal.models.user import User
from doctors_portal.services.notification_service import MailgunMailer, get_mailer
from doctors_portal.services.payment_service import StripePaymentGateway, get_payment_gateway

# Create test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()

class InMemoryRedis:
    """The subset of the redis client used by the rate limiter."""

    def __init__(self):
        self.data = {}

    def setex(self, key, time, value):
        self.data[key] = str(value)
        return True

    def get(self, key):
        return self.data.get(key)

    def incr(self, key):
        self.data[key] = str(int(self.data.get(key, "0")) + 1)
        return int(self.data[key])

class RecordingTransport(httpx.MockTransport):
    """Mock transport that remembers each request's form fields."""

    def __init__(self, status_code=200, payload=None, error=None, content=None):
        self.requests = []
        self.content = content
        self.status_code = status_code
        self.payload = payload or {}
        self.error = error
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append({
            "url": str(request.url),
            "form": {k: v[0] for k, v in parse_qs(request.content.decode()).items()},
        })
        if self.error is not None:
            raise self.error
        body = self.content if self.content is not None else json.dumps(self.payload)
        return httpx.Response(self.status_code, content=body)

@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db_session(test_db):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def redis_client():
    return InMemoryRedis()

@pytest.fixture
def mail_transport():
    return RecordingTransport(payload={"id": "<msg@mg.example.com>", "message": "Queued. Thank you."})

@pytest.fixture
def mailer(mail_transport):
    return MailgunMailer(
        api_key="key-test",
        domain="mg.example.com",
        sender="Doctor's portal <doctorportal@dental.com>",
        transport=mail_transport,
    )

@pytest.fixture
def stripe_transport():
    return RecordingTransport(payload={"id": "pi_123", "client_secret": "pi_123_secret_456"})

@pytest.fixture
def gateway(stripe_transport):
    return StripePaymentGateway(secret_key="sk_test_123", transport=stripe_transport)

@pytest.fixture
def client(test_db, redis_client, mailer, gateway):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: redis_client
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client

    app.dependency_overrides.clear()

@pytest.fixture
def services(db_session):
    catalog = [
        Service(name="Teeth Orthodontics", slots=["08.00 AM - 08.30 AM", "08.30 AM - 09.00 AM", "09.00 AM - 9.30 AM"], price=120),
        Service(name="Cavity Protection", slots=["10.05 am - 10.30 am", "10.30 am - 11.00 am"], price=80),
        Service(name="Teeth Cleaning", slots=[], price=45.5),
    ]
    db_session.add_all(catalog)
    db_session.commit()
    return catalog

@pytest.fixture
def make_admin(db_session):
    def _make_admin(email):
        db_session.add(User(email=email, role=UserRole.ADMIN.value, profile={}))
        db_session.commit()
    return _make_admin

def auth_headers(email, expires_delta=None):
    token = create_access_token({"email": email}, expires_delta=expires_delta)
    return {"Authorization": f"Bearer {token}"}

def expired_headers(email):
    return auth_headers(email, expires_delta=timedelta(seconds=-60))
