"""
Shared fixtures: in-memory SQLite, an expiring store on a controllable clock,
and SMS delivery switched to log-only.
"""

import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_ENV"] = "development"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["OTP_SEND_RATE_LIMIT"] = "1000"
os.environ["OTP_STORE_BACKEND"] = "memory"
os.environ["MEDIA_ROOT"] = tempfile.mkdtemp(prefix="kisandecks-media-")
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
for _key in ("REDIS_URL", "REDIS_HOST", "OPENAI_API_KEY", "DATA_GOV_API_KEY", "TWILIO_ACCOUNT_SID"):
    os.environ.pop(_key, None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from kisandecks.database import Base, SessionLocal, engine  # noqa: E402
from kisandecks.domain.auth.router import get_otp_clock  # noqa: E402
from kisandecks.main import app  # noqa: E402
from kisandecks.models import Admin, Expert, Farmer  # noqa: E402
from kisandecks.otp_store import InMemoryExpiringStore, get_store  # noqa: E402
from kisandecks.rate_limiter import reset_rate_limits  # noqa: E402
from kisandecks.security_utils import hash_password  # noqa: E402
from kisandecks.services.sms_service import SmsSender, get_sms_sender  # noqa: E402

FARMER_PHONE = "9876543210"
FARMER_PASSWORD = "kheti1234"


class FakeClock:
    """Callable clock that only moves when told to"""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryExpiringStore(clock=clock)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db, store, clock):
    reset_rate_limits()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_otp_clock] = lambda: clock
    app.dependency_overrides[get_sms_sender] = lambda: SmsSender(None, None, None)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def farmer(db):
    farmer = Farmer(phone=FARMER_PHONE, password=hash_password(FARMER_PASSWORD), name="Ramesh", language="hindi")
    db.add(farmer)
    db.commit()
    db.refresh(farmer)
    return farmer


@pytest.fixture
def admin(db):
    admin = Admin(username="admin", password=hash_password("admin-pass"), name="Site Admin")
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


@pytest.fixture
def approved_expert(db):
    expert = Expert(
        username="soilguru",
        password=hash_password("expert-pass"),
        name="Dr. Soil",
        phone="9123456780",
        category="soil",
        status="approved",
        is_active=True,
    )
    db.add(expert)
    db.commit()
    db.refresh(expert)
    return expert


@pytest.fixture
def farmer_client(client, farmer):
    response = client.post("/auth/farmer/login", json={"phone": FARMER_PHONE, "password": FARMER_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture
def admin_client(client, admin):
    response = client.post("/auth/admin/login", json={"username": "admin", "password": "admin-pass"})
    assert response.status_code == 200
    return client


@pytest.fixture
def expert_client(client, approved_expert):
    response = client.post("/auth/expert/login", json={"username": "soilguru", "password": "expert-pass"})
    assert response.status_code == 200
    return client
