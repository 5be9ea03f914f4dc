"""Reusable data and builders for backend test scenarios."""

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from leaselink.core.config import Settings
from leaselink.core.database import Base, get_db
import leaselink.models  # noqa: F401
from leaselink.models.property import Property
from leaselink.models.tenant import Tenant
from leaselink.models.unit import Unit
from leaselink.models.user import User
from leaselink.services import session_tokens
from leaselink.services.passwords import hash_password_pbkdf2
from leaselink.services.session_cookie import SESSION_COOKIE_NAME
from leaselink.services.session_tokens import Identity

TEST_SECRET = "test-secret"

TEST_SETTINGS = Settings(
    env="test",
    database_url="sqlite://",
    jwt_secret=TEST_SECRET,
    session_ttl_seconds=3600,
)

HAPPY_PATH_USERS = {
    "ADMIN": {"id": 1, "email": "admin@example.com", "password": "admin-pass", "role": "ADMIN"},
    "MANAGER": {"id": 2, "email": "manager@example.com", "password": "manager-pass", "role": "MANAGER"},
    "STAFF": {"id": 3, "email": "staff@example.com", "password": "staff-pass", "role": "STAFF"},
}

HAPPY_PATH_TICKET_PAYLOAD = {
    "unitId": 5,
    "tenantId": 9,
    "title": "Leak",
    "description": "kitchen",
    "priority": "HIGH",
}


def build_session() -> Session:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )
    return TestingSessionLocal()


def seed_directory(db: Session) -> None:
    """Users 1-3, property 1 with unit 5, property 2 with unit 6, tenant 9 in unit 5."""
    for data in HAPPY_PATH_USERS.values():
        credential = hash_password_pbkdf2(data["password"], iterations=1000)
        db.add(User(id=data["id"], email=data["email"], password=credential, role=data["role"]))
    db.add(Property(id=1, name="Sunset Villas", address="123 Main St", city="San Antonio", state="TX", zip="78249"))
    db.add(Property(id=2, name="Riverwalk Lofts", address="500 Riverwalk Ave", city="San Antonio", state="TX"))
    db.flush()
    db.add(Unit(id=5, property_id=1, unit_number="101", status="OCCUPIED", beds=2, baths=1, sqft=850))
    db.add(Unit(id=6, property_id=2, unit_number="201", status="VACANT", beds=1, baths=1, sqft=700))
    db.flush()
    db.add(Tenant(id=9, name="John Doe", email="john.doe@email.com", phone="210-555-0101", unit_id=5))
    db.add(Tenant(id=10, name="Jane Smith", email="jane.smith@email.com", unit_id=6))
    db.commit()


def session_cookie_for(role: str) -> dict:
    data = HAPPY_PATH_USERS[role]
    token = session_tokens.issue(
        Identity(id=data["id"], email=data["email"], role=data["role"]),
        TEST_SECRET,
        TEST_SETTINGS.session_ttl_seconds,
    )
    return {SESSION_COOKIE_NAME: token}


def build_client(db: Session, role: str | None = None) -> TestClient:
    from leaselink.main import create_app

    app = create_app(TEST_SETTINGS)
    app.dependency_overrides[get_db] = lambda: db
    client = TestClient(app)
    if role is not None:
        client.cookies.update(session_cookie_for(role))
    return client
