import os
import tempfile

# Configure an isolated in-memory database before the app is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ENABLE_SCHEDULER"] = "false"
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="cattle-logs-"))

import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine
from main import app
from models.users import User, UserRole
from utils.auth_utils import hash_password

PASSWORD = "password123"


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def _create_user(db, email, name, role):
    user = User(email=email, name=name, role=role, hashed_password=hash_password(PASSWORD))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _login(email):
    client = TestClient(app)
    response = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
    assert response.status_code == 200, response.text
    return client


@pytest.fixture
def admin_user(db):
    return _create_user(db, "admin@cms.com", "Admin User", UserRole.ADMIN)


@pytest.fixture
def worker_user(db):
    return _create_user(db, "worker@cms.com", "Farm Worker", UserRole.WORKER)


@pytest.fixture
def anonymous_client():
    return TestClient(app)


@pytest.fixture
def client(admin_user):
    """A client logged in as an administrator."""
    return _login(admin_user.email)


@pytest.fixture
def worker_client(worker_user):
    return _login(worker_user.email)


@pytest.fixture
def cattle_payload():
    return {
        "tagNumber": "TAG-10001",
        "name": "Bella",
        "gender": "FEMALE",
        "breed": "Holstein",
        "dateOfBirth": "2020-04-12",
        "weight": 550.5,
        "category": "COW",
    }


@pytest.fixture
def cow(client, cattle_payload):
    response = client.post("/api/cattle", json=cattle_payload)
    assert response.status_code == 201, response.text
    return response.json()
