# ruff: noqa: E402
# File: /tests/conftest.py
import pathlib
import sys

# Make repo root importable as "app"
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from app.crud.system import seed_system_space
from app.db.base_class import Base
from app.main import app

TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# pysqlite needs to be told to leave transaction handling to SQLAlchemy,
# otherwise SAVEPOINTs (used by the per-request unit of work) do not nest.
@event.listens_for(engine, "connect")
def _sqlite_connect(dbapi_connection, _record):
    dbapi_connection.isolation_level = None


@event.listens_for(engine, "begin")
def _sqlite_begin(conn):
    conn.exec_driver_sql("BEGIN")


@pytest.fixture(scope="session", autouse=True)
def _create_schema():
    Base.metadata.create_all(bind=engine)
    try:
        yield
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session():
    connection = engine.connect()
    trans = connection.begin()
    # Route commits/rollbacks inside the app to savepoints of the outer transaction
    session = TestingSessionLocal(bind=connection, join_transaction_mode="create_savepoint")
    try:
        seed_system_space(session)
        # Releases the savepoint only; the outer transaction still rolls everything back
        session.commit()
        yield session
    finally:
        session.close()
        trans.rollback()
        connection.close()


@pytest.fixture()
def client(db_session):
    from app.db.session import get_db  # late import to avoid circulars

    def _override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------- auth helpers ----------


@pytest.fixture()
def make_user(client):
    """Factory: registers + logs in a fresh user, returns (auth headers, user id)."""

    def _make(prefix: str = "user", password: str = "secret123"):
        email = f"{prefix}-{uuid.uuid4().hex[:8]}@example.com"
        reg = client.post("/auth/register", json={"email": email, "password": password})
        assert reg.status_code in (200, 201), reg.text
        login = client.post("/auth/login", json={"email": email, "password": password})
        assert login.status_code == 200, login.text
        headers = {"Authorization": f"Bearer {login.json()['access_token']}"}
        return headers, reg.json()["id"]

    return _make


@pytest.fixture()
def owner(make_user):
    return make_user("owner")


@pytest.fixture()
def owner_headers(owner):
    return owner[0]


@pytest.fixture()
def other_headers(make_user):
    return make_user("other")[0]


@pytest.fixture()
def space(client, owner_headers):
    r = client.post(
        "/spaces",
        json={"data": {"type": "spaces", "attributes": {"name": f"space-{uuid.uuid4().hex[:6]}"}}},
        headers=owner_headers,
    )
    assert r.status_code == 201, r.text
    return r.json()["data"]
