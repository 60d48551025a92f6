# tests/conftest.py
import os
import tempfile
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ["SKIP_DB_INIT"] = "1"

from deskbook.database import Base, get_db
from deskbook.dependencies import get_today
from deskbook.main import app
from deskbook.models.presence import Presence, PresenceMode
from deskbook.models.resource import Desk, ParkingSpot
from deskbook.models.user import User, UserRole
from deskbook.security.auth import create_access_token, hash_password

# a Monday
TODAY = date(2026, 2, 9)
PASSWORD = "secret123"


@pytest.fixture(scope="session")
def password_hash():
    return hash_password(PASSWORD)


@pytest.fixture(scope="function")
def test_db_session():
    tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
    tmp.close()
    db_url = f"sqlite:///{tmp.name}"

    engine = create_engine(db_url, connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
        os.unlink(tmp.name)


@pytest.fixture(scope="function")
def client(test_db_session):
    def override_get_db():
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


# —— Factories ——
@pytest.fixture
def make_user(test_db_session, password_hash):
    counter = {"n": 0}

    def _make_user(name=None, email=None, role=UserRole.USER, is_active=True):
        counter["n"] += 1
        n = counter["n"]
        u = User(
            name=name or f"User {n}",
            email=email or f"user{n}@example.com",
            password_hash=password_hash,
            role=role,
            is_active=is_active,
        )
        test_db_session.add(u)
        test_db_session.commit()
        return u
    return _make_user


@pytest.fixture
def make_desk(test_db_session):
    def _make_desk(code="A-01", name=None, location_label="Open Space", is_active=True):
        d = Desk(code=code, name=name or f"Desk {code}", location_label=location_label, is_active=is_active)
        test_db_session.add(d)
        test_db_session.commit()
        return d
    return _make_desk


@pytest.fixture
def make_spot(test_db_session):
    def _make_spot(code="P-01", name=None, is_active=True):
        s = ParkingSpot(code=code, name=name or f"Spot {code}", is_active=is_active)
        test_db_session.add(s)
        test_db_session.commit()
        return s
    return _make_spot


@pytest.fixture
def set_presence(test_db_session):
    """Write a presence row directly, past days included"""
    def _set_presence(user, day, mode=PresenceMode.OFFICE):
        p = Presence(user_id=user.id, date=day, mode=mode)
        test_db_session.add(p)
        test_db_session.commit()
        return p
    return _set_presence


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = create_access_token(user.id, user.role.value)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers
