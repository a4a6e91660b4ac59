# tests/conftest.py
import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ["SKIP_DB_INIT"] = "1"

from app.db import get_db
from app.dependencies import get_notifier
from app.errors import NotificationError
from app.models import Base, User, RoomType, SpaService, RestaurantMenu
from app.main import app


class RecordingNotifier:
    """Stands in for EmailNotifier; remembers what would have been sent."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def _record(self, kind, *args):
        if self.fail:
            raise NotificationError("mail relay unavailable")
        self.sent.append((kind, args))
        return True

    def send_room_booking_confirmation(self, *args):
        return self._record("room", *args)

    def send_spa_booking_confirmation(self, *args):
        return self._record("spa", *args)

    def send_restaurant_booking_confirmation(self, *args):
        return self._record("restaurant", *args)


@pytest.fixture(scope="function")
def test_db_session(tmp_path):
    # temp DB
    db_url = f"sqlite:///{tmp_path / 'resort.db'}"

    # test engine / Session
    engine = create_engine(db_url, connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()

@pytest.fixture
def notifier():
    return RecordingNotifier()

@pytest.fixture(scope="function")
def client(test_db_session, notifier):
    def override_get_db():
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()

# --- Factories ---
@pytest.fixture
def make_user(test_db_session):
    def _make_user(username="guest1", full_name="Guest One", email="guest1@example.com", phone=None, role="user"):
        u = User(username=username, full_name=full_name, email=email, phone=phone, role=role)
        test_db_session.add(u)
        test_db_session.commit()
        return u
    return _make_user

@pytest.fixture
def admin(make_user):
    return make_user(username="admin", full_name="Resort Admin", email="admin@example.com", role="admin")

@pytest.fixture
def make_room_type(test_db_session):
    def _make_room_type(name="Deluxe Room", price=299, capacity=2):
        r = RoomType(name=name, description=f"{name} description", price=price, capacity=capacity,
                     size=45, amenities=["Wi-Fi", "TV"])
        test_db_session.add(r)
        test_db_session.commit()
        return r
    return _make_room_type

@pytest.fixture
def make_spa_service(test_db_session):
    def _make_spa_service(name="Swedish Massage", price=120, duration=60):
        s = SpaService(name=name, description=f"{name} description", duration=duration, price=price)
        test_db_session.add(s)
        test_db_session.commit()
        return s
    return _make_spa_service

@pytest.fixture
def make_menu(test_db_session):
    def _make_menu(name="Signature Menu", price=120):
        m = RestaurantMenu(name=name, description=f"{name} description", price=price)
        test_db_session.add(m)
        test_db_session.commit()
        return m
    return _make_menu
