import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["BROADCAST_REAPER_INTERVAL_SECONDS"] = "0"

from datetime import date, time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from eventhub.core.security import create_access_token, hash_password
from eventhub.core.timeutils import today
from eventhub.db.base import get_db
from eventhub.db.init_db import init_db
from eventhub.db.models.manager import EventManager
from eventhub.db.models.service import Service
from eventhub.main import app
from eventhub.schemas.availability import AvailabilitySet, TimeSlotIn
from eventhub.schemas.booking import BookingCreate
from eventhub.services import bookings as booking_service
from eventhub.services import calendar

PASSWORD = "Secret@123"


def future_day(month=7, day=12):
    """A date in next year, so it is always in the future."""
    return date(today().year + 1, month, day)


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_manager(db):
    counter = {"n": 0}

    def _make(name="Ravi Events"):
        counter["n"] += 1
        n = counter["n"]
        manager = EventManager(
            name=name,
            email=f"manager{n}@example.com",
            phone=f"+9198765432{n:02d}",
            password_hash=hash_password(PASSWORD),
            address="12 MG Road, Bengaluru",
        )
        db.add(manager)
        db.commit()
        db.refresh(manager)
        return manager

    return _make


@pytest.fixture
def manager(make_manager):
    return make_manager()


@pytest.fixture
def service(db, manager):
    svc = Service(
        manager_id=manager.id,
        title="Wedding decoration",
        category="Stage Decoration",
        description="Full stage and hall decoration",
        price=25000,
    )
    db.add(svc)
    db.commit()
    db.refresh(svc)
    return svc


@pytest.fixture
def auth_headers(manager):
    token = create_access_token({"sub": str(manager.id)})
    return {"Authorization": f"Bearer {token}"}


def slot(start, end, status="available"):
    return TimeSlotIn(start_time=start, end_time=end, status=status)


def set_full_day(db, manager_id, day):
    payload = AvailabilitySet(date=day, is_full_day=True)
    return calendar.set_availability(db, manager_id, day, payload)


def set_slots(db, manager_id, day, *slots):
    payload = AvailabilitySet(date=day, time_slots=list(slots))
    return calendar.set_availability(db, manager_id, day, payload)


def booking_payload(day, at=time(11, 0), service_ids=(), **overrides):
    data = dict(
        customer_name="Asha Rao",
        customer_phone="+919812345678",
        customer_email="asha@example.com",
        event_type="Wedding",
        date=day,
        time=at,
        location="Palace Grounds, Bengaluru",
        service_ids=list(service_ids),
        total_amount=40000,
    )
    data.update(overrides)
    return BookingCreate(**data)


def book(db, manager_id, day, service_id, at=time(11, 0), **overrides):
    return booking_service.create_booking(db, manager_id, booking_payload(day, at, [service_id], **overrides))
