"""
Shared fixtures: an in-memory SQLite database per test, services wired to
it, staff accounts and an API client bound to the same session.
"""

import os

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CACHE_BACKEND", "none")
os.environ.setdefault("PASSWORD_BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from frontdesk.api import deps
from frontdesk.core.cache import NullCache
from frontdesk.core.security import password_hasher, token_manager
from frontdesk.db.init_db import drop_db, init_db
from frontdesk.db.session import get_db
from frontdesk.main import app
from frontdesk.models.base.enums import RoomStatus, RoomType, UserRole
from frontdesk.repositories.user_repository import UserRepository
from frontdesk.schemas.room import CheckInRequest, GuestInput, RoomCreate
from frontdesk.services.history import HistoryService
from frontdesk.services.room import RoomService

PASSWORD = "correct-horse-42"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    drop_db(engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def room_service(db_session):
    return RoomService(db_session, NullCache())


@pytest.fixture
def history_service(db_session):
    return HistoryService(db_session)


@pytest.fixture
def make_room(room_service):
    """Create a room through the service and return its RoomRead."""

    def _make(number="101", room_type=RoomType.SINGLE, status=RoomStatus.FREE):
        result = room_service.create_room(RoomCreate(number=number, type=room_type, status=status))
        assert result.is_success, result.message
        return result.data

    return _make


@pytest.fixture
def check_in(room_service):
    """Check a guest into a room and return the updated RoomRead."""

    def _check_in(room_id, name="Ana Silva", phone=None, company=None, checkin_date=None, guest2=None):
        request = CheckInRequest(
            guest1=GuestInput(name=name, phone=phone, checkin_date=checkin_date),
            guest2=guest2,
            company=company,
        )
        result = room_service.check_in(room_id, request)
        assert result.is_success, result.message
        return result.data

    return _check_in


def _add_user(session, email, role):
    repo = UserRepository(session)
    user = repo.create_user(
        full_name=email.split("@")[0].title(),
        email=email,
        password_hash=password_hasher.hash(PASSWORD),
        role=role,
    )
    session.commit()
    return user


@pytest.fixture
def admin(db_session):
    return _add_user(db_session, "admin@hostel-frontdesk.es", UserRole.ADMIN)


@pytest.fixture
def worker(db_session):
    return _add_user(db_session, "worker@hostel-frontdesk.es", UserRole.WORKER)


@pytest.fixture
def pending(db_session):
    return _add_user(db_session, "newcomer@hostel-frontdesk.es", UserRole.PENDING)


def auth_headers(user):
    token = token_manager.create_access_token(subject=user.id, role=user.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def worker_headers(worker):
    return auth_headers(worker)


@pytest.fixture
def client(db_session):
    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[deps.get_room_list_cache] = NullCache
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def password():
    return PASSWORD
