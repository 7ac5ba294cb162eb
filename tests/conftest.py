"""
Campus Events API - Test Configuration and Fixtures
"""
import os
import uuid
from datetime import date, timedelta
from typing import Callable, Generator, Optional

# Set testing environment before the app reads its settings
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite:///./test_campus_events.db'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['SEND_EMAILS'] = 'false'
os.environ['CLOUDINARY_CLOUD_NAME'] = ''

import pytest
from faker import Faker
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.main import app
from app.core.security import create_access_token
from app.db.database import Base, SessionLocal, engine, get_db
from app.models import Event, Profile, ProfileRole, Stall, StallStatus
from app.schemas.auth import ActorContext

fake = Faker()


@pytest.fixture(scope='function')
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create test client with database override"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_profile(db_session: Session) -> Callable[..., Profile]:
    """Factory for profiles; emails are unique per test"""
    def _make(role: ProfileRole = ProfileRole.STUDENT, email: Optional[str] = None, **kwargs) -> Profile:
        profile = Profile(
            id=str(uuid.uuid4()),
            email=email or f"{fake.user_name()}.{uuid.uuid4().hex[:6]}@campus.edu",
            full_name=kwargs.pop('full_name', fake.name()),
            role=role,
            **kwargs
        )
        db_session.add(profile)
        db_session.commit()
        db_session.refresh(profile)
        return profile

    return _make


@pytest.fixture
def make_event(db_session: Session) -> Callable[..., Event]:
    def _make(registration_open: bool = True, **kwargs) -> Event:
        start = kwargs.pop('start_date', date.today())
        event = Event(
            name=kwargs.pop('name', f"{fake.word().title()} Expo"),
            description=kwargs.pop('description', fake.sentence()),
            start_date=start,
            end_date=kwargs.pop('end_date', start + timedelta(days=2)),
            registration_open=registration_open,
            **kwargs
        )
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)
        return event

    return _make


@pytest.fixture
def make_stall(db_session: Session) -> Callable[..., Stall]:
    """Insert a stall directly, bypassing registration rules"""
    def _make(event: Event, leader: Profile, members=(), status: StallStatus = StallStatus.PENDING, **kwargs) -> Stall:
        stall = Stall(
            name=kwargs.pop('name', fake.company()),
            event_id=event.id,
            leader_id=leader.id,
            members=[m.id for m in members],
            status=status,
            attachments=[],
            **kwargs
        )
        db_session.add(stall)
        db_session.commit()
        db_session.refresh(stall)
        return stall

    return _make


def _actor_for(profile: Profile) -> ActorContext:
    return ActorContext(user_id=profile.id, role=profile.role, email=profile.email)


def _auth_headers_for(profile: Profile) -> dict:
    token = create_access_token(profile.id)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def actor_for() -> Callable[[Profile], ActorContext]:
    return _actor_for


@pytest.fixture
def auth_headers_for() -> Callable[[Profile], dict]:
    """Authorization header carrying a token for a profile"""
    return _auth_headers_for


@pytest.fixture
def student(make_profile) -> Profile:
    return make_profile(ProfileRole.STUDENT)


@pytest.fixture
def admin(make_profile) -> Profile:
    return make_profile(ProfileRole.ADMIN)


@pytest.fixture
def junior_admin(make_profile) -> Profile:
    return make_profile(ProfileRole.JUNIOR_ADMIN)


@pytest.fixture
def open_event(make_event) -> Event:
    return make_event(registration_open=True, name="Innovation Fair")
