import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import uuid
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

import main
from campus_notify.core.security import create_access_token
from campus_notify.models.base import Base
from campus_notify.models.user import Admin, Group, Student, Teacher
from campus_notify.utils import deps as deps_utils
from campus_notify.core.config import settings
from tests.helpers.asserts import actor_for

@pytest.fixture(scope="session")
def database_engine():
    url = settings.TEST_DATABASE_URL or "sqlite://"
    if url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    else:
        engine = create_engine(url)
    yield engine
    engine.dispose()

@pytest.fixture(scope="function")
def testing_session_factory(database_engine):
    Base.metadata.drop_all(bind=database_engine)
    Base.metadata.create_all(bind=database_engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=database_engine)

@pytest.fixture(scope="function")
def db_session(testing_session_factory):
    db = testing_session_factory()
    try:
        yield db
    finally:
        db.rollback()
        db.close()

@pytest.fixture(scope="function")
def client(db_session):
    # Re-initialize the app for each test function to ensure a clean state
    from importlib import reload
    reload(main)
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_transactional_db] = lambda: db_session
    with TestClient(main.app) as test_client:
        yield test_client

@pytest.fixture
def make_group(db_session):
    def _make_group(name=None):
        group = Group(name=name or f"Group {uuid.uuid4().hex[:6]}")
        db_session.add(group)
        db_session.commit()
        db_session.refresh(group)
        return group
    return _make_group

@pytest.fixture
def make_student(db_session):
    def _make_student(group=None, is_active=True, full_name="Test Student"):
        student = Student(full_name=full_name, group_id=group.id if group else None, is_active=is_active)
        db_session.add(student)
        db_session.commit()
        db_session.refresh(student)
        return student
    return _make_student

@pytest.fixture
def make_teacher(db_session):
    def _make_teacher(is_active=True, full_name="Test Teacher"):
        teacher = Teacher(full_name=full_name, is_active=is_active)
        db_session.add(teacher)
        db_session.commit()
        db_session.refresh(teacher)
        return teacher
    return _make_teacher

@pytest.fixture
def make_admin(db_session):
    def _make_admin(is_active=True, full_name="Test Admin"):
        admin = Admin(full_name=full_name, is_active=is_active)
        db_session.add(admin)
        db_session.commit()
        db_session.refresh(admin)
        return admin
    return _make_admin

@pytest.fixture
def auth_headers():
    def _auth_headers(account):
        actor = actor_for(account)
        token = create_access_token(user_id=actor.user_id, user_type=actor.user_type)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers
