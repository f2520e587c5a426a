"""
Test fixtures for the learning platform API.

Provides an in-memory SQLite database shared by the test session and the
FastAPI app, user factories, and auth headers.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import create_user_token, get_password_hash
from app.db.base import get_db
from app.db.init_db import seed_achievements
from app.main import app
from app.models import Base
from app.models.user import User

TEST_PASSWORD = "secret123"


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    """Direct database access for component tests."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    """API client bound to the test database."""
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
def achievements(db):
    """Seed the default achievement catalog."""
    seed_achievements(db)


@pytest.fixture
def make_user(db):
    """Factory creating users directly in the database."""
    counter = {"n": 0}

    def _make_user(role="student", username=None, **fields):
        counter["n"] += 1
        username = username or f"{role}_{counter['n']}"
        user = User(
            email=f"{username}@example.com",
            username=username,
            full_name=fields.pop("full_name", f"{role.title()} {counter['n']}"),
            hashed_password=get_password_hash(TEST_PASSWORD),
            role=role,
            is_active=fields.pop("is_active", True),
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def student(make_user):
    return make_user("student", username="alice", full_name="Alice Student", grade_level=8)


@pytest.fixture
def other_student(make_user):
    return make_user("student", username="bob", full_name="Bob Student", grade_level=9)


@pytest.fixture
def teacher(make_user):
    return make_user("teacher", username="tina", full_name="Tina Teacher")


@pytest.fixture
def admin(make_user):
    return make_user("admin", username="root_admin", full_name="Admin User")


def auth_headers(user):
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def student_headers(student):
    return auth_headers(student)


@pytest.fixture
def teacher_headers(teacher):
    return auth_headers(teacher)
