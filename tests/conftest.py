"""Pytest configuration: in-memory database, owners and an API client."""

import os

# Set test database URL BEFORE any imports from src
# This ensures the SessionLocal and engine never touch a real database file
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("LOCALE", "pt_BR")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from src.api.app import app  # noqa: E402
from src.models import Base, User  # noqa: E402
from src.services import build_engine, get_db  # noqa: E402


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Session bound to the per-test database."""
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def owner(db_session):
    """Active user owning the records under test."""
    user = User(name="Ana", email="ana@example.com", is_active=True)
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def other_owner(db_session):
    """Second active user, for isolation checks."""
    user = User(name="Bruno", email="bruno@example.com", is_active=True)
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def client(db_session):
    """Test client whose requests share the test session."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(owner):
    """Headers identifying ``owner`` to the API."""
    return {"X-User-Id": str(owner.id)}
