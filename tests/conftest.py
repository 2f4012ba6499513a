"""Pytest fixtures and configuration for taskdesk tests."""

import os

# Keep the application's own engine off the developer database file.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
import uuid

from taskdesk.database.database import Base, register_sqlite_functions
from taskdesk.database.repository import TaskRepository
from taskdesk.database.user_repository import UserRepository
from taskdesk.models.task import Task, TaskPriority
from taskdesk.models.user import User, UserRole


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


def _make_user(user_id: str, email: str, name: str, role: UserRole = UserRole.USER) -> User:
    now = datetime.utcnow()
    return User(
        id=user_id,
        email=email,
        name=name,
        role=role,
        is_active=True,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def test_user_id():
    """Primary test user ID."""
    return "test-user-123"


@pytest.fixture
def other_user_id():
    """Second regular user, used for isolation and sharing tests."""
    return "other-user-456"


@pytest.fixture
def admin_user_id():
    return "admin-user-789"


@pytest.fixture
def test_user(test_user_id):
    return _make_user(test_user_id, "test@example.com", "Test User")


@pytest.fixture
def other_user(other_user_id):
    return _make_user(other_user_id, "other@example.com", "Other User")


@pytest.fixture
def admin_user(admin_user_id):
    return _make_user(admin_user_id, "admin@example.com", "Admin User", role=UserRole.ADMIN)


@pytest.fixture(scope="function")
def db_session(test_user, other_user, admin_user):
    """Create a database session for testing.
    
    Uses an in-memory SQLite database that is created fresh for each test.
    Also creates the test users in the database.
    """
    from sqlalchemy import event
    from sqlalchemy.engine import Engine
    from taskdesk.database.models import UserDB
    
    # Create engine with StaticPool for in-memory database
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    
    # Enable SQLite foreign keys
    @event.listens_for(engine, "connect")
    def set_sqlite_pragmas(dbapi_conn, connection_record):
        register_sqlite_functions(dbapi_conn)
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
    
    # Create all tables
    Base.metadata.create_all(bind=engine)
    
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    
    # Create users (required for foreign key constraints)
    for user in (test_user, other_user, admin_user):
        session.add(UserDB.from_pydantic(user))
    session.commit()
    
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def task_repository(db_session: Session):
    """Create a TaskRepository instance for testing."""
    return TaskRepository(db_session)


@pytest.fixture
def user_repository(db_session: Session):
    """Create a UserRepository instance for testing."""
    return UserRepository(db_session)


@pytest.fixture
def sample_task_base(test_user_id):
    """Base task data for creating test tasks.
    
    Returns a dict with default task attributes that can be overridden.
    """
    now = datetime.utcnow()
    return {
        "id": str(uuid.uuid4()),
        "owner_id": test_user_id,
        "title": "Test Task",
        "description": "Test description",
        "completed": False,
        "priority": TaskPriority.MEDIUM,
        "category": "general",
        "due_date": None,
        "tags": [],
        "shared_from": None,
        "attachments": [],
        "subtasks": [],
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def make_task(task_repository, sample_task_base):
    """Insert a task built from sample_task_base with overrides."""
    def _make(**overrides):
        data = {**sample_task_base, "id": str(uuid.uuid4()), **overrides}
        return task_repository.insert(Task(**data))
    return _make


@pytest.fixture
def auth_state(test_user):
    """Mutable holder for the principal returned by the auth override."""
    return {"user": test_user}


@pytest.fixture
def login_as(auth_state):
    """Switch the authenticated principal used by test_client."""
    def _login(user: User):
        auth_state["user"] = user
    return _login


@pytest.fixture
def test_client(db_session: Session, auth_state):
    """Create a FastAPI test client with overridden database dependency and authentication."""
    from taskdesk.api.app import app
    from taskdesk.database.database import get_db
    from taskdesk.auth.dependencies import get_current_user
    
    # Override the get_db dependency to use our test database session
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it
    
    # Override authentication to return the current test principal
    def override_get_current_user():
        return auth_state["user"]
    
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user
    
    with TestClient(app) as client:
        yield client
    
    # Clean up dependency overrides
    app.dependency_overrides.clear()


@pytest.fixture
def unauthenticated_client(db_session: Session):
    """Test client that runs the real bearer-token dependency."""
    from taskdesk.api.app import app
    from taskdesk.database.database import get_db

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
