import pytest
import os
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from perfdesk.database import Base, get_db
from perfdesk.main import app
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# pysqlite needs to leave BEGIN to SQLAlchemy for savepoints to work
@event.listens_for(engine, "connect")
def _disable_driver_transactions(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None

@event.listens_for(engine, "begin")
def _emit_begin(conn):
    conn.exec_driver_sql("BEGIN")

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create tables once for the whole test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def db_session():
    """Get a clean database session for each test function with rollback safety."""
    connection = engine.connect()
    transaction = connection.begin()
    # Commits and rollbacks inside the app only touch a savepoint
    session = TestingSessionLocal(bind=connection, join_transaction_mode="create_savepoint")

    yield session

    session.close()
    transaction.rollback()
    connection.close()

def _make_user(db_session, email, role, name):
    from perfdesk.models.user import User
    from perfdesk.services import auth as auth_service

    user = User(
        name=name,
        email=email,
        hashed_password=auth_service.get_password_hash("Password123!"),
        role=role,
        is_active=True,
    )
    db_session.add(user)
    db_session.commit()
    return user

@pytest.fixture(scope="function")
def admin_user(db_session):
    from perfdesk.models.user import UserRole
    return _make_user(db_session, "admin@perfdesk.io", UserRole.ADMIN, "System Admin")

@pytest.fixture(scope="function")
def employee_user(db_session):
    from perfdesk.models.user import UserRole
    return _make_user(db_session, "asha@perfdesk.io", UserRole.EMPLOYEE, "Asha Rao")

@pytest.fixture(scope="function")
def other_employee(db_session):
    from perfdesk.models.user import UserRole
    return _make_user(db_session, "ben@perfdesk.io", UserRole.FIELD_STAFF, "Ben Ito")

@pytest.fixture(scope="function")
def auth_headers():
    """Helper fixture building bearer headers for a user."""
    from perfdesk.services.auth import create_access_token

    def _headers(user):
        token = create_access_token(data={
            "sub": user.email,
            "user_id": user.id,
            "role": user.role.value,
        })
        return {"Authorization": f"Bearer {token}"}
    return _headers

@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
