import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from kanri.auth import hash_password
from kanri.database import get_session
from kanri.main import app
from kanri.models.user import User
from kanri.sessions import session_store


@pytest.fixture(autouse=True)
def _fast_hashing(monkeypatch):
    monkeypatch.setattr("kanri.config.settings.bcrypt_rounds", 4)


@pytest.fixture(autouse=True)
def _clear_sessions():
    session_store.clear()
    yield
    session_store.clear()


@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        # Seed admin user
        admin = User(
            username="admin",
            password_hash=hash_password("admin"),
            device_code="0000",
            role="admin",
        )
        session.add(admin)
        session.commit()
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    def get_session_override():
        yield session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def _login(username: str, password: str) -> TestClient:
    client = TestClient(app)
    response = client.post(
        "/api/login",
        json={"username": username, "password": password},
    )
    assert response.status_code == 200
    return client


@pytest.fixture
def admin_client(client: TestClient) -> TestClient:
    return _login("admin", "admin")


@pytest.fixture
def user(session: Session) -> User:
    user = User(
        username="testuser",
        password_hash=hash_password("testpass"),
        device_code="1234",
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def user_client(client: TestClient, user: User) -> TestClient:
    return _login("testuser", "testpass")
