import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from quickcook.db import Datastore
from quickcook.main import create_app
from quickcook.models import Ingredient, User
from quickcook.security import Identity, hash_password
from quickcook.settings import Settings

# --- Test Database Setup ---

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

# StaticPool keeps a single connection so every session sees the same in-memory DB
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
datastore = Datastore(engine)

TEST_SETTINGS = Settings(
    database_url=SQLALCHEMY_DATABASE_URL,
    jwt_secret="test-secret-key-with-at-least-32-bytes",
    cors_origins=["http://testserver"],
)


@pytest.fixture
def settings():
    return TEST_SETTINGS


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test, drop after."""
    datastore.create_all()
    yield
    datastore.drop_all()


@pytest.fixture
def app(settings):
    return create_app(settings=settings, datastore=datastore)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session():
    """Direct database session for setup and assertions."""
    with datastore.session() as session:
        yield session


@pytest.fixture
def second_session():
    """An independent session, as held by a concurrent request."""
    with datastore.session() as session:
        yield session


def make_user(db_session, username="chef"):
    user = User(
        username=username,
        email=f"{username}-{uuid.uuid4().hex[:8]}@example.com",
        password_hash=hash_password("pw123456"),
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def owner(db_session):
    return make_user(db_session, "owner")


@pytest.fixture
def stranger(db_session):
    return make_user(db_session, "stranger")


@pytest.fixture
def owner_identity(owner):
    return Identity(user_id=owner.id, username=owner.username, email=owner.email)


@pytest.fixture
def stranger_identity(stranger):
    return Identity(user_id=stranger.id, username=stranger.username, email=stranger.email)


def _register(client, username, email=None, password="pw123456"):
    response = client.post(
        "/api/auth/register",
        json={
            "username": username,
            "email": email or f"{username}@example.com",
            "password": password,
        },
    )
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def register(client):
    """Register an account through the API and return its auth headers."""
    def _do(username, email=None, password="pw123456"):
        return _register(client, username, email, password)
    return _do


@pytest.fixture
def auth_headers(register):
    return register("chef1", "chef1@x.com")


@pytest.fixture
def other_headers(register):
    return register("chef2", "chef2@x.com")


@pytest.fixture
def fail_on_ingredient():
    """Make the datastore reject the insert of any ingredient whose name is in the yielded set."""
    names = set()

    def before_insert(mapper, connection, target):
        if target.name in names:
            raise SQLAlchemyError(f"simulated failure inserting {target.name}")

    event.listen(Ingredient, "before_insert", before_insert)
    yield names
    event.remove(Ingredient, "before_insert", before_insert)
