import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from taskflow.core.config import Settings
from taskflow.core.database import Database
from taskflow.main import create_app

# https so the Secure session cookie is stored and sent back
BASE_URL = "https://testserver"


@pytest.fixture
def settings():
    test_settings = Settings()
    test_settings.BCRYPT_ROUNDS = 4  # bcrypt minimum, keeps the suite fast
    test_settings.CORS_ORIGINS = []
    test_settings.LOG_LEVEL = "WARNING"
    return test_settings


@pytest.fixture
def database():
    """Fresh in-memory DB for every test"""
    database = Database("sqlite://", poolclass=StaticPool)
    database.connect()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    """DB session for direct service calls"""
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def app(settings, database):
    return create_app(settings, database)


@pytest.fixture
def make_client(app):
    """Each client has its own cookie jar, i.e. its own browser."""
    def _make():
        return TestClient(app, base_url=BASE_URL)
    return _make


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def login_as(make_client):
    """Sign up + log in a user, return a client holding their session cookie."""
    def _login(username, email, password="secret1"):
        user_client = make_client()
        signup_response = user_client.post(
            "/api/auth/signup",
            json={"username": username, "email": email, "password": password},
        )
        assert signup_response.status_code == 201
        login_response = user_client.post(
            "/api/auth/login",
            json={"email": email, "password": password},
        )
        assert login_response.status_code == 200
        return user_client
    return _login


@pytest.fixture
def alice(login_as):
    return login_as("alice", "a@x.com")


@pytest.fixture
def bob(login_as):
    return login_as("bob", "b@x.com")
