import pytest

from library_api import create_app
from library_api.config import Config
from library_api.extensions import db

from tests.helpers import ADMIN_EMAIL, ADMIN_PASSWORD


@pytest.fixture
def app(tmp_path):
    # file db so worker threads in the concurrency tests share it
    class TestConfig(Config):
        TESTING = True
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'library_test.db'}"
        JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-bytes-for-hs256"
        ADMIN_EMAILS = [ADMIN_EMAIL]
        TX_MAX_ATTEMPTS = 50
        TX_TIMEOUT_SECONDS = 30.0
        TX_RETRY_BACKOFF_SECONDS = 0.01
        SQLITE_BUSY_TIMEOUT = 10.0

    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers(client):
    client.post("/auth/register", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    res = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    return {"Authorization": f"Bearer {res.get_json()['access_token']}"}

