import fakeredis
import pytest
from fastapi.testclient import TestClient

from jeeforces.config import Settings

from factories import make_session


@pytest.fixture
def db():
    session = make_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def client(redis_client):
    from jeeforces.main import create_app

    test_settings = Settings(DATABASE_URL="sqlite://", DB_INIT_MODE="create_all")
    app = create_app(test_settings, redis_client=redis_client)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def client_db(client):
    session = client.app.state.session_factory()
    try:
        yield session
    finally:
        session.close()
