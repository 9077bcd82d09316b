import pytest
from fastapi.testclient import TestClient

from loyalty_api.app.core.config import Settings
from loyalty_api.app.core.seed import demo_data
from loyalty_api.app.core.store import Store
from loyalty_api.app.main import create_app


@pytest.fixture
def store():
    """A store loaded with the demo companies, programs, users and passes."""
    return Store(demo_data())


@pytest.fixture
def empty_store():
    return Store()


@pytest.fixture
def app():
    return create_app(Settings(seed_demo_data=True, use_mock_db=True, environment="test"))


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
