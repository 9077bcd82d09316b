import logging

import pytest
from fastapi.testclient import TestClient

from loyalty_api.app.core.config import Settings
from loyalty_api.app.core.db import check_connection
from loyalty_api.app.core.store import Store
from loyalty_api.app.main import create_app

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_check_connection_reports_missing_backend(caplog):
    caplog.set_level(logging.INFO)
    assert await check_connection(Store(), Settings(use_mock_db=False)) is False
    errors = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
    assert any("Database connection failed" in m for m in errors)
    assert any("USE_MOCK_DB=true" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_check_connection_with_memory_store(caplog):
    caplog.set_level(logging.INFO)
    assert await check_connection(Store(), Settings(use_mock_db=True)) is True
    assert any("Memory database connected successfully" in r.getMessage() for r in caplog.records)


def test_app_keeps_serving_without_relational_backend(caplog):
    caplog.set_level(logging.INFO)
    app = create_app(Settings(use_mock_db=False, seed_demo_data=True, environment="test"))
    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
        r = client.get("/api/v1/companies/")
        assert r.status_code == 200
        assert r.json()["count"] == 2
    messages = [r.getMessage() for r in caplog.records]
    assert any("Database connection failed" in m for m in messages)
    assert any("USE_MOCK_DB=true" in m for m in messages)


def test_requests_are_access_logged_once(client, caplog):
    caplog.set_level(logging.INFO)
    client.get("/health")
    access = [r.getMessage() for r in caplog.records if r.name == "loyalty_api.access"]
    assert len(access) == 1
    assert access[0].startswith("GET /health 200 ")
    assert logging.getLogger("uvicorn.access").level == logging.WARNING
