"""Fixtures for API unit tests: in-memory repositories and Redis, mock publisher, AsyncClient."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from cms.governance.audit_logger import AuditLogger
from cms.main import app
from cms.observability.metrics import MetricsCollector


@pytest.fixture
def mock_publisher():
    """Mock RabbitMQ publisher so tests do not connect to real broker."""
    p = AsyncMock()
    p.publish = AsyncMock(return_value=None)
    return p


@pytest.fixture
def api_metrics():
    return MetricsCollector()


@pytest.fixture
def app_with_overrides(
    contenttypes, content_repository, audit_repository, unit_of_work, fake_redis, mock_publisher, api_metrics
):
    """App with storage, Redis, publisher and content types overridden for testing."""
    from cms.api import dependencies

    app.dependency_overrides[dependencies.get_contenttypes] = lambda: contenttypes
    app.dependency_overrides[dependencies.get_content_repository] = lambda: content_repository
    app.dependency_overrides[dependencies.get_audit_logger] = lambda: AuditLogger(repository=audit_repository)
    app.dependency_overrides[dependencies.get_unit_of_work] = lambda: unit_of_work
    app.dependency_overrides[dependencies.get_redis_client] = lambda: fake_redis
    app.dependency_overrides[dependencies.get_publisher] = lambda: mock_publisher
    app.dependency_overrides[dependencies.get_metrics] = lambda: api_metrics
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app_with_overrides):
    """Async HTTP client for testing; uses overridden app."""
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def editor_headers():
    return {"X-User-ID": "7", "X-User-Roles": "editor", "X-User-Name": "editor"}


@pytest.fixture
def author_headers():
    return {"X-User-ID": "8", "X-User-Roles": "author"}
