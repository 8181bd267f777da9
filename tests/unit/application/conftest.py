"""Fixtures for application-layer tests: a save service wired to in-memory collaborators."""

from unittest.mock import MagicMock

import pytest

from cms.api.url_generator import RouteUrlGenerator
from cms.application.posted_values import PostedValues
from cms.application.responses import JsonUpdateBuilder
from cms.application.save_service import ContentSaveService
from cms.domain.models.content import Content, ContentStatus
from cms.governance.audit_logger import AuditLogger
from cms.infrastructure.cache.flash_bag_redis import RedisFlashBag
from cms.observability.metrics import MetricsCollector
from cms.security.permissions import PermissionService


@pytest.fixture
def current_user(editor):
    return editor


@pytest.fixture
def permissions(contenttypes, current_user, monkeypatch):
    service = PermissionService(contenttypes)
    monkeypatch.setattr(service, "current_user", lambda: current_user)
    return service


@pytest.fixture
def flash_bag(fake_redis, current_user):
    return RedisFlashBag(fake_redis, current_user.id)


@pytest.fixture
def metrics():
    return MetricsCollector()


@pytest.fixture
def logger():
    return MagicMock()


@pytest.fixture
def decimal_point():
    return "."


@pytest.fixture
def post_save_hooks():
    return []


@pytest.fixture
def save_service(
    content_repository,
    audit_repository,
    unit_of_work,
    permissions,
    contenttypes,
    flash_bag,
    metrics,
    logger,
    decimal_point,
    post_save_hooks,
):
    return ContentSaveService(
        repository=content_repository,
        permissions=permissions,
        posted_values=PostedValues(content_repository, permissions, contenttypes),
        audit_logger=AuditLogger(repository=audit_repository),
        unit_of_work=unit_of_work,
        flash=flash_bag,
        url_generator=RouteUrlGenerator(prefix="/bolt"),
        json_builder=JsonUpdateBuilder(flash_bag, decimal_point),
        logger=logger,
        post_save_hooks=post_save_hooks,
        metrics=metrics,
    )


@pytest.fixture
def existing_entry(content_repository):
    return content_repository.add(
        Content(
            id=42,
            contenttype="entries",
            status=ContentStatus.DRAFT,
            ownerid=7,
            values={
                "title": "Hello",
                "body": "<p>Old body</p>",
                "featured": 1,
                "rating": "1.5",
                "audience": ["public"],
            },
        )
    )
