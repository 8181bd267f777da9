"""FastAPI dependency injection: Redis, publisher, repositories, permissions, flash bag, save service."""

import logging
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from cms.api.url_generator import RouteUrlGenerator
from cms.application.content_repository import ContentRepository
from cms.application.posted_values import PostedValues
from cms.application.responses import JsonUpdateBuilder, resolve_decimal_point
from cms.application.save_service import ContentSaveService
from cms.application.unit_of_work import UnitOfWork
from cms.config.contenttypes import get_contenttype_registry
from cms.config.settings import get_settings
from cms.domain.models.contenttype import ContentType, ContentTypeRegistry
from cms.governance.audit_logger import AuditLogger
from cms.infrastructure.cache.flash_bag_redis import RedisFlashBag
from cms.infrastructure.cache.redis_client import RedisClient
from cms.infrastructure.database.audit_repository_db import DbAuditRepository
from cms.infrastructure.database.content_repository_db import DbContentRepository
from cms.infrastructure.database.session import get_db
from cms.infrastructure.database.unit_of_work_db import DbUnitOfWork
from cms.infrastructure.messaging.content_events import ContentEventPublisher
from cms.infrastructure.messaging.rabbitmq_publisher import RabbitMQPublisher
from cms.observability.metrics import MetricsCollector
from cms.security.exceptions import AccessControlError
from cms.security.permissions import PermissionService
from cms.security.users import User

_redis_client: RedisClient | None = None
_publisher: RabbitMQPublisher | None = None
_metrics: MetricsCollector | None = None


def get_redis_client() -> RedisClient:
    """Return singleton Redis client."""
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient()
    return _redis_client


def get_publisher() -> RabbitMQPublisher:
    """Return singleton RabbitMQ publisher."""
    global _publisher
    if _publisher is None:
        _publisher = RabbitMQPublisher()
    return _publisher


def get_metrics() -> MetricsCollector:
    """Return singleton metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


async def close_clients() -> None:
    """Release the Redis and RabbitMQ singletons on shutdown."""
    global _redis_client, _publisher
    if _publisher is not None:
        await _publisher.close()
        _publisher = None
    if _redis_client is not None:
        await _redis_client.close()
        _redis_client = None


def get_contenttypes() -> ContentTypeRegistry:
    return get_contenttype_registry()


def get_contenttype(
    contenttypeslug: str,
    contenttypes: Annotated[ContentTypeRegistry, Depends(get_contenttypes)],
) -> ContentType:
    """Resolve the path's content type; unknown slugs raise ContentTypeNotFoundError (404)."""
    return contenttypes.get(contenttypeslug)


def get_current_user(request: Request) -> User:
    """Extract the user from request.state (set by middleware)."""
    user = getattr(request.state, "user", None)
    if user is None:
        raise AccessControlError("No authenticated user for this request")
    return user


async def get_content_repository(
    session: Annotated[AsyncSession, Depends(get_db)],
) -> ContentRepository:
    return DbContentRepository(session=session)


async def get_audit_logger(
    session: Annotated[AsyncSession, Depends(get_db)],
) -> AuditLogger:
    return AuditLogger(repository=DbAuditRepository(session=session))


async def get_unit_of_work(
    session: Annotated[AsyncSession, Depends(get_db)],
) -> UnitOfWork:
    """Same cached per-request session as the repositories, so one commit covers both."""
    return DbUnitOfWork(session=session)


def get_permission_service(
    contenttypes: Annotated[ContentTypeRegistry, Depends(get_contenttypes)],
) -> PermissionService:
    return PermissionService(contenttypes)


def get_flash_bag(
    redis: Annotated[RedisClient, Depends(get_redis_client)],
    user: Annotated[User, Depends(get_current_user)],
) -> RedisFlashBag:
    return RedisFlashBag(redis, user.id, ttl=get_settings().flash_ttl_seconds)


def get_url_generator() -> RouteUrlGenerator:
    return RouteUrlGenerator(prefix=get_settings().backend_prefix)


async def get_save_service(
    repository: Annotated[ContentRepository, Depends(get_content_repository)],
    audit_logger: Annotated[AuditLogger, Depends(get_audit_logger)],
    unit_of_work: Annotated[UnitOfWork, Depends(get_unit_of_work)],
    permissions: Annotated[PermissionService, Depends(get_permission_service)],
    contenttypes: Annotated[ContentTypeRegistry, Depends(get_contenttypes)],
    flash: Annotated[RedisFlashBag, Depends(get_flash_bag)],
    url_generator: Annotated[RouteUrlGenerator, Depends(get_url_generator)],
    publisher: Annotated[RabbitMQPublisher, Depends(get_publisher)],
    metrics: Annotated[MetricsCollector, Depends(get_metrics)],
) -> ContentSaveService:
    """Build ContentSaveService with injected collaborators; one instance per request."""
    settings = get_settings()
    return ContentSaveService(
        repository=repository,
        permissions=permissions,
        posted_values=PostedValues(repository, permissions, contenttypes),
        audit_logger=audit_logger,
        unit_of_work=unit_of_work,
        flash=flash,
        url_generator=url_generator,
        json_builder=JsonUpdateBuilder(flash, resolve_decimal_point(settings.decimal_point)),
        logger=logging.getLogger("cms.application.save_service"),
        post_save_hooks=[ContentEventPublisher(publisher, settings.content_events_exchange)],
        metrics=metrics if settings.enable_metrics else None,
    )
