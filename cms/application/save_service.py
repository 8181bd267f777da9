"""Content save service, the single write path for a POSTed edit form. Orchestrates resolve, apply, guard, persist, audit, respond."""

import logging
import time
from typing import Any, List, Mapping, Optional, Sequence

from cms.application.content_repository import ContentRepository
from cms.application.exceptions import ContentNotFoundError
from cms.application.hooks import SaveHook, StorageEvent, StorageEventName, run_hooks
from cms.application.notifications import FlashBag
from cms.application.posted_values import PostedValues
from cms.application.responses import (
    JsonUpdateBuilder,
    RedirectOutcome,
    ReturnMode,
    SaveOutcome,
)
from cms.application.unit_of_work import UnitOfWork
from cms.application.url_generator import UrlGenerator
from cms.domain.models.content import Content, ContentStatus
from cms.domain.models.contenttype import ContentType
from cms.governance.audit_logger import AuditLogger
from cms.observability.metrics import MetricsCollector
from cms.security.exceptions import SecurityViolationError
from cms.security.permissions import PermissionService

COMMENT_KEY = "changelog-comment"
SPOOF_MESSAGE = "Don't try to spoof the id!"


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _is_spoofed(content: Content, content_id: Optional[int], form_values: Mapping[str, Any]) -> bool:
    """A persisted record must match both the requested id and any posted id."""
    if content.id is None:
        return False
    if _as_int(content_id) != content.id:
        return True
    posted_id = form_values.get("id")
    return posted_id not in (None, "") and _as_int(posted_id) != content.id


class ContentSaveService:
    """
    Application-layer orchestration only. No HTTP, no FastAPI, no direct infrastructure.
    Failure strategy: spoofing and ownership failures abort the save before any write;
    a failed record or change log write rolls both back; disallowed status transitions
    are clamped, never raised; storage hook failures become warnings.
    """

    def __init__(
        self,
        repository: ContentRepository,
        permissions: PermissionService,
        posted_values: PostedValues,
        audit_logger: AuditLogger,
        unit_of_work: UnitOfWork,
        flash: FlashBag,
        url_generator: UrlGenerator,
        json_builder: JsonUpdateBuilder,
        logger: logging.Logger,
        pre_save_hooks: Sequence[SaveHook] = (),
        post_save_hooks: Sequence[SaveHook] = (),
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self._repository = repository
        self._permissions = permissions
        self._posted_values = posted_values
        self._audit = audit_logger
        self._unit_of_work = unit_of_work
        self._flash = flash
        self._urls = url_generator
        self._json = json_builder
        self._logger = logger
        self._pre_save_hooks = list(pre_save_hooks)
        self._post_save_hooks = list(post_save_hooks)
        self._metrics = metrics

    async def save(
        self,
        form_values: Mapping[str, Any],
        contenttype: ContentType,
        content_id: Optional[int],
        new: bool,
        return_to: Optional[str],
        edit_referrer: Optional[str],
    ) -> SaveOutcome:
        """
        Single entry point: save one POSTed record and choose the response by return mode.
        Raises ContentNotFoundError, SecurityViolationError (ajax mode), AccessControlError,
        DomainValidationError and PersistenceFailureError.
        """
        started = time.perf_counter()
        mode = ReturnMode.parse(return_to)
        slug = contenttype.slug
        user = self._permissions.current_user()

        # Step 1: Resolve the record
        if content_id is not None:
            content = await self._repository.find(slug, content_id)
            if content is None:
                raise ContentNotFoundError(f"No {slug} record with id {content_id}")
            old_snapshot = content.snapshot()
            old_status = content.status
        else:
            content = await self._repository.create(slug, contenttype.default_status)
            old_snapshot = None
            old_status = ContentStatus.DRAFT

        # Step 2: Anti-spoofing guard
        if _is_spoofed(content, content_id, form_values):
            self._logger.warning(
                "content_id_spoofed",
                extra={
                    "contenttype": slug,
                    "requested_id": content_id,
                    "record_id": content.id,
                    "user_id": user.id,
                },
            )
            if self._metrics:
                self._metrics.increment("spoof_attempts", contenttype=slug)
            if mode == ReturnMode.AJAX:
                raise SecurityViolationError(SPOOF_MESSAGE)
            await self._flash.error(SPOOF_MESSAGE)
            return RedirectOutcome(url=self._urls.generate("dashboard"))

        # Step 3: Apply posted values
        await self._posted_values.apply(content, form_values, contenttype, user)

        # Step 4: Status-transition guard; a refused transition keeps the old status
        if not self._permissions.can_transition_status(
            old_status, content.status, slug, content_id, user
        ):
            self._logger.info(
                "status_transition_refused",
                extra={
                    "contenttype": slug,
                    "record_id": content_id,
                    "from_status": old_status.value,
                    "to_status": content.status.value,
                    "user_id": user.id,
                },
            )
            if self._metrics:
                self._metrics.increment("status_transition_refused", contenttype=slug)
            content.status = old_status

        # Step 5: Persist the record and its change log entry in one transaction
        created = old_snapshot is None
        warnings: List[str] = await run_hooks(
            self._pre_save_hooks,
            StorageEvent(StorageEventName.PRE_SAVE, content, created),
            self._logger,
        )
        comment = form_values.get(COMMENT_KEY) or ""
        try:
            await self._repository.save(content)
            await self._audit.log_change(
                contenttype=slug,
                record_id=content.id,
                new=content.snapshot(),
                old=old_snapshot,
                comment=str(comment),
                actor=user.id,
            )
            await self._unit_of_work.commit()
        except Exception:
            await self._unit_of_work.rollback()
            raise

        # Step 6: Post-save hooks see committed records only
        warnings += await run_hooks(
            self._post_save_hooks,
            StorageEvent(StorageEventName.POST_SAVE, content, created),
            self._logger,
        )

        # Step 7: Notify
        if new:
            await self._flash.success(f"The new {contenttype.singular_name} has been saved.")
            self._logger.info(
                "content_created",
                extra={"contenttype": slug, "record_id": content.id, "title": content.title},
            )
        else:
            await self._flash.success(f"The changes to the {contenttype.singular_name} have been saved.")
            self._logger.info(
                "content_saved",
                extra={"contenttype": slug, "record_id": content.id, "title": content.title},
            )
        if self._metrics:
            self._metrics.increment("content_saves", contenttype=slug)
            self._metrics.observe_latency(
                "save_latency_ms", (time.perf_counter() - started) * 1000, contenttype=slug
            )

        # Step 8: Respond
        return await self._respond(content, contenttype, mode, edit_referrer, warnings)

    async def _respond(
        self,
        content: Content,
        contenttype: ContentType,
        mode: Optional[ReturnMode],
        edit_referrer: Optional[str],
        warnings: List[str],
    ) -> SaveOutcome:
        if mode == ReturnMode.AJAX:
            return await self._json.build(content, contenttype, flush=True)
        if mode == ReturnMode.TEST:
            return await self._json.build(content, contenttype, flush=False, warnings=warnings)

        for warning in warnings:
            await self._flash.warning(warning)

        if mode == ReturnMode.NEW:
            return RedirectOutcome(
                url=self._urls.generate(
                    "editcontent",
                    {"contenttypeslug": contenttype.slug, "id": content.id, "#": mode.value},
                )
            )
        if mode == ReturnMode.SAVE_AND_NEW:
            return RedirectOutcome(
                url=self._urls.generate(
                    "editcontent",
                    {"contenttypeslug": contenttype.slug, "#": mode.value},
                )
            )

        # No return mode: back to the referring (possibly paged) overview
        if edit_referrer:
            return RedirectOutcome(url=edit_referrer)
        return RedirectOutcome(
            url=self._urls.generate("overview", {"contenttypeslug": contenttype.slug})
        )
