"""Unit tests for storage hooks: warnings collected, failures never abort a save."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from cms.application.hooks import StorageEvent, StorageEventName, run_hooks
from cms.domain.models.content import Content, ContentStatus
from cms.infrastructure.messaging.content_events import ContentEventPublisher


async def search_index(event):
    return ["Search index is stale."]


async def broken_hook(event):
    raise RuntimeError("boom")


@pytest.fixture
def post_save_hooks():
    return [search_index]


async def test_hook_warnings_are_flashed_on_redirect(save_service, flash_bag, entries, existing_entry):
    await save_service.save({"title": "Hello"}, entries, 42, False, None, None)

    assert await flash_bag.pop_all() == [
        {"type": "success", "message": "The changes to the Entry have been saved."},
        {"type": "warning", "message": "Search index is stale."},
    ]


async def test_hook_warnings_are_discarded_on_ajax(save_service, flash_bag, entries, existing_entry):
    outcome = await save_service.save({"title": "Hello"}, entries, 42, False, "ajax", None)

    assert outcome.warnings == []
    assert await flash_bag.pop_all() == []


async def test_hook_warnings_are_returned_in_test_mode(save_service, entries, existing_entry):
    outcome = await save_service.save({"title": "Hello"}, entries, 42, False, "test", None)
    assert outcome.warnings == ["Search index is stale."]


async def test_failing_hook_becomes_warning():
    logger = MagicMock()
    event = StorageEvent(StorageEventName.POST_SAVE, Content(id=1, contenttype="entries"), created=False)

    warnings = await run_hooks([broken_hook, search_index], event, logger)

    assert warnings == ["broken_hook failed during post_save: boom", "Search index is stale."]
    logger.error.assert_called_once()
    assert logger.error.call_args[0][0] == "storage_hook_failed"


# ---------- Content event publisher ----------


def _event(name=StorageEventName.POST_SAVE, created=True):
    return StorageEvent(name, Content(id=3, contenttype="entries", status=ContentStatus.DRAFT, ownerid=7), created)


async def test_publisher_announces_inserted_record():
    publisher = AsyncMock()
    hook = ContentEventPublisher(publisher, "content_events")

    assert await hook(_event(created=True)) == []

    exchange, routing_key, message, message_id = publisher.publish.await_args[0]
    assert exchange == "content_events"
    assert routing_key == "content.inserted"
    assert message["id"] == 3
    assert message["status"] == "draft"
    assert message_id


async def test_publisher_uses_updated_routing_for_existing_record():
    publisher = AsyncMock()
    await ContentEventPublisher(publisher, "content_events")(_event(created=False))
    assert publisher.publish.await_args[0][1] == "content.updated"


async def test_publisher_ignores_pre_save():
    publisher = AsyncMock()
    assert await ContentEventPublisher(publisher, "x")(_event(name=StorageEventName.PRE_SAVE)) == []
    publisher.publish.assert_not_awaited()


async def test_broker_failure_is_reported_as_warning():
    publisher = AsyncMock()
    publisher.publish.side_effect = ConnectionError("broker down")

    warnings = await ContentEventPublisher(publisher, "content_events")(_event())

    assert warnings == ["The entries was saved, but listeners were not notified: broker down"]
