"""Unit tests for the JSON snapshot returned to in-place editors."""

from datetime import datetime, timezone

import pytest

from cms.application.responses import JsonUpdateBuilder, ReturnMode, resolve_decimal_point, to_iso8601
from cms.domain.models.content import Content


@pytest.fixture
def decimal_point():
    return ","


async def test_comma_locale_round_trips_float_fields(
    save_service, content_repository, entries, existing_entry
):
    outcome = await save_service.save({"title": "Hello", "rating": "3,75"}, entries, 42, False, "ajax", None)

    assert content_repository.stored("entries", 42).values["rating"] == "3.75"
    assert outcome.payload["rating"] == "3,75"


async def test_dot_locale_leaves_float_fields_alone(flash_bag, entries):
    builder = JsonUpdateBuilder(flash_bag, ".")
    content = Content(id=1, contenttype="entries", values={"rating": "2.5"})

    outcome = await builder.build(content, entries, flush=True)

    assert outcome.payload["rating"] == "2.5"


async def test_dates_are_rendered_as_iso8601(flash_bag, entries):
    builder = JsonUpdateBuilder(flash_bag)
    content = Content(
        id=1,
        contenttype="entries",
        datechanged=datetime(2024, 1, 2, 3, 4, 5),
        datepublish="2024-02-03 10:00:00",
    )

    payload = (await builder.build(content, entries, flush=True)).payload

    assert payload["datechanged"] == "2024-01-02T03:04:05+00:00"
    assert payload["datepublish"] == "2024-02-03T10:00:00+00:00"
    assert payload["datedepublish"] is None


async def test_without_flush_warnings_are_flashed_and_returned(flash_bag, entries):
    builder = JsonUpdateBuilder(flash_bag)
    outcome = await builder.build(Content(id=1, contenttype="entries"), entries, flush=False, warnings=["careful"])

    assert outcome.warnings == ["careful"]
    assert await flash_bag.pop_all() == [{"type": "warning", "message": "careful"}]


def test_to_iso8601_keeps_unparseable_strings():
    assert to_iso8601("not a date") == "not a date"
    assert to_iso8601(datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)) == "2024-05-01T12:30:00+00:00"


def test_configured_decimal_point_wins():
    assert resolve_decimal_point(",") == ","
    assert resolve_decimal_point(None) in (".", ",")


@pytest.mark.parametrize(
    "raw,expected",
    [("ajax", ReturnMode.AJAX), ("saveandnew", ReturnMode.SAVE_AND_NEW), ("", None), (None, None), ("elsewhere", None)],
)
def test_return_mode_parse(raw, expected):
    assert ReturnMode.parse(raw) == expected
