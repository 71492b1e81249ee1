"""Tests for the link store against a real SQLite database."""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest

from tinylink.core.errors import DuplicateCodeError, NotFoundError, StoreError
from tinylink.services.link_store import LinkStore


def test_create_then_read(store: LinkStore):
    store.create("abc123", "https://example.com")

    link = store.get_by_code("abc123")
    assert link.code == "abc123"
    assert link.target == "https://example.com"
    assert link.clicks == 0
    assert link.last_clicked is None
    assert link.created_at is not None


def test_lookup_ignores_case(store: LinkStore):
    store.create("MiXeD1", "https://example.com")

    assert store.get_by_code("mixed1").code == "MiXeD1"
    assert store.get_by_code("MIXED1").code == "MiXeD1"


def test_duplicate_code_rejected(store: LinkStore):
    store.create("dup123", "https://example.com/a")

    with pytest.raises(DuplicateCodeError):
        store.create("dup123", "https://example.com/b")

    assert store.get_by_code("dup123").target == "https://example.com/a"


def test_duplicate_code_rejected_case_insensitively(store: LinkStore):
    store.create("ABC123", "https://example.com/a")

    with pytest.raises(DuplicateCodeError):
        store.create("abc123", "https://example.com/b")

    assert len(store.list_all()) == 1


def test_get_unknown_code(store: LinkStore):
    with pytest.raises(NotFoundError):
        store.get_by_code("nope")


def test_list_all_newest_first(store: LinkStore):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    store.create("middle", "https://example.com/2", created_at=base + timedelta(hours=1))
    store.create("oldest", "https://example.com/1", created_at=base)
    store.create("newest", "https://example.com/3", created_at=base + timedelta(hours=2))

    assert [link.code for link in store.list_all()] == ["newest", "middle", "oldest"]


def test_list_all_empty(store: LinkStore):
    assert store.list_all() == []


def test_record_click_increments(store: LinkStore):
    store.create("clk123", "https://example.com")

    first = store.record_click("clk123")
    assert first.clicks == 1
    assert first.last_clicked is not None

    second = store.record_click("CLK123")
    assert second.clicks == 2
    assert second.last_clicked >= first.last_clicked

    assert store.get_by_code("clk123").clicks == 2


def test_record_click_unknown_code(store: LinkStore):
    with pytest.raises(NotFoundError):
        store.record_click("missing")


def test_concurrent_clicks_are_not_lost(store: LinkStore):
    store.create("hot123", "https://example.com")
    clicks = 40

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: store.record_click("hot123"), range(clicks)))

    assert store.get_by_code("hot123").clicks == clicks
    assert sorted(link.clicks for link in results) == list(range(1, clicks + 1))


def test_delete(store: LinkStore):
    store.create("del123", "https://example.com")

    store.delete("DEL123")

    with pytest.raises(NotFoundError):
        store.get_by_code("del123")


def test_delete_unknown_code_is_not_an_error(store: LinkStore):
    store.delete("ghost")
    store.delete("ghost")


def test_redirect_target_does_not_count_clicks(store: LinkStore):
    store.create("go1234", "https://example.com/landing")

    assert store.redirect_target("go1234") == "https://example.com/landing"
    assert store.redirect_target("GO1234") == "https://example.com/landing"

    link = store.get_by_code("go1234")
    assert link.clicks == 0
    assert link.last_clicked is None


def test_redirect_target_unknown_code(store: LinkStore):
    with pytest.raises(NotFoundError):
        store.redirect_target("nothing")


def test_storage_failure_is_wrapped(settings):
    from tinylink.database import build_engine

    # Schema never created, so every statement fails
    broken = LinkStore(build_engine(settings))
    try:
        with pytest.raises(StoreError):
            broken.list_all()
        with pytest.raises(StoreError):
            broken.create("abc123", "https://example.com")
        with pytest.raises(StoreError):
            broken.record_click("abc123")
    finally:
        broken.dispose()


def test_timestamps_are_utc_on_every_path(store: LinkStore):
    created = store.create("utc123", "https://example.com")
    fetched = store.get_by_code("utc123")
    clicked = store.record_click("utc123")

    assert created.created_at.tzinfo is not None
    assert fetched.created_at == created.created_at
    assert fetched.created_at.utcoffset() == timedelta(0)
    assert clicked.created_at == created.created_at
    assert clicked.last_clicked.utcoffset() == timedelta(0)
    assert store.get_by_code("utc123").last_clicked == clicked.last_clicked
    assert store.list_all()[0].created_at == created.created_at


def test_created_at_normalised_to_utc(store: LinkStore):
    plus_two = timezone(timedelta(hours=2))
    local = datetime(2024, 3, 1, 14, 30, tzinfo=plus_two)

    created = store.create("off123", "https://example.com", created_at=local)

    expected = datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)
    assert created.created_at == expected
    assert created.created_at.utcoffset() == timedelta(0)
    assert store.get_by_code("off123").created_at == expected
