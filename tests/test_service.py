from datetime import datetime, timezone

import pytest
import redis

from redis_todo.exceptions import StoreConnectionError
from redis_todo.service import TodoService, iso_timestamp
from redis_todo.store import InMemoryTodoStore

FIXED = datetime(2024, 5, 1, 10, 15, 30, 123000, tzinfo=timezone.utc)


def test_iso_timestamp_matches_javascript_format():
    assert iso_timestamp(FIXED) == "2024-05-01T10:15:30.123Z"


def test_create_builds_record_from_one_clock_reading():
    service = TodoService(InMemoryTodoStore(), clock=lambda: FIXED)
    record = service.create_todo(" John ", " Learn ")
    assert record == {
        "id": "1714558530123",
        "name": "John",
        "task": "Learn",
        "done": False,
        "createdAt": "2024-05-01T10:15:30.123Z",
    }


def test_same_millisecond_creations_share_an_id():
    service = TodoService(InMemoryTodoStore(), clock=lambda: FIXED)
    first = service.create_todo("a", "one")
    second = service.create_todo("b", "two")
    assert first["id"] == second["id"]

    # Both records match the shared id, so a toggle flips both.
    service.toggle_todo(first["id"])
    assert [t["done"] for t in service.list_todos()] == [True, True]


def test_delete_keeps_other_records(clock):
    service = TodoService(InMemoryTodoStore(), clock=clock)
    keep = service.create_todo("a", "keep")
    drop = service.create_todo("b", "drop")
    service.delete_todo(drop["id"])
    assert service.list_todos() == [keep]


def test_health_payload(clock):
    service = TodoService(InMemoryTodoStore(), clock=clock)
    payload = service.health()
    assert payload["status"] == "healthy"
    assert payload["redis"] == "connected"
    assert payload["redis_ping"] == "PONG"


def test_health_payload_when_closed(clock):
    service = TodoService(InMemoryTodoStore(), clock=clock)
    service.close()
    payload = service.health()
    assert payload["redis"] == "disconnected"
    assert "redis_ping" not in payload


def test_open_fails_fast_when_store_unreachable(redis_store, fake_redis):
    fake_redis.fail_with = redis.exceptions.ConnectionError("Connection refused")
    service = TodoService(redis_store)
    with pytest.raises(StoreConnectionError):
        service.open()
