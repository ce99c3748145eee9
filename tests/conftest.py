from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from redis_todo.main import create_app
from redis_todo.settings import Settings
from redis_todo.store import RedisTodoStore


class FakeRedis:
    """
    Records every command and keeps just enough list/TTL state to mimic Redis.
    Set ``fail_with`` to make every subsequent command raise.
    """

    def __init__(self) -> None:
        self.lists: Dict[str, List[str]] = {}
        self.ttls: Dict[str, int] = {}
        self.calls: List[tuple] = []
        self.fail_with: Optional[Exception] = None
        self.closed = False

    def _record(self, *call) -> None:
        self.calls.append(call)
        if self.fail_with is not None:
            raise self.fail_with

    def commands(self) -> List[str]:
        return [c[0] for c in self.calls]

    def lrange(self, key, start, end):
        self._record("lrange", key, start, end)
        items = self.lists.get(key, [])
        stop = len(items) if end == -1 else end + 1
        return list(items[start:stop])

    def lpush(self, key, *values):
        self._record("lpush", key, *values)
        items = self.lists.setdefault(key, [])
        for value in values:
            items.insert(0, value)
        return len(items)

    def rpush(self, key, *values):
        self._record("rpush", key, *values)
        items = self.lists.setdefault(key, [])
        items.extend(values)
        return len(items)

    def delete(self, *keys):
        self._record("delete", *keys)
        removed = 0
        for key in keys:
            if self.lists.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    def expire(self, key, seconds):
        self._record("expire", key, seconds)
        if key not in self.lists:
            return False
        self.ttls[key] = seconds
        return True

    def ttl(self, key):
        if key not in self.lists:
            return -2
        return self.ttls.get(key, -1)

    def ping(self):
        self._record("ping")
        return True

    def close(self):
        # Closing only drops pooled sockets; it never talks to the server.
        self.calls.append(("close",))
        self.closed = True


class TickingClock:
    """Returns a UTC time one second later on every call."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.current = start or datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(seconds=1)
        return now


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def redis_store(fake_redis: FakeRedis) -> RedisTodoStore:
    return RedisTodoStore(fake_redis)  # type: ignore[arg-type]


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        redis_host="localhost",
        redis_port=6379,
        store_backend="redis",
        app_host="127.0.0.1",
        app_port=3001,
        cors_allow_origins=["*"],
        app_env="development",
        log_level="WARNING",
    )


@pytest.fixture
def app(redis_store: RedisTodoStore, settings: Settings, clock: TickingClock):
    return create_app(store=redis_store, settings=settings, clock=clock)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
