from __future__ import annotations

import json
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from threading import RLock
from typing import Callable, Iterator, List, Optional, Sequence

import redis
import structlog
from redis.backoff import NoBackoff
from redis.retry import Retry

from .exceptions import StoreConnectionError, StoreError
from .models import TodoEntity
from .settings import TODOS_KEY, TODOS_TTL_SECONDS, Settings

log = structlog.get_logger()

_RECORD_FIELDS = ("id", "name", "task", "done", "createdAt")


@dataclass(frozen=True)
class StoreHealth:
    """
    Result of a store health probe.
    """
    connected: bool
    ping: Optional[str] = None


def _encode(record: TodoEntity) -> str:
    return json.dumps(record, separators=(",", ":"), ensure_ascii=False)


def _decode(raw) -> TodoEntity:
    try:
        record = json.loads(raw)
    except ValueError as exc:
        raise StoreError(f"undecodable todo element: {raw!r}") from exc
    if not isinstance(record, dict):
        raise StoreError(f"todo element is not an object: {raw!r}")
    # Older records carry the task under "todo".
    if "task" not in record and "todo" in record:
        record["task"] = record.pop("todo")
    missing = [field for field in _RECORD_FIELDS if field not in record]
    if missing:
        raise StoreError(f"todo element is missing {', '.join(missing)}: {raw!r}")
    return record  # type: ignore[return-value]


# PUBLIC_INTERFACE
class TodoStore(ABC):
    """Contract for the single-list todo storage backends."""

    @abstractmethod
    def read_all(self) -> List[TodoEntity]:
        """Return every record in list order (newest first), or [] if the list is absent."""

    @abstractmethod
    def append(self, record: TodoEntity) -> None:
        """Prepend one record and reset the list expiry."""

    @abstractmethod
    def replace_all(self, records: Sequence[TodoEntity]) -> None:
        """
        Delete the list, then repopulate it with ``records`` in the given order
        and reset the expiry. An empty sequence leaves the list deleted.
        """

    @abstractmethod
    def ping(self) -> None:
        """Round-trip a liveness check. Raise StoreConnectionError if unreachable."""

    @abstractmethod
    def health(self) -> StoreHealth:
        """Report whether the connection is open and, if so, whether it answers a ping."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying connection. Safe to call more than once."""


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except redis.exceptions.ConnectionError as exc:
        raise StoreConnectionError(f"{operation} failed: {exc}") from exc
    except redis.exceptions.RedisError as exc:
        raise StoreError(f"{operation} failed: {exc}") from exc


class RedisTodoStore(TodoStore):
    """
    Todo list stored as one JSON string per element of a Redis list.

    The push and the expire of a write are separate commands, so a crash
    between them can leave a list without expiry. Toggle and delete rewrite
    the whole list because Redis lists cannot update an element by value.
    """

    def __init__(
        self,
        client: redis.Redis,
        key: str = TODOS_KEY,
        ttl_seconds: int = TODOS_TTL_SECONDS,
    ) -> None:
        self._client = client
        self._key = key
        self._ttl = ttl_seconds
        self._closed = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisTodoStore":
        client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            decode_responses=True,
            # no retries: a failure surfaces on the first attempt
            retry=Retry(NoBackoff(), 0),
        )
        log.info("Redis client created", host=settings.redis_host, port=settings.redis_port)
        return cls(client)

    @property
    def key(self) -> str:
        return self._key

    def read_all(self) -> List[TodoEntity]:
        with _store_errors("read"):
            raw_items = self._client.lrange(self._key, 0, -1)
        return [_decode(raw) for raw in raw_items]

    def append(self, record: TodoEntity) -> None:
        with _store_errors("append"):
            self._client.lpush(self._key, _encode(record))
            self._client.expire(self._key, self._ttl)

    def replace_all(self, records: Sequence[TodoEntity]) -> None:
        payload = [_encode(r) for r in records]
        with _store_errors("replace"):
            self._client.delete(self._key)
            if payload:
                # RPUSH keeps the given order; LPUSH of many values would reverse it
                self._client.rpush(self._key, *payload)
                self._client.expire(self._key, self._ttl)

    def ping(self) -> None:
        if self._closed:
            raise StoreConnectionError("Redis connection is closed")
        with _store_errors("ping"):
            self._client.ping()

    def health(self) -> StoreHealth:
        if self._closed:
            return StoreHealth(connected=False)
        try:
            self.ping()
        except StoreConnectionError as exc:
            log.warning("Redis ping failed", error=str(exc))
            return StoreHealth(connected=False)
        return StoreHealth(connected=True, ping="PONG")

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        with _store_errors("close"):
            self._client.close()
        log.info("Redis connection closed")


class InMemoryTodoStore(TodoStore):
    """
    Thread-safe process-local store with the same expiry semantics as Redis.
    Suitable for running without Redis and for tests.
    """

    def __init__(
        self,
        ttl_seconds: int = TODOS_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lock = RLock()
        self._ttl = ttl_seconds
        self._clock = clock
        self._items: List[str] = []
        self._expires_at: Optional[float] = None
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise StoreConnectionError("in-memory store is closed")

    def _purge_expired(self) -> None:
        self._check_open()
        if self._expires_at is not None and self._clock() >= self._expires_at:
            self._items = []
            self._expires_at = None

    def _touch(self) -> None:
        self._expires_at = self._clock() + self._ttl

    def read_all(self) -> List[TodoEntity]:
        with self._lock:
            self._purge_expired()
            return [_decode(raw) for raw in self._items]

    def append(self, record: TodoEntity) -> None:
        with self._lock:
            self._purge_expired()
            self._items.insert(0, _encode(record))
            self._touch()

    def replace_all(self, records: Sequence[TodoEntity]) -> None:
        payload = [_encode(r) for r in records]
        with self._lock:
            self._check_open()
            self._items = []
            self._expires_at = None
            if payload:
                self._items = payload
                self._touch()

    def ping(self) -> None:
        self._check_open()

    def health(self) -> StoreHealth:
        if self._closed:
            return StoreHealth(connected=False)
        return StoreHealth(connected=True, ping="PONG")

    def close(self) -> None:
        self._closed = True


# PUBLIC_INTERFACE
def build_store(settings: Settings) -> TodoStore:
    """
    Factory to return the configured store based on settings.
    - redis: RedisTodoStore connected to REDIS_HOST:REDIS_PORT
    - memory: InMemoryTodoStore
    """
    if settings.store_backend == "memory":
        return InMemoryTodoStore()
    return RedisTodoStore.from_settings(settings)
